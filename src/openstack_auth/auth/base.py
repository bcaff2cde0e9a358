"""
Base AuthMethod interface.

An AuthMethod produces a valid token on demand, caches it until it
expires, and resolves service endpoints from the token's catalog.
Concrete variants only implement the exchange itself (``_authenticate``);
caching, refresh serialization and cloning live here.
"""

import copy
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .types import AuthState, Token
from ..core.constants import AUTH_TOKEN_HEADER, DEFAULT_INTERFACE
from ..core.transport import BaseTransport, RequestsTransport, TransportResponse
from ..exceptions import EndpointNotFound
from ..logger import get_logger, sanitize_token

logger = get_logger('auth.base')

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class AuthMethod(ABC):
    """
    Abstract authentication method.

    The cached token is guarded by a per-instance lock: at most one exchange
    runs at a time, and callers arriving during an exchange wait for it and
    then receive the freshly cached token. The cache is only written after a
    successful exchange, so failures never leave partial state behind.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        interface: str = DEFAULT_INTERFACE,
        transport: Optional[BaseTransport] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize shared state.

        Args:
            region: Region used for endpoint lookups (None matches any region)
            interface: Default endpoint interface ('public', 'internal', 'admin')
            transport: HTTP transport; a RequestsTransport is created on first use if None
            clock: Callable returning the current aware datetime (for testing)
        """
        self._region = region
        self._interface = interface or DEFAULT_INTERFACE
        self._transport = transport
        self._clock = clock or utcnow
        self._token: Optional[Token] = None
        self._lock = threading.Lock()

    # ---------- variant hook ----------

    @abstractmethod
    def _authenticate(self) -> Token:
        """
        Perform the authentication exchange.

        Called with the instance lock held.

        Returns:
            Newly issued token

        Raises:
            InvalidCredentials, NetworkFailure, MalformedResponse
        """
        pass

    # ---------- properties ----------

    @property
    def region(self) -> Optional[str]:
        return self._region

    @property
    def interface(self) -> str:
        return self._interface

    @property
    def transport(self) -> BaseTransport:
        if self._transport is None:
            self._transport = RequestsTransport()
        return self._transport

    @property
    def cached_token(self) -> Optional[Token]:
        """The cached token, expired or not, without triggering an exchange."""
        return self._token

    @property
    def state(self) -> AuthState:
        token = self._token
        if token is None:
            return AuthState.UNAUTHENTICATED
        if token.is_expired(self._now()):
            return AuthState.EXPIRED
        return AuthState.AUTHENTICATED

    def _now(self) -> datetime:
        """UTC 'now' helper (centralized for testing)."""
        return self._clock()

    # ---------- token lifecycle ----------

    def acquire_token(self) -> Token:
        """
        Return a currently valid token, authenticating if needed.

        Returns:
            Valid token

        Raises:
            InvalidCredentials: If the identity endpoint rejects the exchange
            NetworkFailure: On transport errors (not retried)
            MalformedResponse: If the response cannot be parsed into a token
        """
        with self._lock:
            token = self._token
            if token is not None and not token.is_expired(self._now()):
                logger.debug("Using cached token")
                return token

            if token is None:
                logger.info(f"Authenticating with {type(self).__name__}")
            else:
                logger.info(f"Cached token expired at {token.expires_at}, re-authenticating")

            return self._store(self._authenticate())

    def refresh(self) -> Token:
        """
        Force a new exchange regardless of the cached token.

        Raises:
            InvalidCredentials, NetworkFailure, MalformedResponse
        """
        with self._lock:
            logger.info(f"Refreshing token for {type(self).__name__}")
            return self._store(self._authenticate())

    def invalidate(self) -> None:
        """Drop the cached token; the next acquire_token re-authenticates."""
        with self._lock:
            self._token = None
        logger.debug("Cached token invalidated")

    def _store(self, token: Token) -> Token:
        self._token = token
        expiry = token.expires_at.isoformat() if token.expires_at else 'never'
        logger.info(f"Token {sanitize_token(token.value)} obtained, valid until {expiry}")
        return token

    def get_token(self) -> str:
        """
        Get or refresh the token value.

        Returns:
            Token string
        """
        return self.acquire_token().value

    def authorization_headers(self) -> Dict[str, str]:
        """
        Headers to attach to API requests.

        Returns:
            ``{'X-Auth-Token': <token>}``, or an empty dict for the empty token
        """
        token = self.acquire_token()
        if not token.value:
            return {}
        return {AUTH_TOKEN_HEADER: token.value}

    # ---------- endpoints ----------

    def default_endpoint(self, service_type: str) -> Optional[str]:
        """
        Resolve a service endpoint from the cached catalog.

        Never triggers an exchange.

        Returns:
            Endpoint URL, or None if no catalog has been fetched or the
            service is not in it
        """
        token = self._token
        if token is None:
            return None
        return token.catalog.find_endpoint(service_type, self._interface, self._region)

    def get_endpoint(self, service_type: str, interface: Optional[str] = None) -> str:
        """
        Resolve a service endpoint, authenticating first if needed.

        Args:
            service_type: Service type or name (e.g., 'compute')
            interface: Override of the default interface

        Raises:
            EndpointNotFound: If the catalog has no matching endpoint
            InvalidCredentials, NetworkFailure, MalformedResponse
        """
        interface = interface or self._interface
        token = self.acquire_token()
        url = token.catalog.find_endpoint(service_type, interface, self._region)
        if url is None:
            error = EndpointNotFound(service_type, interface, self._region)
            logger.error(error.message)
            raise error
        return url

    # ---------- requests ----------

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> TransportResponse:
        """
        Issue an HTTP request with the auth header attached.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Extra headers
            **kwargs: Passed to the transport (json, timeout)

        Raises:
            NetworkFailure: On transport errors
            InvalidCredentials, MalformedResponse: If authentication fails
        """
        merged = dict(headers or {})
        merged.update(self.authorization_headers())
        return self.transport.request(method, url, headers=merged, **kwargs)

    # ---------- cloning ----------

    def clone_boxed(self) -> 'AuthMethod':
        """
        Duplicate this method, keeping its concrete type.

        The clone has the same credential configuration, transport and clock,
        starts with the current token value, and owns its own cache and lock:
        refreshing one instance never changes the other's token.
        """
        with self._lock:
            clone = copy.copy(self)
        clone._lock = threading.Lock()
        logger.debug(f"Cloned {type(self).__name__}")
        return clone

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(region={self._region!r}, "
            f"interface={self._interface!r}, state={self.state.value!r})"
        )
