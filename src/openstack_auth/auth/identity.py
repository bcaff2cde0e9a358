"""
Generic Identity v3 authentication.

Wraps any IdentityMethod (password, token, federated) behind the
AuthMethod contract.
"""

from typing import Optional

from .base import AuthMethod, Clock
from .methods import FederatedMethod, IdentityMethod, PasswordMethod, TokenMethod, identity_url
from .types import Scope, Token
from ..core.constants import DEFAULT_INTERFACE
from ..core.transport import BaseTransport
from ..exceptions import ConfigError
from ..logger import get_logger

logger = get_logger('auth.identity')


class Identity(AuthMethod):
    """Authenticates against an Identity v3 endpoint with a chosen method."""

    def __init__(
        self,
        auth_url: str,
        method: IdentityMethod,
        scope: Optional[Scope] = None,
        region: Optional[str] = None,
        interface: str = DEFAULT_INTERFACE,
        transport: Optional[BaseTransport] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize Identity authenticator.

        Args:
            auth_url: Identity endpoint, with or without the /v3 suffix
            method: Authentication method to use for every exchange
            scope: Requested scope (None requests an unscoped token)
            region: Region used for endpoint lookups
            interface: Default endpoint interface
            transport: HTTP transport
            clock: Current-time callable (for testing)

        Raises:
            ConfigError: If auth_url is empty or the scope is contradictory
        """
        super().__init__(region=region, interface=interface, transport=transport, clock=clock)

        if not auth_url or not auth_url.strip():
            raise ConfigError("Identity authentication requires an auth_url")

        self.scope = scope or Scope()
        try:
            self.scope.validate()
        except ValueError as e:
            raise ConfigError(str(e)) from e

        self.auth_url = auth_url.strip()
        self.method = method

        scope_desc = "unscoped" if self.scope.is_empty else f"scope={self.scope.to_payload()}"
        logger.info(f"{type(self).__name__} initialized for {self.auth_url} ({method.name}, {scope_desc})")

    @property
    def identity_root(self) -> str:
        return identity_url(self.auth_url)

    def _authenticate(self) -> Token:
        return self.method.exchange(self.transport, self.identity_root, self.scope)

    # ---------- constructors ----------

    @staticmethod
    def password(
        auth_url: str,
        username: Optional[str],
        password: str,
        *,
        user_id: Optional[str] = None,
        user_domain_name: Optional[str] = None,
        user_domain_id: Optional[str] = None,
        scope: Optional[Scope] = None,
        **kwargs,
    ) -> 'Identity':
        """Identity using the password method."""
        method = PasswordMethod(
            password=password,
            username=username,
            user_id=user_id,
            user_domain_name=user_domain_name,
            user_domain_id=user_domain_id,
        )
        return Identity(auth_url, method, scope=scope, **kwargs)

    @staticmethod
    def token(
        auth_url: str,
        token: str,
        *,
        scope: Optional[Scope] = None,
        **kwargs,
    ) -> 'Identity':
        """Identity using a pre-issued token."""
        return Identity(auth_url, TokenMethod(token=token), scope=scope, **kwargs)

    @staticmethod
    def federated(
        auth_url: str,
        identity_provider: str,
        protocol: str,
        access_token: str,
        *,
        scope: Optional[Scope] = None,
        **kwargs,
    ) -> 'Identity':
        """Identity using an OpenID Connect access token."""
        method = FederatedMethod(
            identity_provider=identity_provider,
            protocol=protocol,
            access_token=access_token,
        )
        return Identity(auth_url, method, scope=scope, **kwargs)
