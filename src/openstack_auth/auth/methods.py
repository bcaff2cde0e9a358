"""
Identity v3 authentication methods.

Each method knows how to exchange its credentials for a token against an
Identity v3 endpoint:

- PasswordMethod: user name (or id) and password
- TokenMethod: a previously issued token
- FederatedMethod: an OpenID Connect access token via OS-FEDERATION
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timezone
from typing import Any, Dict, Optional

from .error_parser import raise_for_identity_status
from .types import Scope, Token
from ..core.catalog import ServiceCatalog
from ..core.constants import (
    DEFAULT_DOMAIN,
    FEDERATION_AUTH_PATH,
    IDENTITY_API_VERSION,
    SUBJECT_TOKEN_HEADER,
    TOKENS_PATH,
)
from ..core.schema import parse_token_body
from ..core.transport import BaseTransport, TransportResponse
from ..exceptions import ConfigError, MalformedResponse
from ..logger import get_logger, sanitize_token

logger = get_logger('auth.methods')


def identity_url(auth_url: str) -> str:
    """
    Normalize an auth URL to the versioned Identity v3 root.

    'https://keystone:5000' and 'https://keystone:5000/v3/' both become
    'https://keystone:5000/v3'.
    """
    url = auth_url.rstrip('/')
    if not url.endswith(f"/{IDENTITY_API_VERSION}"):
        url = f"{url}/{IDENTITY_API_VERSION}"
    return url


def token_from_response(response: TransportResponse, action: str) -> Token:
    """
    Build a Token from an Identity v3 token response.

    The token id is carried in the X-Subject-Token header; expiry, catalog
    and ownership come from the JSON body.

    Raises:
        InvalidCredentials, NetworkFailure: For rejected or failed exchanges
        MalformedResponse: If the header is missing or the body has the wrong shape
    """
    raise_for_identity_status(response, action)

    value = response.headers.get(SUBJECT_TOKEN_HEADER)
    if not value:
        error_msg = f"Identity endpoint response to {action} lacks the {SUBJECT_TOKEN_HEADER} header"
        logger.error(error_msg)
        raise MalformedResponse(error_msg, status_code=response.status_code)

    try:
        data = response.json()
    except (ValueError, UnicodeDecodeError) as e:
        error_msg = f"Identity endpoint returned a non-JSON body to {action}: {e}"
        logger.error(error_msg)
        raise MalformedResponse(error_msg, status_code=response.status_code) from e

    body = parse_token_body(data)

    expires_at = body.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    logger.debug(
        f"Token {sanitize_token(value)} issued via {body.methods} "
        f"with {len(body.catalog)} catalog entries"
    )

    return Token(
        value=value,
        expires_at=expires_at,
        catalog=ServiceCatalog(body.catalog),
        user_id=body.user.id if body.user else None,
        project_id=body.project.id if body.project else None,
        methods=tuple(body.methods),
    )


class IdentityMethod(ABC):
    """A way of proving identity to an Identity v3 endpoint."""

    name: str = ''

    @abstractmethod
    def exchange(self, transport: BaseTransport, identity_root: str, scope: Scope) -> Token:
        """
        Exchange credentials for a token.

        Args:
            transport: HTTP transport
            identity_root: Versioned identity URL (see identity_url)
            scope: Requested scope; empty for an unscoped token

        Returns:
            Newly issued token
        """
        pass


class TokenRequestMethod(IdentityMethod):
    """Method authenticating with a single POST to /v3/auth/tokens."""

    @abstractmethod
    def identity_payload(self) -> Dict[str, Any]:
        """Render the method's entry in the ``identity`` object."""
        pass

    def request_body(self, scope: Scope) -> Dict[str, Any]:
        auth: Dict[str, Any] = {
            'identity': {
                'methods': [self.name],
                self.name: self.identity_payload(),
            }
        }
        scope_payload = scope.to_payload()
        if scope_payload is not None:
            auth['scope'] = scope_payload
        return {'auth': auth}

    def exchange(self, transport: BaseTransport, identity_root: str, scope: Scope) -> Token:
        url = f"{identity_root}/{TOKENS_PATH}"
        logger.debug(f"Requesting {self.name} token from {url}")
        response = transport.post_json(url, self.request_body(scope))
        return token_from_response(response, f"{self.name} authentication")


@dataclass(frozen=True)
class PasswordMethod(TokenRequestMethod):
    """Password authentication for a user identified by name or id."""

    password: str = field(repr=False, default='')
    username: Optional[str] = None
    user_id: Optional[str] = None
    user_domain_name: Optional[str] = None
    user_domain_id: Optional[str] = None

    name = 'password'

    def __post_init__(self):
        if not self.password:
            raise ConfigError("Password authentication requires a password")
        if not (self.username or self.user_id):
            raise ConfigError("Password authentication requires a username or user_id")

    def identity_payload(self) -> Dict[str, Any]:
        if self.user_id:
            user: Dict[str, Any] = {'id': self.user_id}
        else:
            if self.user_domain_id:
                domain = {'id': self.user_domain_id}
            else:
                domain = {'name': self.user_domain_name or DEFAULT_DOMAIN}
            user = {'name': self.username, 'domain': domain}
        user['password'] = self.password
        return {'user': user}


@dataclass(frozen=True)
class TokenMethod(TokenRequestMethod):
    """Authentication with an already issued token (re-scoping or renewal)."""

    token: str = field(repr=False, default='')

    name = 'token'

    def __post_init__(self):
        if not self.token:
            raise ConfigError("Token authentication requires a token")

    def identity_payload(self) -> Dict[str, Any]:
        return {'id': self.token}


@dataclass(frozen=True)
class FederatedMethod(IdentityMethod):
    """
    Federated authentication with an OpenID Connect access token.

    The access token is exchanged for an unscoped Keystone token at the
    identity provider's protocol endpoint. When a scope is requested, the
    unscoped token is then re-scoped with the token method.
    """

    identity_provider: str = ''
    protocol: str = ''
    access_token: str = field(repr=False, default='')

    name = 'federated'

    def __post_init__(self):
        missing = [
            attr for attr in ('identity_provider', 'protocol', 'access_token')
            if not getattr(self, attr)
        ]
        if missing:
            raise ConfigError(f"Federated authentication requires {missing}")

    def exchange(self, transport: BaseTransport, identity_root: str, scope: Scope) -> Token:
        url = f"{identity_root}/" + FEDERATION_AUTH_PATH.format(
            identity_provider=self.identity_provider,
            protocol=self.protocol,
        )
        logger.debug(f"Exchanging access token at {url}")

        response = transport.request(
            'POST', url, headers={'Authorization': f"Bearer {self.access_token}"}
        )
        unscoped = token_from_response(response, 'federated authentication')

        if scope.is_empty:
            return unscoped

        logger.debug("Re-scoping federated token")
        return TokenMethod(token=unscoped.value).exchange(transport, identity_root, scope)
