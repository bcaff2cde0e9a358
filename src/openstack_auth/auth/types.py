"""
Type definitions for tokens, scopes and authentication state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..core.catalog import EMPTY_CATALOG, ServiceCatalog
from ..core.constants import DEFAULT_DOMAIN, TOKEN_EXPIRY_BUFFER
from ..logger import sanitize_token


class AuthState(str, Enum):
    """Lifecycle state of an AuthMethod instance."""
    UNAUTHENTICATED = 'unauthenticated'
    AUTHENTICATED = 'authenticated'
    EXPIRED = 'expired'


@dataclass(frozen=True)
class Token:
    """
    An issued token.

    Attributes:
        value: Opaque token id sent in X-Auth-Token
        expires_at: Timezone-aware expiry, or None if the token never expires
        catalog: Service catalog returned with the token
        user_id: Owner of the token, if known
        project_id: Project the token is scoped to, if any
        methods: Authentication methods that produced the token
    """
    value: str
    expires_at: Optional[datetime] = None
    catalog: ServiceCatalog = field(default=EMPTY_CATALOG)
    user_id: Optional[str] = None
    project_id: Optional[str] = None
    methods: Tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> 'Token':
        """The sentinel token handed out when no authentication is used."""
        return cls(value='')

    def is_expired(self, now: datetime, buffer: timedelta = TOKEN_EXPIRY_BUFFER) -> bool:
        """
        Check whether the token must be refreshed.

        A token is treated as expired once ``now + buffer`` reaches its expiry.
        """
        if self.expires_at is None:
            return False
        return now + buffer >= self.expires_at

    def __repr__(self) -> str:
        # Never expose the token value in reprs
        return (
            f"Token(value={sanitize_token(self.value)!r}, expires_at={self.expires_at!r}, "
            f"project_id={self.project_id!r}, services={len(self.catalog)})"
        )


@dataclass(frozen=True)
class Scope:
    """
    Authorization scope for an Identity v3 token.

    Either a project (by id, or by name plus project domain) or a domain.
    An empty scope requests an unscoped token.
    """
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    project_domain_id: Optional[str] = None
    project_domain_name: Optional[str] = None
    domain_id: Optional[str] = None
    domain_name: Optional[str] = None

    @property
    def is_project(self) -> bool:
        return bool(self.project_id or self.project_name)

    @property
    def is_domain(self) -> bool:
        return bool(self.domain_id or self.domain_name)

    @property
    def is_empty(self) -> bool:
        return not (self.is_project or self.is_domain)

    def validate(self) -> None:
        """
        Reject contradictory scopes.

        Raises:
            ValueError: If both a project and a domain scope are set
        """
        if self.is_project and self.is_domain:
            raise ValueError("Scope cannot target both a project and a domain")

    def to_payload(self) -> Optional[Dict[str, Any]]:
        """Render the ``scope`` object of a v3 auth request, or None for unscoped."""
        if self.is_project:
            if self.project_id:
                return {'project': {'id': self.project_id}}
            if self.project_domain_id:
                domain = {'id': self.project_domain_id}
            else:
                domain = {'name': self.project_domain_name or DEFAULT_DOMAIN}
            return {'project': {'name': self.project_name, 'domain': domain}}

        if self.is_domain:
            if self.domain_id:
                return {'domain': {'id': self.domain_id}}
            return {'domain': {'name': self.domain_name}}

        return None
