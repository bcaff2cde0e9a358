"""
Username/password authentication against Identity v3.
"""

from typing import Optional

from .base import Clock
from .identity import Identity
from .methods import PasswordMethod
from .types import Scope
from ..core.constants import DEFAULT_DOMAIN, DEFAULT_INTERFACE
from ..core.transport import BaseTransport


class PasswordAuth(Identity):
    """
    Password authentication scoped to a project (or domain).

    Example:
        auth = PasswordAuth('https://keystone:5000', 'demo', 's3cret', 'demo-project')
        token = auth.acquire_token()
    """

    def __init__(
        self,
        auth_url: str,
        username: Optional[str],
        password: str,
        project_name: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
        user_domain_name: str = DEFAULT_DOMAIN,
        user_domain_id: Optional[str] = None,
        project_id: Optional[str] = None,
        project_domain_name: str = DEFAULT_DOMAIN,
        project_domain_id: Optional[str] = None,
        domain_name: Optional[str] = None,
        domain_id: Optional[str] = None,
        region: Optional[str] = None,
        interface: str = DEFAULT_INTERFACE,
        transport: Optional[BaseTransport] = None,
        clock: Optional[Clock] = None,
    ):
        method = PasswordMethod(
            password=password,
            username=username,
            user_id=user_id,
            user_domain_name=user_domain_name,
            user_domain_id=user_domain_id,
        )
        scope = Scope(
            project_id=project_id,
            project_name=project_name,
            project_domain_id=project_domain_id,
            project_domain_name=project_domain_name if (project_id or project_name) else None,
            domain_id=domain_id,
            domain_name=domain_name,
        )
        super().__init__(
            auth_url,
            method,
            scope=scope,
            region=region,
            interface=interface,
            transport=transport,
            clock=clock,
        )

    @property
    def username(self) -> Optional[str]:
        return self.method.username

    @property
    def project_name(self) -> Optional[str]:
        return self.scope.project_name
