"""
Pass-through authentication for clouds without an identity service.
"""

from typing import Optional

from .base import AuthMethod, Clock
from .types import Token
from ..core.constants import DEFAULT_INTERFACE
from ..core.transport import BaseTransport
from ..exceptions import EndpointNotFound
from ..logger import get_logger

logger = get_logger('auth.noauth')


class NoAuth(AuthMethod):
    """
    Authentication method that never authenticates.

    Hands out the empty token and never contacts any endpoint. Used for
    deployments without Keystone or behind an authenticating proxy. An
    optional fixed endpoint is returned for every service lookup.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        region: Optional[str] = None,
        interface: str = DEFAULT_INTERFACE,
        transport: Optional[BaseTransport] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__(region=region, interface=interface, transport=transport, clock=clock)
        self.endpoint = endpoint.rstrip('/') if endpoint else None
        self._token = Token.empty()

        logger.info("NoAuth initialized" + (f" with endpoint {self.endpoint}" if self.endpoint else ""))

    def _authenticate(self) -> Token:
        return Token.empty()

    def default_endpoint(self, service_type: str) -> Optional[str]:
        return self.endpoint

    def get_endpoint(self, service_type: str, interface: Optional[str] = None) -> str:
        if self.endpoint is None:
            error = EndpointNotFound(service_type, interface or self._interface, self._region)
            logger.error(error.message)
            raise error
        return self.endpoint
