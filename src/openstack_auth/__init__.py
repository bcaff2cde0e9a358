"""
openstack_auth - Identity v3 authentication for OpenStack clouds.

Turns credentials into an AuthMethod that hands out a valid token, renews
it on expiry and resolves service endpoints from the token's catalog.

Credentials come from:
- clouds.yaml entries (``from_config``)
- OS_* environment variables (``from_env``)
- explicit construction of a variant

Variants:
- NoAuth: no identity service, empty token
- PasswordAuth: username/password exchange
- Identity: password, token or federated (OIDC access token) exchange

Example usage:
    ```python
    from openstack_auth import from_env

    auth = from_env()
    token = auth.acquire_token()
    compute = auth.get_endpoint('compute')

    # Independent cache for another request pipeline
    worker_auth = auth.clone_boxed()
    ```
"""

from .auth import (
    AuthMethod,
    AuthMethodFactory,
    AuthState,
    Identity,
    NoAuth,
    PasswordAuth,
    Scope,
    Token,
    from_config,
    from_env,
)
from .core.catalog import ServiceCatalog
from .core.transport import BaseTransport, RequestsTransport, TransportResponse
from .exceptions import (
    AuthError,
    ConfigError,
    EndpointNotFound,
    InvalidCredentials,
    MalformedResponse,
    MissingEnv,
    NetworkFailure,
)
from .logger import get_logger, setup_logging

__version__ = '0.1.0'

# Public API
__all__ = [
    # Auth methods
    'AuthMethod',
    'NoAuth',
    'PasswordAuth',
    'Identity',
    'Scope',
    'Token',
    'AuthState',
    'ServiceCatalog',

    # Construction
    'AuthMethodFactory',
    'from_config',
    'from_env',

    # Transport
    'BaseTransport',
    'RequestsTransport',
    'TransportResponse',

    # Setup
    'setup_logging',
    'get_logger',

    # Exceptions
    'AuthError',
    'InvalidCredentials',
    'NetworkFailure',
    'MalformedResponse',
    'ConfigError',
    'MissingEnv',
    'EndpointNotFound',
]

# Setup package-level logger
logger = get_logger('')
logger.debug(f"openstack_auth v{__version__} loaded")
