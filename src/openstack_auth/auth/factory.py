"""
AuthMethod factory.

Selects and constructs the AuthMethod variant matching externally supplied
settings: a clouds.yaml entry (``from_config``) or OS_* environment
variables (``from_env``).
"""

import os
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from .base import AuthMethod, Clock
from .identity import Identity
from .noauth import NoAuth
from .password import PasswordAuth
from .types import Scope
from ..core.config import load_cloud_config, load_cloud_file
from ..core.constants import DEFAULT_DOMAIN, DEFAULT_INTERFACE, ENV_CLOUD, AuthType
from ..core.environment import detect_auth_type, missing_variables, settings_from_env
from ..core.schema import AuthSettings, CloudConfig, validate_cloud_config
from ..core.transport import BaseTransport, RequestsTransport
from ..exceptions import ConfigError, MissingEnv
from ..logger import get_logger

logger = get_logger('auth.factory')

CloudSource = Union[str, Path, Mapping[str, Any], CloudConfig]


class AuthMethodFactory:
    """Creates AuthMethod instances from validated cloud configuration."""

    @staticmethod
    def create(
        config: CloudConfig,
        transport: Optional[BaseTransport] = None,
        clock: Optional[Clock] = None,
    ) -> AuthMethod:
        """
        Create the AuthMethod described by a cloud entry.

        Args:
            config: Validated cloud entry
            transport: Optional transport; built from verify/cacert if None
            clock: Optional current-time callable

        Returns:
            Configured AuthMethod

        Raises:
            ConfigError: If required fields are missing or contradictory
        """
        auth_type = AuthMethodFactory.resolve_auth_type(config)
        logger.info(f"Creating auth method: auth_type={auth_type.value}")

        options = {
            'region': config.region_name,
            'interface': config.interface or DEFAULT_INTERFACE,
            'transport': transport or AuthMethodFactory._transport_for(config),
            'clock': clock,
        }
        auth = config.auth

        if auth_type == AuthType.NONE:
            return NoAuth(endpoint=auth.endpoint, **options)

        AuthMethodFactory._require(auth_type, auth)
        scope = AuthMethodFactory._scope(auth)

        if auth_type == AuthType.PASSWORD:
            if scope.is_empty:
                raise ConfigError(
                    "Password authentication requires a project or domain scope "
                    "(project_name, project_id, domain_name or domain_id)"
                )
            return PasswordAuth(
                auth.auth_url,
                auth.username,
                auth.password,
                auth.project_name,
                user_id=auth.user_id,
                user_domain_name=auth.user_domain_name or DEFAULT_DOMAIN,
                user_domain_id=auth.user_domain_id,
                project_id=auth.project_id,
                project_domain_name=auth.project_domain_name or DEFAULT_DOMAIN,
                project_domain_id=auth.project_domain_id,
                domain_name=auth.domain_name,
                domain_id=auth.domain_id,
                **options,
            )

        if auth_type == AuthType.TOKEN:
            return Identity.token(auth.auth_url, auth.token, scope=scope, **options)

        return Identity.federated(
            auth.auth_url,
            auth.identity_provider,
            auth.protocol,
            auth.access_token,
            scope=scope,
            **options,
        )

    @staticmethod
    def resolve_auth_type(config: CloudConfig) -> AuthType:
        """
        Return the explicit auth_type or infer it from the credentials present.

        Raises:
            ConfigError: If no type can be inferred or the credentials conflict
        """
        if config.auth_type is not None:
            return AuthType(config.auth_type)

        auth = config.auth
        present = []
        if auth.token:
            present.append(AuthType.TOKEN)
        if auth.access_token:
            present.append(AuthType.OIDC_ACCESS_TOKEN)
        if auth.password:
            present.append(AuthType.PASSWORD)

        if len(present) > 1:
            raise ConfigError(
                f"Contradictory credentials: {[t.value for t in present]} are all set; "
                "specify auth_type to choose one"
            )
        if present:
            return present[0]
        if auth.endpoint and not auth.auth_url:
            return AuthType.NONE

        raise ConfigError("Cannot determine auth_type: no credentials found in configuration")

    @staticmethod
    def _require(auth_type: AuthType, auth: AuthSettings) -> None:
        if auth_type == AuthType.PASSWORD:
            required = [['auth_url'], ['username', 'user_id'], ['password']]
        elif auth_type == AuthType.TOKEN:
            required = [['auth_url'], ['token']]
        else:
            required = [['auth_url'], ['identity_provider'], ['protocol'], ['access_token']]

        missing: List[str] = [
            '|'.join(alternatives)
            for alternatives in required
            if not any(getattr(auth, key) for key in alternatives)
        ]
        if missing:
            error_msg = f"{auth_type.value} authentication requires auth fields: {missing}"
            logger.error(error_msg)
            raise ConfigError(error_msg)

    @staticmethod
    def _scope(auth: AuthSettings) -> Scope:
        scope = Scope(
            project_id=auth.project_id,
            project_name=auth.project_name,
            project_domain_id=auth.project_domain_id,
            project_domain_name=auth.project_domain_name,
            domain_id=auth.domain_id,
            domain_name=auth.domain_name,
        )
        try:
            scope.validate()
        except ValueError as e:
            raise ConfigError(f"Contradictory scope: {e}") from e
        return scope

    @staticmethod
    def _transport_for(config: CloudConfig) -> BaseTransport:
        verify = config.cacert if config.cacert else config.verify
        return RequestsTransport(verify=verify)


def from_config(
    cloud: CloudSource,
    *,
    config_path: Optional[Union[str, Path]] = None,
    transport: Optional[BaseTransport] = None,
    clock: Optional[Clock] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AuthMethod:
    """
    Create an AuthMethod from configuration.

    Args:
        cloud: One of
            - a cloud name, looked up in clouds.yaml
            - a Path (or a str ending in .yaml/.yml naming an existing file)
              holding a single cloud entry
            - a mapping shaped like a clouds.yaml cloud entry
            - a validated CloudConfig
        config_path: Explicit clouds.yaml path for cloud-name lookups
        transport: Optional HTTP transport
        clock: Optional current-time callable
        environ: Environment used for OS_CLIENT_CONFIG_FILE lookup

    Returns:
        Configured AuthMethod

    Raises:
        ConfigError: If the configuration is missing, invalid or contradictory
    """
    if isinstance(cloud, CloudConfig):
        config = cloud
    elif isinstance(cloud, Mapping):
        config = validate_cloud_config(dict(cloud))
    elif isinstance(cloud, Path):
        config = load_cloud_file(cloud)
    elif isinstance(cloud, str):
        if cloud.endswith(('.yaml', '.yml')) and Path(cloud).expanduser().is_file():
            config = load_cloud_file(cloud)
        else:
            config = load_cloud_config(cloud, config_path=config_path, environ=environ)
    else:
        raise ConfigError(f"Unsupported configuration source: {type(cloud).__name__}")

    return AuthMethodFactory.create(config, transport=transport, clock=clock)


def from_env(
    environ: Optional[Mapping[str, str]] = None,
    *,
    transport: Optional[BaseTransport] = None,
    clock: Optional[Clock] = None,
) -> AuthMethod:
    """
    Create an AuthMethod from OS_* environment variables.

    OS_CLOUD, when set, selects a cloud from clouds.yaml instead.

    Args:
        environ: Environment mapping (defaults to os.environ)
        transport: Optional HTTP transport
        clock: Optional current-time callable

    Returns:
        Configured AuthMethod

    Raises:
        MissingEnv: If a variable required by the implied auth type is absent
        ConfigError: If values are invalid or contradictory
    """
    environ = os.environ if environ is None else environ

    cloud = environ.get(ENV_CLOUD, '').strip()
    if cloud:
        logger.info(f"{ENV_CLOUD} set, loading cloud '{cloud}' from clouds.yaml")
        return from_config(cloud, transport=transport, clock=clock, environ=environ)

    auth_type = detect_auth_type(environ)
    missing = missing_variables(auth_type, environ)
    if missing:
        error = MissingEnv(missing)
        logger.error(error.message)
        raise error

    config = validate_cloud_config(settings_from_env(environ), 'environment')
    return AuthMethodFactory.create(config, transport=transport, clock=clock)
