"""
Environment variable credential source.

Reads the OS_* variables understood by OpenStack tooling and turns them
into a cloud entry shaped like one found in clouds.yaml.
"""

import os
from typing import Any, Dict, List, Mapping, Optional

from .constants import (
    AUTH_TYPE_ALIASES,
    AuthType,
    ENV_ACCESS_TOKEN,
    ENV_AUTH_KEYS,
    ENV_AUTH_TYPE,
    ENV_AUTH_URL,
    ENV_DOMAIN_ID,
    ENV_DOMAIN_NAME,
    ENV_ENDPOINT,
    ENV_IDENTITY_PROVIDER,
    ENV_INTERFACE,
    ENV_PASSWORD,
    ENV_PROJECT_ID,
    ENV_PROJECT_NAME,
    ENV_PROTOCOL,
    ENV_REGION_NAME,
    ENV_TOKEN,
    ENV_USER_ID,
    ENV_USERNAME,
)
from ..exceptions import ConfigError
from ..logger import get_logger

logger = get_logger('core.environment')


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    """Return a stripped variable, treating empty values as unset."""
    value = environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def detect_auth_type(environ: Optional[Mapping[str, str]] = None) -> AuthType:
    """
    Determine the authentication type implied by the environment.

    OS_AUTH_TYPE wins when set. Otherwise the type is inferred from which
    credentials are present, defaulting to password.

    Raises:
        ConfigError: If OS_AUTH_TYPE names an unsupported type
    """
    environ = os.environ if environ is None else environ

    explicit = _get(environ, ENV_AUTH_TYPE)
    if explicit is not None:
        normalized = explicit.lower()
        if normalized not in AUTH_TYPE_ALIASES:
            raise ConfigError(
                f"Invalid {ENV_AUTH_TYPE}: {explicit}. Must be one of: {sorted(AUTH_TYPE_ALIASES)}"
            )
        logger.info(f"Auth type overridden to: {AUTH_TYPE_ALIASES[normalized].value}")
        return AUTH_TYPE_ALIASES[normalized]

    if _get(environ, ENV_TOKEN):
        return AuthType.TOKEN
    if _get(environ, ENV_ACCESS_TOKEN):
        return AuthType.OIDC_ACCESS_TOKEN
    if _get(environ, ENV_ENDPOINT) and not _get(environ, ENV_AUTH_URL):
        return AuthType.NONE
    return AuthType.PASSWORD


def missing_variables(auth_type: AuthType, environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    List required variables absent for the given auth type.

    Alternatives are reported joined with '|' (e.g., 'OS_USERNAME|OS_USER_ID').
    """
    environ = os.environ if environ is None else environ

    if auth_type == AuthType.NONE:
        required: List[List[str]] = []
    elif auth_type == AuthType.PASSWORD:
        required = [
            [ENV_AUTH_URL],
            [ENV_USERNAME, ENV_USER_ID],
            [ENV_PASSWORD],
            [ENV_PROJECT_NAME, ENV_PROJECT_ID, ENV_DOMAIN_NAME, ENV_DOMAIN_ID],
        ]
    elif auth_type == AuthType.TOKEN:
        required = [[ENV_AUTH_URL], [ENV_TOKEN]]
    else:
        required = [
            [ENV_AUTH_URL],
            [ENV_IDENTITY_PROVIDER],
            [ENV_PROTOCOL],
            [ENV_ACCESS_TOKEN],
        ]

    return [
        '|'.join(alternatives)
        for alternatives in required
        if not any(_get(environ, name) for name in alternatives)
    ]


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Build a cloud entry from OS_* variables.

    Returns:
        Dictionary with ``auth_type``, ``auth``, ``region_name`` and
        ``interface`` keys, ready for schema validation
    """
    environ = os.environ if environ is None else environ

    auth = {
        key: _get(environ, name)
        for name, key in ENV_AUTH_KEYS.items()
        if _get(environ, name) is not None
    }

    settings: Dict[str, Any] = {
        'auth_type': detect_auth_type(environ).value,
        'auth': auth,
    }

    region = _get(environ, ENV_REGION_NAME)
    if region:
        settings['region_name'] = region

    interface = _get(environ, ENV_INTERFACE)
    if interface:
        settings['interface'] = interface

    logger.debug(f"Read {len(auth)} auth variable(s) from environment")
    return settings
