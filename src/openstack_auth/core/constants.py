"""
Centralized constants for openstack_auth.

This module contains configuration constants, timeouts, paths, header names
and environment variable names used throughout the package.
"""

from datetime import timedelta
from enum import Enum


# ============================================================================
# Authentication types
# ============================================================================

class AuthType(str, Enum):
    """Authentication types recognized in clouds.yaml and OS_AUTH_TYPE."""
    NONE = 'none'
    PASSWORD = 'password'
    TOKEN = 'token'
    OIDC_ACCESS_TOKEN = 'v3oidcaccesstoken'


# Aliases accepted for auth_type / OS_AUTH_TYPE
AUTH_TYPE_ALIASES = {
    'none': AuthType.NONE,
    'noauth': AuthType.NONE,
    'password': AuthType.PASSWORD,
    'v3password': AuthType.PASSWORD,
    'token': AuthType.TOKEN,
    'v3token': AuthType.TOKEN,
    'v3oidcaccesstoken': AuthType.OIDC_ACCESS_TOKEN,
}


class Interface(str, Enum):
    """Endpoint interfaces published in the service catalog."""
    PUBLIC = 'public'
    INTERNAL = 'internal'
    ADMIN = 'admin'


DEFAULT_INTERFACE = Interface.PUBLIC.value


# ============================================================================
# Identity API v3
# ============================================================================

IDENTITY_API_VERSION = 'v3'
TOKENS_PATH = 'auth/tokens'
FEDERATION_AUTH_PATH = (
    'OS-FEDERATION/identity_providers/{identity_provider}/protocols/{protocol}/auth'
)

# Domain used when neither a domain name nor id is supplied
DEFAULT_DOMAIN = 'Default'

# Headers
AUTH_TOKEN_HEADER = 'X-Auth-Token'
SUBJECT_TOKEN_HEADER = 'X-Subject-Token'


# ============================================================================
# Token Expiry and Refresh
# ============================================================================

# Buffer before token expiration to trigger refresh
TOKEN_EXPIRY_BUFFER = timedelta(seconds=30)


# ============================================================================
# HTTP and Network Settings
# ============================================================================

# (connect, read) seconds
HTTP_TIMEOUT = (10, 30)

USER_AGENT = 'openstack-auth'


# ============================================================================
# Environment variables
# ============================================================================

ENV_CLOUD = 'OS_CLOUD'
ENV_CLIENT_CONFIG_FILE = 'OS_CLIENT_CONFIG_FILE'
ENV_AUTH_TYPE = 'OS_AUTH_TYPE'
ENV_AUTH_URL = 'OS_AUTH_URL'
ENV_USERNAME = 'OS_USERNAME'
ENV_USER_ID = 'OS_USER_ID'
ENV_PASSWORD = 'OS_PASSWORD'
ENV_TOKEN = 'OS_TOKEN'
ENV_PROJECT_NAME = 'OS_PROJECT_NAME'
ENV_PROJECT_ID = 'OS_PROJECT_ID'
ENV_USER_DOMAIN_NAME = 'OS_USER_DOMAIN_NAME'
ENV_USER_DOMAIN_ID = 'OS_USER_DOMAIN_ID'
ENV_PROJECT_DOMAIN_NAME = 'OS_PROJECT_DOMAIN_NAME'
ENV_PROJECT_DOMAIN_ID = 'OS_PROJECT_DOMAIN_ID'
ENV_DOMAIN_NAME = 'OS_DOMAIN_NAME'
ENV_DOMAIN_ID = 'OS_DOMAIN_ID'
ENV_IDENTITY_PROVIDER = 'OS_IDENTITY_PROVIDER'
ENV_PROTOCOL = 'OS_PROTOCOL'
ENV_ACCESS_TOKEN = 'OS_ACCESS_TOKEN'
ENV_ENDPOINT = 'OS_ENDPOINT'
ENV_REGION_NAME = 'OS_REGION_NAME'
ENV_INTERFACE = 'OS_INTERFACE'

# OS_* variable -> key in a clouds.yaml "auth" section
ENV_AUTH_KEYS = {
    ENV_AUTH_URL: 'auth_url',
    ENV_USERNAME: 'username',
    ENV_USER_ID: 'user_id',
    ENV_PASSWORD: 'password',
    ENV_TOKEN: 'token',
    ENV_PROJECT_NAME: 'project_name',
    ENV_PROJECT_ID: 'project_id',
    ENV_USER_DOMAIN_NAME: 'user_domain_name',
    ENV_USER_DOMAIN_ID: 'user_domain_id',
    ENV_PROJECT_DOMAIN_NAME: 'project_domain_name',
    ENV_PROJECT_DOMAIN_ID: 'project_domain_id',
    ENV_DOMAIN_NAME: 'domain_name',
    ENV_DOMAIN_ID: 'domain_id',
    ENV_IDENTITY_PROVIDER: 'identity_provider',
    ENV_PROTOCOL: 'protocol',
    ENV_ACCESS_TOKEN: 'access_token',
    ENV_ENDPOINT: 'endpoint',
}


# ============================================================================
# Configuration files
# ============================================================================

CLOUDS_YAML = 'clouds.yaml'

# Searched in order when no explicit path is given
DEFAULT_CONFIG_SEARCH_PATHS = [
    '.',
    '~/.config/openstack',
    '/etc/openstack',
]


# ============================================================================
# Logging
# ============================================================================

# Characters of a token shown in log output
TOKEN_PREFIX_LENGTH = 8

# Placeholder for fully masked values
MASKED_VALUE = '***'

# Keys whose values are never shown, not even a prefix
# (matched case-insensitively as substrings)
SECRET_KEYS = frozenset([
    'password',
    'secret',
    'credential',
])

# Keys whose values are shown as a short prefix
TOKEN_KEYS = frozenset([
    'token',
])
