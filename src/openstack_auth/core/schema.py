"""
Schema validation for Identity v3 token responses and cloud configuration.

Uses Pydantic models to validate token bodies returned by the identity
endpoint and cloud entries loaded from clouds.yaml or the environment.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import AUTH_TYPE_ALIASES, Interface
from ..exceptions import ConfigError, MalformedResponse
from ..logger import get_logger

logger = get_logger('core.schema')


# ============================================================================
# Token Response Schemas
# ============================================================================

class EndpointSchema(BaseModel):
    """One endpoint of a catalog entry."""

    model_config = ConfigDict(extra='allow', frozen=True)

    id: Optional[str] = None
    interface: str = Field(..., description="public, internal or admin")
    region: Optional[str] = Field(default=None, description="Region name")
    region_id: Optional[str] = Field(default=None, description="Region identifier")
    url: str = Field(..., description="Endpoint URL")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("url cannot be empty")
        return v


class CatalogEntrySchema(BaseModel):
    """A service published in the token's catalog."""

    model_config = ConfigDict(extra='allow', frozen=True)

    id: Optional[str] = None
    name: Optional[str] = None
    type: str = Field(..., description="Service type (e.g., compute, network)")
    endpoints: List[EndpointSchema] = Field(default_factory=list)


class ReferenceSchema(BaseModel):
    """User, project or domain reference inside a token body."""

    model_config = ConfigDict(extra='allow', frozen=True)

    id: str
    name: Optional[str] = None


class TokenBodySchema(BaseModel):
    """The ``token`` object of an Identity v3 token response."""

    model_config = ConfigDict(extra='allow')

    expires_at: datetime = Field(..., description="Token expiry (ISO 8601)")
    issued_at: Optional[datetime] = None
    methods: List[str] = Field(default_factory=list)
    catalog: List[CatalogEntrySchema] = Field(default_factory=list)
    user: Optional[ReferenceSchema] = None
    project: Optional[ReferenceSchema] = None
    domain: Optional[ReferenceSchema] = None


class TokenResponseSchema(BaseModel):
    """Identity v3 token response body."""

    model_config = ConfigDict(extra='allow')

    token: TokenBodySchema


# ============================================================================
# Cloud Configuration Schemas
# ============================================================================

class AuthSettings(BaseModel):
    """The ``auth`` section of a cloud entry."""

    model_config = ConfigDict(extra='allow')

    auth_url: Optional[str] = None
    username: Optional[str] = None
    user_id: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None
    project_name: Optional[str] = None
    project_id: Optional[str] = None
    user_domain_name: Optional[str] = None
    user_domain_id: Optional[str] = None
    project_domain_name: Optional[str] = None
    project_domain_id: Optional[str] = None
    domain_name: Optional[str] = None
    domain_id: Optional[str] = None
    identity_provider: Optional[str] = None
    protocol: Optional[str] = None
    access_token: Optional[str] = None
    endpoint: Optional[str] = None

    @field_validator('auth_url', 'endpoint')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.startswith(('http://', 'https://')):
            raise ValueError(f"URL must start with 'http://' or 'https://' but got: {v}")
        return v


class CloudConfig(BaseModel):
    """A single cloud entry as found under ``clouds:`` in clouds.yaml."""

    model_config = ConfigDict(extra='allow')

    auth_type: Optional[str] = Field(default=None, description="Authentication plugin name")
    auth: AuthSettings = Field(default_factory=AuthSettings)
    region_name: Optional[str] = None
    interface: Optional[str] = None
    verify: Union[bool, str] = True
    cacert: Optional[str] = None

    @field_validator('auth_type')
    @classmethod
    def validate_auth_type(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        normalized = v.strip().lower()
        if normalized not in AUTH_TYPE_ALIASES:
            raise ValueError(
                f"Unsupported auth_type '{v}'. Must be one of: {sorted(AUTH_TYPE_ALIASES)}"
            )
        return AUTH_TYPE_ALIASES[normalized].value

    @field_validator('interface')
    @classmethod
    def validate_interface(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        # Accept the legacy "publicURL" spelling
        normalized = v.strip().lower()
        if normalized.endswith('url'):
            normalized = normalized[:-3]
        valid = [i.value for i in Interface]
        if normalized not in valid:
            raise ValueError(f"Invalid interface: {v}. Must be one of: {valid}")
        return normalized


# ============================================================================
# Validation Functions
# ============================================================================

def parse_token_body(data: Any) -> TokenBodySchema:
    """
    Validate a decoded Identity v3 token response.

    Args:
        data: Decoded JSON body

    Returns:
        Validated token body

    Raises:
        MalformedResponse: If the body does not have the expected shape
    """
    try:
        return TokenResponseSchema.model_validate(data).token
    except ValidationError as e:
        error_msg = f"Unexpected token response from identity endpoint: {e}"
        logger.error(error_msg)
        raise MalformedResponse(error_msg) from e


def validate_cloud_config(data: Dict[str, Any], cloud: str = '<inline>') -> CloudConfig:
    """
    Validate a cloud entry.

    Args:
        data: Cloud entry dictionary
        cloud: Cloud name, used in error messages

    Returns:
        Validated CloudConfig

    Raises:
        ConfigError: If the entry is invalid
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Cloud '{cloud}' must be a mapping, got {type(data).__name__}")

    try:
        config = CloudConfig.model_validate(data)
    except ValidationError as e:
        error_msg = f"Invalid configuration for cloud '{cloud}': {e}"
        logger.error(error_msg)
        raise ConfigError(error_msg) from e

    logger.debug(f"Configuration validated for cloud '{cloud}'")
    return config
