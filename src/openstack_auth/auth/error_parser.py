"""
Error mapping for Identity v3 responses.

Translates HTTP statuses and error bodies returned by the identity endpoint
into the AuthError taxonomy, with a readable message taken from the body.
"""

from typing import Optional

from ..core.transport import TransportResponse
from ..exceptions import AuthError, InvalidCredentials, MalformedResponse, NetworkFailure
from ..logger import get_logger

logger = get_logger('auth.error_parser')

# Statuses where the identity endpoint rejected the credentials outright
REJECTED_STATUSES = frozenset([401, 403])

# Longest body excerpt included in error messages
MAX_BODY_EXCERPT = 200


def extract_error_message(response: TransportResponse) -> Optional[str]:
    """
    Extract a human readable message from an identity error body.

    Keystone errors look like ``{"error": {"code": 401, "title": ..., "message": ...}}``.
    Falls back to a short excerpt of the raw body.
    """
    try:
        data = response.json()
    except (ValueError, UnicodeDecodeError):
        data = None

    if isinstance(data, dict):
        error = data.get('error')
        if isinstance(error, dict):
            message = error.get('message') or error.get('title')
            if message:
                return str(message)

    if response.content:
        text = response.content.decode('utf-8', errors='replace').strip()
        if text:
            return text[:MAX_BODY_EXCERPT]

    return None


def error_for_response(response: TransportResponse, action: str) -> AuthError:
    """
    Build the AuthError matching a non-2xx identity response.

    - 401/403 and other 4xx: InvalidCredentials (the exchange was rejected)
    - 5xx: NetworkFailure (the identity service failed to answer)
    - anything else: MalformedResponse

    Args:
        response: The identity endpoint's response
        action: Short description for the message (e.g., 'password authentication')
    """
    status = response.status_code
    detail = extract_error_message(response)
    suffix = f": {detail}" if detail else ""

    if status in REJECTED_STATUSES:
        return InvalidCredentials(
            f"Identity endpoint rejected {action} (HTTP {status}){suffix}",
            status_code=status,
        )
    if 400 <= status < 500:
        return InvalidCredentials(
            f"Identity endpoint refused {action} (HTTP {status}){suffix}",
            status_code=status,
        )
    if status >= 500:
        return NetworkFailure(
            f"Identity endpoint failed during {action} (HTTP {status}){suffix}",
            status_code=status,
        )
    return MalformedResponse(
        f"Unexpected HTTP {status} from identity endpoint during {action}{suffix}",
        status_code=status,
    )


def raise_for_identity_status(response: TransportResponse, action: str) -> None:
    """
    Raise the mapped AuthError unless the response is 2xx.

    Raises:
        InvalidCredentials, NetworkFailure or MalformedResponse
    """
    if response.ok:
        return

    error = error_for_response(response, action)
    logger.error(error.message)
    raise error
