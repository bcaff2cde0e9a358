"""
HTTP transport used for identity exchanges and authenticated requests.

The transport is the only component that touches the network. Auth methods
depend on the BaseTransport interface, so tests can substitute a scripted
fake and applications can share one connection pool across auth methods.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import requests
from requests.structures import CaseInsensitiveDict

from .constants import HTTP_TIMEOUT, USER_AGENT
from ..exceptions import NetworkFailure
from ..logger import get_logger

logger = get_logger('core.transport')

Timeout = Union[float, Tuple[float, float]]


@dataclass
class TransportResponse:
    """Status, headers and raw body of an HTTP response."""
    status_code: int
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    content: bytes = b''

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            ValueError: If the body is empty or not valid JSON
        """
        if not self.content:
            raise ValueError("Empty response body")
        return json.loads(self.content.decode('utf-8'))


class BaseTransport(ABC):
    """Abstract HTTP transport."""

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Any] = None,
        timeout: Optional[Timeout] = None,
    ) -> TransportResponse:
        """
        Issue an HTTP request.

        Returns:
            TransportResponse for any HTTP status (non-2xx is not an error here)

        Raises:
            NetworkFailure: If the request could not be completed
        """
        pass

    def post_json(self, url: str, body: Any, headers: Optional[Dict[str, str]] = None) -> TransportResponse:
        """POST a JSON body."""
        return self.request('POST', url, headers=headers, json=body)


class RequestsTransport(BaseTransport):
    """Transport backed by a requests.Session."""

    def __init__(
        self,
        timeout: Timeout = HTTP_TIMEOUT,
        verify: Union[bool, str] = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize transport.

        Args:
            timeout: Default (connect, read) timeout in seconds
            verify: TLS verification flag or path to a CA bundle
            session: Optional pre-configured requests session
        """
        self.timeout = timeout
        self.verify = verify
        if session is None:
            session = requests.Session()
            session.headers['User-Agent'] = USER_AGENT
        else:
            session.headers.setdefault('User-Agent', USER_AGENT)
        self._session = session

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Any] = None,
        timeout: Optional[Timeout] = None,
    ) -> TransportResponse:
        logger.debug(f"Sending HTTP {method} request to {url}")

        try:
            resp = self._session.request(
                method,
                url,
                headers=headers,
                json=json,
                timeout=timeout or self.timeout,
                verify=self.verify,
                allow_redirects=False,
            )
        except requests.Timeout as e:
            error_msg = f"Request to {url} timed out: {e}"
            logger.error(error_msg)
            raise NetworkFailure(error_msg) from e
        except requests.ConnectionError as e:
            error_msg = f"Could not connect to {url}: {e}"
            logger.error(error_msg)
            raise NetworkFailure(error_msg) from e
        except requests.RequestException as e:
            error_msg = f"Network error talking to {url}: {e}"
            logger.error(error_msg)
            raise NetworkFailure(error_msg) from e

        logger.debug(f"HTTP {method} {url} returned {resp.status_code}")
        return TransportResponse(
            status_code=resp.status_code,
            headers=resp.headers,
            content=resp.content,
        )

    def close(self) -> None:
        self._session.close()
