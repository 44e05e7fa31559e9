"""HTTP transport for Learning Locker requests."""

import base64
from typing import Dict, Optional, Tuple

import requests

from .errors import TransportError
from .logger import StructuredLogger, get_logger

DEFAULT_TIMEOUT = 30.0


def basic_auth(api_key: str, api_secret: str) -> str:
    """Return base64 of `key:secret` for a Basic Authorization header."""
    return base64.b64encode(f"{api_key}:{api_secret}".encode("utf-8")).decode("ascii")


def auth_headers(api_key: str, api_secret: str, api_version: str) -> Dict[str, str]:
    return {
        "Authorization": "Basic " + basic_auth(api_key, api_secret),
        "X-Experience-API-Version": api_version,
    }


class Transport:
    """
    Blocking GET over a shared requests.Session.

    Non-OK responses are not errors here: the status is returned and the
    caller decides what an unsuccessful page means.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or get_logger()

    def get(self, url: str, headers: Dict[str, str]) -> Tuple[int, bytes]:
        """Issue one GET and return (status_code, body).

        Raises:
            TransportError: On timeout, connection failure, or any other
                request error
        """
        self.logger.record_api_call()
        try:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            self.logger.warning("Learning Locker request timed out", url=url)
            raise TransportError(f"Learning Locker request timed out: {url}") from e
        except requests.exceptions.RequestException as e:
            self.logger.error("Learning Locker request error", url=url, error=str(e))
            raise TransportError(f"Learning Locker request error: {e}") from e

        if resp.status_code != requests.codes.ok:
            self.logger.warning("Learning Locker returned non-OK status", url=url, status=resp.status_code)
            return resp.status_code, b""
        return resp.status_code, resp.content

    def close(self) -> None:
        self.session.close()
