"""
HTTP transport for the gateway's SOAP endpoints.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import Credentials
from .errors import AuthenticationError, TransportError, TransportTimeout

__all__ = ["SoapTransport"]

_CONTENT_TYPE = "text/xml; charset=utf-8"


def _looks_like_xml(response: requests.Response) -> bool:
    content_type = response.headers.get("Content-Type", "")
    return "xml" in content_type.lower()


class SoapTransport:
    """
    Posts SOAP documents to the gateway, one attempt per call.

    Credentials travel as HTTP basic auth on every request and are never
    written into the document. ``timeout`` is in seconds; ``None`` waits
    indefinitely.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(
        self,
        document: bytes,
        credentials: Credentials,
        endpoint: str,
        *,
        action: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        credentials.require()
        headers = {"Content-Type": _CONTENT_TYPE, "SOAPAction": action or ""}
        effective_timeout = timeout if timeout is not None else self.timeout

        logging.info("Submitting %s request to %s", action or "SOAP", endpoint)
        try:
            response = self.session.post(
                endpoint,
                data=document,
                headers=headers,
                auth=(credentials.username, credentials.password),
                timeout=effective_timeout,
            )
        except requests.Timeout as exc:
            raise TransportTimeout(
                f"Gateway at {endpoint} did not answer within {effective_timeout}s"
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Could not reach gateway at {endpoint}: {exc}") from exc

        status = response.status_code
        if status in (401, 403):
            raise AuthenticationError(
                f"Gateway at {endpoint} rejected the credentials for {credentials.username}",
                status_code=status,
            )
        # SOAP 1.1 delivers faults with status 500; the codec interprets them.
        if status == 500 and _looks_like_xml(response):
            logging.warning("Gateway answered %s with status 500", action or "SOAP request")
            return response.content
        if status >= 300:
            raise TransportError(
                f"Gateway responded with {status}: {response.text[:200]}",
                status_code=status,
            )
        return response.content
