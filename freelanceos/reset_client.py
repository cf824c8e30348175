"""
HTTP client for the hosted reset procedure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "FreelanceOS-DatabaseReset/1.0"


@dataclass
class ResetFunctionResponse:
    status_code: int
    body: dict

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ResetFunctionClient(Protocol):
    """What the orchestrator and status reporter need from the procedure."""

    endpoint: str

    def invoke(self, payload: dict) -> ResetFunctionResponse:
        ...

    def probe(self) -> ResetFunctionResponse:
        ...


class HttpResetFunctionClient:
    """
    Calls the reset procedure with the service credential.

    No retries: a failed or timed-out call surfaces to the caller as a
    ``requests.RequestException``.
    """

    def __init__(
        self,
        endpoint: str,
        service_key: str,
        *,
        timeout: float = 30.0,
        probe_timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint
        self.service_key = service_key
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self.session = session or requests.Session()

    def _post(self, payload: dict, timeout: float) -> ResetFunctionResponse:
        response = self.session.post(
            self.endpoint,
            json=payload,
            headers={
                "Authorization": f"Bearer {self.service_key}",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
        )
        try:
            body = response.json()
        except ValueError:
            logger.warning(
                "Reset endpoint returned a non-JSON body (status %d)",
                response.status_code,
            )
            body = {}
        if not isinstance(body, dict):
            body = {}
        return ResetFunctionResponse(status_code=response.status_code, body=body)

    def invoke(self, payload: dict) -> ResetFunctionResponse:
        return self._post(payload, self.timeout)

    def probe(self) -> ResetFunctionResponse:
        return self._post({"triggeredBy": "api", "dryRun": True}, self.probe_timeout)
