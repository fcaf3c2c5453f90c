"""HTTP client with request metrics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

REQUEST_KINDS = ("geocode", "nearby", "details", "distance")


@dataclass
class RequestMetrics:
    network_geocode: int = 0
    network_nearby: int = 0
    network_details: int = 0
    network_distance: int = 0

    @property
    def total(self) -> int:
        return self.network_geocode + self.network_nearby + self.network_details + self.network_distance

    def inc_network(self, kind: str) -> None:
        if kind not in REQUEST_KINDS:
            raise ValueError(f"Unknown request kind: {kind}")
        attr = f"network_{kind}"
        setattr(self, attr, getattr(self, attr) + 1)

    def as_dict(self) -> Dict[str, int]:
        return {kind: getattr(self, f"network_{kind}") for kind in REQUEST_KINDS}


class HttpClient:
    def __init__(
        self,
        api_key: str,
        timeout: int = 20,
        metrics: Optional[RequestMetrics] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.metrics = metrics
        self.session = session or requests.Session()

    def get_json(self, url: str, params: Dict[str, Any], kind: str) -> Dict[str, Any]:
        """GET `url` once with the API key appended and return the decoded JSON body.

        Raises requests.RequestException on transport errors and HTTP error
        statuses, and ValueError when the body is not a JSON object.
        """
        query = dict(params)
        query["key"] = self.api_key

        if self.metrics is not None:
            self.metrics.inc_network(kind)
        resp = self.session.get(url, params=query, timeout=self.timeout)

        status = resp.status_code
        if status != 200:
            logger.error("HTTP %s from %s", status, url)
            resp.raise_for_status()
            raise requests.HTTPError(f"HTTP {status} from {url}", response=resp)

        try:
            payload = resp.json()
        except ValueError:
            logger.error("Non-JSON response from %s", url)
            raise
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected payload from {url}: {type(payload).__name__}")
        return payload


def provider_status(response: Dict[str, Any]) -> str:
    return str(response.get("status") or "")


def provider_message(response: Dict[str, Any]) -> Optional[str]:
    message = response.get("error_message")
    return str(message) if message else None
