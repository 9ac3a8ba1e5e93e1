"""HTTP request builder for the Cacoo REST API."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from .config import ClientConfig
from .errors import PayloadError, TransportError
from .logging import get_logger, redact_url

DIAGRAMS = "diagrams"


class DiagramApi:
    """Issue one-shot requests against the fixed diagram endpoints.

    The API key travels as the ``apiKey`` query parameter on every call.
    Status codes are left for the caller to interpret.
    """

    def __init__(self, config: ClientConfig, client: Optional[httpx.Client] = None) -> None:
        self._config = config
        self._client = client or httpx.Client()
        self._logger = get_logger("cacoon.api")

    def __enter__(self) -> "DiagramApi":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def build_url(self, resource: str, action: Optional[str] = None) -> str:
        """Return the endpoint URL for ``resource`` and optional ``action``, without the key."""

        if action:
            return f"{self._config.endpoint}/{resource}/{action}.json"
        return f"{self._config.endpoint}/{resource}.json"

    def request(
        self,
        resource: str,
        action: Optional[str] = None,
        body: Optional[str] = None,
    ) -> httpx.Response:
        """Send a GET, or a JSON POST when ``body`` is given, and return the raw response."""

        url = self.build_url(resource, action)
        params = {"apiKey": self._config.api_key}
        if body is None:
            request = self._client.build_request("GET", url, params=params)
        else:
            request = self._client.build_request(
                "POST",
                url,
                params=params,
                content=_encode_body(body),
                headers={"Content-Type": "application/json"},
            )

        safe_url = redact_url(str(request.url))
        self._logger.debug("Sending request", extra={"method": request.method, "url": safe_url})
        try:
            response = self._client.send(request)
        except httpx.RequestError as exc:
            self._logger.debug("Request failed", extra={"url": safe_url, "error": str(exc)})
            raise TransportError(f"API error {exc}") from exc
        # Content is already buffered; closing records the elapsed time.
        response.close()
        self._logger.debug(
            "Received response",
            extra={
                "url": safe_url,
                "status_code": response.status_code,
                "elapsed_ms": round(response.elapsed.total_seconds() * 1000, 1),
            },
        )
        return response

    def create_diagram(self) -> httpx.Response:
        return self.request(DIAGRAMS, "create")

    def list_diagrams(self) -> httpx.Response:
        return self.request(DIAGRAMS)

    def get_diagram(self, diagram_id: str) -> httpx.Response:
        return self.request(f"{DIAGRAMS}/{diagram_id}")

    def delete_diagram(self, diagram_id: str) -> httpx.Response:
        return self.request(DIAGRAMS, f"{diagram_id}/delete")


def _encode_body(body: str) -> bytes:
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise PayloadError("Request body must be a JSON object")
    return json.dumps(parsed).encode("utf-8")
