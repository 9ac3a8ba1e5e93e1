import json
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from cacoon.api import DiagramApi
from cacoon.config import ClientConfig


def diagram_payload(diagram_id: str = "abc123", **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "url": f"https://cacoo.com/diagrams/{diagram_id}",
        "imageUrl": f"https://cacoo.com/diagrams/{diagram_id}.png",
        "imageUrlForApi": f"https://cacoo.com/api/v1/diagrams/{diagram_id}.png",
        "diagramId": diagram_id,
        "title": "Network layout",
        "description": "Office network",
        "security": "url",
        "type": "normal",
        "owner": {
            "name": "Alice",
            "nickname": "alice",
            "type": "cacoo",
            "imageUrl": "https://cacoo.com/account/alice/image/32x32",
        },
        "ownerName": "Alice",
        "ownerNickname": "alice",
        "editing": None,
        "own": True,
        "shared": False,
        "folderId": 42,
        "folderName": "Infra",
        "sheetCount": 2,
        "created": "Mon, 10 Aug 2020 01:02:03 +0900",
        "updated": "Tue, 11 Aug 2020 04:05:06 +0900",
    }
    payload.update(overrides)
    return payload


class Recorder:
    """Collects requests seen by a mock transport."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def _reset_logging():
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in root_handlers and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(root_level)
    for name in ("cacoon", "httpx"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(api_key="test-key", endpoint="http://test/api/v1")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_api(config: ClientConfig, recorder: Recorder) -> Callable[..., DiagramApi]:
    def _factory(status: int = 200, response_json: Any = None, content: Optional[bytes] = None) -> DiagramApi:
        def _handler(request: httpx.Request) -> httpx.Response:
            recorder.requests.append(request)
            if content is not None:
                return httpx.Response(status, content=content)
            return httpx.Response(status, json=response_json if response_json is not None else {})

        client = httpx.Client(transport=httpx.MockTransport(_handler))
        return DiagramApi(config, client=client)

    return _factory


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode())
