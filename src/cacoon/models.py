"""Diagram records returned by the API and their decoders."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

import httpx

from .errors import DecodeError


def decode_json(response: httpx.Response) -> Any:
    """Parse a response body into a generic tree."""

    try:
        return json.loads(response.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Failed to decode response body: {exc}") from exc


def _require_mapping(data: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"Expected a JSON object for {name}, got {type(data).__name__}")
    return data


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"Expected a boolean for {key}, got {type(value).__name__}")
    return value


def _list(data: Mapping[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"Expected a JSON array for {key}, got {type(value).__name__}")
    return list(value)


@dataclass(frozen=True)
class Owner:
    """User or organization that owns a diagram."""

    name: str = ""
    nickname: str = ""
    type: str = ""
    image_url: str = ""

    @classmethod
    def from_mapping(cls, data: Any) -> "Owner":
        if data is None:
            return cls()
        data = _require_mapping(data, "owner")
        return cls(
            name=_str(data, "name"),
            nickname=_str(data, "nickname"),
            type=_str(data, "type"),
            image_url=_str(data, "imageUrl"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "nickname": self.nickname,
            "type": self.type,
            "imageUrl": self.image_url,
        }


# Wire keys whose presence depends on server-side state; omitted when absent.
_OPTIONAL_KEYS: Tuple[Tuple[str, str], ...] = (
    ("editing", "editing"),
    ("folder_id", "folderId"),
    ("folder_name", "folderName"),
    ("project_id", "projectId"),
    ("project_name", "projectName"),
    ("organization_key", "organizationKey"),
    ("organization_name", "organizationName"),
)


@dataclass(frozen=True)
class Diagram:
    """A single diagram as described by the API."""

    url: str = ""
    image_url: str = ""
    image_url_for_api: str = ""
    diagram_id: str = ""
    title: str = ""
    description: str = ""
    security: str = ""
    type: str = ""
    owner: Owner = field(default_factory=Owner)
    owner_name: str = ""
    owner_nickname: str = ""
    editing: Any = None
    own: bool = False
    shared: bool = False
    folder_id: Any = None
    folder_name: Any = None
    project_id: Any = None
    project_name: Any = None
    organization_key: Any = None
    organization_name: Any = None
    created: str = ""
    updated: str = ""
    sheets: List[Any] = field(default_factory=list)
    comments: List[Any] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Any) -> "Diagram":
        """Build a diagram from decoded JSON, ignoring keys it does not know."""

        data = _require_mapping(data, "diagram")
        optional = {attr: data.get(key) for attr, key in _OPTIONAL_KEYS}
        return cls(
            url=_str(data, "url"),
            image_url=_str(data, "imageUrl"),
            image_url_for_api=_str(data, "imageUrlForApi"),
            diagram_id=_str(data, "diagramId"),
            title=_str(data, "title"),
            description=_str(data, "description"),
            security=_str(data, "security"),
            type=_str(data, "type"),
            owner=Owner.from_mapping(data.get("owner")),
            owner_name=_str(data, "ownerName"),
            owner_nickname=_str(data, "ownerNickname"),
            own=_bool(data, "own"),
            shared=_bool(data, "shared"),
            created=_str(data, "created"),
            updated=_str(data, "updated"),
            sheets=_list(data, "sheets"),
            comments=_list(data, "comments"),
            **optional,
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "Diagram":
        return cls.from_mapping(decode_json(response))

    def to_dict(self) -> Dict[str, Any]:
        """Re-encode using the API's camelCase keys."""

        out: Dict[str, Any] = {
            "url": self.url,
            "imageUrl": self.image_url,
            "imageUrlForApi": self.image_url_for_api,
            "diagramId": self.diagram_id,
            "title": self.title,
        }
        if self.description:
            out["description"] = self.description
        out.update(
            {
                "security": self.security,
                "type": self.type,
                "owner": self.owner.to_dict(),
                "ownerName": self.owner_name,
                "ownerNickname": self.owner_nickname,
                "own": self.own,
                "shared": self.shared,
            }
        )
        for attr, key in _OPTIONAL_KEYS:
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        out["created"] = self.created
        out["updated"] = self.updated
        if self.sheets:
            out["sheets"] = list(self.sheets)
        if self.comments:
            out["comments"] = list(self.comments)
        return out


@dataclass(frozen=True)
class DiagramList:
    """Result of listing diagrams.

    ``count`` is reported by the server and is not checked against ``items``.
    """

    items: List[Diagram] = field(default_factory=list)
    count: int = 0

    @classmethod
    def from_mapping(cls, data: Any) -> "DiagramList":
        data = _require_mapping(data, "diagram list")
        raw_items = data.get("result")
        if raw_items is None:
            raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise DecodeError("Expected a JSON array of diagrams")
        try:
            count = int(data.get("count") or 0)
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"Invalid diagram count: {data.get('count')!r}") from exc
        return cls(items=[Diagram.from_mapping(item) for item in raw_items], count=count)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "DiagramList":
        return cls.from_mapping(decode_json(response))

    def ids(self) -> List[str]:
        """Diagram identifiers in server order."""

        return [item.diagram_id for item in self.items]

    def to_dict(self) -> Dict[str, Any]:
        return {"items": [item.to_dict() for item in self.items], "count": self.count}

