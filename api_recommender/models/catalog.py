"""
API catalog data models
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ApiField:
    """One documented request field of an API"""
    name: str
    type: str = ""
    description: str = ""


@dataclass(frozen=True)
class ApiCatalogEntry:
    """One API of the catalog"""
    name: str
    path: str = ""
    method: str = ""
    description: str = ""
    fields: Tuple[ApiField, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "method": self.method,
            "description": self.description,
            "fields": [
                {"name": f.name, "type": f.type, "description": f.description}
                for f in self.fields
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiCatalogEntry":
        return cls(
            name=data.get("name", ""),
            path=data.get("path", ""),
            method=data.get("method", ""),
            description=data.get("description", ""),
            fields=tuple(
                ApiField(
                    name=f.get("name", ""),
                    type=f.get("type", ""),
                    description=f.get("description", ""),
                )
                for f in data.get("fields") or []
            ),
        )


@dataclass
class Recommendation:
    """Chosen API, selected fields and synthesized payloads for one turn"""
    api: ApiCatalogEntry
    fields: List[ApiField] = field(default_factory=list)
    request_payload: str = ""
    event_payload: Optional[str] = None

    def render(self) -> str:
        """Render the recommendation as the assistant's reply text."""
        api = self.api
        lines = [
            "Recommended API:",
            f" Name: {api.name}",
            f" Path: {api.path}",
            f" Method: {api.method}",
            f" Description: {api.description}",
        ]

        if not self.fields:
            lines.append("Suggested fields: not required")
        else:
            lines.append("Suggested fields:")
            for f in self.fields:
                lines.append(f" - {f.name} ({f.type}): {f.description}")

        payload = self.request_payload.strip()
        if payload:
            lines.append("Sample payload:")
            lines.append(payload)

        event_payload = (self.event_payload or "").strip()
        if event_payload:
            lines.append("Event payload:")
            lines.append(event_payload)

        return "\n".join(lines).strip()
