"""
Markdown API documentation parser

Expected layout::

    ### Req Issue
    **Path:** /v1/issue
    **Method:** POST
    **Description:** Issue a tokenized asset
    **Fields:**
    - name: id type: string description: Asset identifier
    - name: value  type: string  description: Asset value
    ---
"""

import re
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from api_recommender.models.catalog import ApiCatalogEntry, ApiField
from api_recommender.utils.errors import CatalogError

_HEADER_RE = re.compile(r"^###\s*(.+)")
_PATH_RE = re.compile(r"\*\*Path:\*\*\s*(.+)")
_METHOD_RE = re.compile(r"\*\*Method:\*\*\s*(.+)")
_DESC_RE = re.compile(r"\*\*Description:\*\*\s*(.+)")
_FIELD_RE = re.compile(r"-\s*name:\s*(\S+)\s*type:\s*(\S+)\s*description:\s*(.+)")


def _parse_field_parts(line: str) -> Optional[ApiField]:
    """Parse a field line whose parts are separated by two spaces."""
    parts = line.lstrip("-").split("  ")
    values = {}
    for part in parts:
        part = part.strip()
        for key in ("name", "type", "description"):
            if part.startswith(f"{key}:"):
                values[key] = part[len(key) + 1:].strip()
    if not values.get("name"):
        return None
    return ApiField(
        name=values["name"],
        type=values.get("type", ""),
        description=values.get("description", ""),
    )


def parse_api_docs_text(text: str) -> List[ApiCatalogEntry]:
    """Parse markdown API docs into catalog entries (document order)."""
    apis: List[ApiCatalogEntry] = []
    current: Optional[dict] = None
    in_fields = False

    def flush():
        if current and current["name"]:
            apis.append(ApiCatalogEntry(
                name=current["name"],
                path=current["path"],
                method=current["method"],
                description=current["description"],
                fields=tuple(current["fields"]),
            ))

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("---"):
            continue

        header = _HEADER_RE.match(line)
        if header:
            flush()
            current = {"name": header.group(1).strip(), "path": "", "method": "", "description": "", "fields": []}
            in_fields = False
            continue

        if current is None:
            continue

        for pattern, key in ((_PATH_RE, "path"), (_METHOD_RE, "method"), (_DESC_RE, "description")):
            match = pattern.search(line)
            if match:
                current[key] = match.group(1).strip()
                break
        else:
            if line.startswith("**Fields:**"):
                in_fields = True
            elif in_fields and line.startswith("-"):
                match = _FIELD_RE.match(line)
                if match:
                    current["fields"].append(ApiField(
                        name=match.group(1),
                        type=match.group(2),
                        description=match.group(3).strip(),
                    ))
                else:
                    parsed = _parse_field_parts(line)
                    if parsed is not None:
                        current["fields"].append(parsed)

    flush()
    return apis


def parse_api_docs(path: Union[str, Path]) -> List[ApiCatalogEntry]:
    """Load and parse the API docs file."""
    doc_path = Path(path)
    try:
        text = doc_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Failed to read API docs at {doc_path}: {e}") from e

    apis = parse_api_docs_text(text)
    logger.info(f"Loaded {len(apis)} APIs from {doc_path}")
    return apis
