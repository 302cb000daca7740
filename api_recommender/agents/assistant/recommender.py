"""
Recommendation engine

Sequential generator calls once the slot set is complete:

1. API selection      - fatal on call/parse failure or an out-of-range index
2. Field selection    - falls back to catalog fields matching the named fields
3. Request payload    - fatal on call failure
4. Event payload      - only for async requests with event fields; failure
                        yields an empty event payload
"""

import json
from typing import Any, List, Optional, Sequence, Tuple

from loguru import logger

from api_recommender.catalog.request_model import EventEnvelope, Request, describe_model, lint_payload
from api_recommender.config.constants import OPERATION_API_TYPES
from api_recommender.config.settings import settings
from api_recommender.llm.completion import CompletionPort
from api_recommender.llm.json_utils import parse_json_object, pretty_json, strip_code_fences
from api_recommender.models.catalog import ApiCatalogEntry, ApiField, Recommendation
from api_recommender.models.query_info import Operation, QueryInfo, TriState
from api_recommender.utils.errors import (
    ApiSelectionError,
    CompletionError,
    IndexOutOfRangeError,
    PayloadSynthesisError,
)
from api_recommender.utils.text import contains_phrase


def _as_index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def describe_request(request: str, query_info: QueryInfo) -> str:
    """User request enriched with usecase and operation hints."""
    described = request
    if query_info.has_use_case:
        described = f"{described} (usecase: {query_info.use_case})"
    if query_info.operation is not Operation.UNSET:
        api_type = OPERATION_API_TYPES.get(query_info.operation.value)
        described = f"{described} (operation: {query_info.operation.value}, API type: {api_type})"
    return described


# ============================================================================
# API selection
# ============================================================================


def build_api_selection_prompt(catalog: Sequence[ApiCatalogEntry], request: str, query_info: QueryInfo) -> str:
    summaries = "\n".join(
        f"[{i}] {api.method} {api.path} - {api.name}: {api.description}" for i, api in enumerate(catalog)
    )
    return f"""You are selecting the best API for the user's request in the {settings.system_name} project.

APIs:
{summaries}

User request: "{describe_request(request, query_info)}"

IMPORTANT:
- "create" or "issue" operation -> look for APIs with "req issue" or "issue" in name/path
- "burn" or "manage" operation -> look for APIs with "req manage" or "manage" in name/path
- "trade" or "settle" operation -> look for APIs with "req settle" or "settle" in name/path
- If a usecase is mentioned (insurance, fd, gold bond, etc.), consider APIs relevant to that usecase

Return ONLY valid JSON with shape: {{"api_index": <int>}}"""


def select_api(
    catalog: Sequence[ApiCatalogEntry],
    request: str,
    query_info: QueryInfo,
    completion: CompletionPort,
) -> Tuple[int, ApiCatalogEntry]:
    """Pick one catalog entry. Raises ApiSelectionError / IndexOutOfRangeError."""
    if not catalog:
        raise ApiSelectionError("API catalog is empty")

    try:
        raw = completion.complete(
            build_api_selection_prompt(catalog, request, query_info),
            settings.selection_temperature,
        )
    except CompletionError as e:
        raise ApiSelectionError(f"API selection call failed: {e}") from e

    parsed = parse_json_object(raw)
    index = _as_index(parsed.get("api_index")) if parsed else None
    if index is None:
        raise ApiSelectionError(f"could not parse api_index from: {raw[:200]!r}")
    if not 0 <= index < len(catalog):
        raise IndexOutOfRangeError(index, len(catalog))

    chosen = catalog[index]
    logger.info(f"Selected API [{index}] {chosen.method} {chosen.path}")
    return index, chosen


# ============================================================================
# Field selection
# ============================================================================


def build_field_selection_prompt(api: ApiCatalogEntry, request: str) -> str:
    summaries = "\n".join(f"[{i}] {f.name} ({f.type}) - {f.description}" for i, f in enumerate(api.fields))
    return f"""For the chosen API "{api.name}" {api.path}:

Fields:
{summaries}

User request: "{request}"

Return ONLY valid JSON with shape: {{"field_index": [<int>, ...]}}"""


def fields_matching_names(api: ApiCatalogEntry, names: Sequence[str]) -> List[ApiField]:
    wanted = {name.lower() for name in names}
    return [f for f in api.fields if f.name.lower() in wanted]


def select_fields(
    api: ApiCatalogEntry,
    request: str,
    query_info: QueryInfo,
    completion: CompletionPort,
) -> List[ApiField]:
    """Pick the API's relevant fields; out-of-range indices are dropped."""
    if not api.fields:
        return []

    try:
        raw = completion.complete(build_field_selection_prompt(api, request), settings.selection_temperature)
    except CompletionError as e:
        logger.warning(f"Field selection failed: {e}. Matching named fields instead.")
        return fields_matching_names(api, sorted(query_info.field_names))

    parsed = parse_json_object(raw)
    indices = parsed.get("field_index") if parsed else None
    if not isinstance(indices, list):
        logger.warning(f"No field_index in field selection response: {raw[:200]!r}. Matching named fields instead.")
        return fields_matching_names(api, sorted(query_info.field_names))

    picked = []
    for value in indices:
        index = _as_index(value)
        if index is not None and 0 <= index < len(api.fields):
            picked.append(api.fields[index])
    return picked


# ============================================================================
# Payload synthesis
# ============================================================================


def wants_xml(texts: Sequence[str]) -> bool:
    return any(contains_phrase(text, "xml") for text in texts)


def build_request_payload_prompt(
    api: ApiCatalogEntry,
    request: str,
    query_info: QueryInfo,
    output_format: str,
) -> str:
    sections = []
    if query_info.field_names:
        usecase_context = ""
        if query_info.has_use_case:
            usecase_context = f" (for {query_info.use_case} usecase"
            if query_info.operation is not Operation.UNSET:
                usecase_context += f" - {query_info.operation.value} operation"
            usecase_context += ")"
        sections.append(
            f"### Fields for REQUEST PAYLOAD ONLY{usecase_context}\n"
            f"Use ONLY these fields in the request payload: {', '.join(sorted(query_info.field_names))}"
        )
    if query_info.event_fields:
        sections.append(
            "### DO NOT INCLUDE EVENT FIELDS IN REQUEST PAYLOAD\n"
            f"These fields belong to the EVENT payload only: {', '.join(sorted(query_info.event_fields))}"
        )

    flags = []
    if query_info.is_async.is_known:
        flags.append(f"- set context.isAsync to {str(query_info.is_async is TriState.TRUE).lower()}")
    if query_info.is_umi_compliant.is_known:
        flags.append(f"- set context.isUMICompliant to {str(query_info.is_umi_compliant is TriState.TRUE).lower()}")
    if query_info.is_private is TriState.TRUE:
        privacy = "Private data: include both 'source' and 'destination' blocks, each with an \"id\"."
    else:
        privacy = "Public data: do NOT include 'source' or 'destination'."

    extra = "\n\n".join(sections)
    flag_lines = "\n".join(flags) if flags else "- omit isAsync and isUMICompliant"

    return f"""You generate a precise, valid sample request payload for an API.

### User Instruction
"{request}"

{extra}

### Request model
{describe_model(Request)}

The selected API endpoint is: "{api.method} {api.path}"

### RULES
1. Output format: {output_format}. Content is identical between JSON and XML; only the syntax changes (XML uses the field names as tags).
2. Populate ONLY the fields the user named for the request payload. Do not invent fields.
3. A named field that does not exist in the model goes into meta.details as {{"name": "<field>", "value": "<dummy_value>"}}.
4. For create/lock/burn of an asset, populate inside payload -> tokenizedAsset.
5. Respect the model hierarchy (context -> meta, payload -> tokenizedAsset -> meta, ...). Never flatten nesting.
6. {privacy}
7. Context flags:
{flag_lines}
8. If no fields were named, return an empty payload.

Return only the payload, without explanations."""


def _finalize_payload(raw: str, output_format: str) -> str:
    payload = strip_code_fences(raw)
    if output_format != "JSON" or not payload:
        return payload

    pretty = pretty_json(payload)
    if pretty is None:
        logger.warning("Request payload is not valid JSON; returning it unchanged")
        return payload

    data = json.loads(payload)
    if isinstance(data, dict):
        for problem in lint_payload(data, Request):
            logger.warning(f"Request payload does not match the request model: {problem}")
    return pretty


def synthesize_request_payload(
    api: ApiCatalogEntry,
    request: str,
    query_info: QueryInfo,
    completion: CompletionPort,
    user_texts: Sequence[str] = (),
) -> str:
    """Generate the sample request payload. Raises PayloadSynthesisError."""
    if not query_info.field_names:
        return ""

    output_format = "XML" if wants_xml(list(user_texts) or [request]) else "JSON"
    try:
        raw = completion.complete(
            build_request_payload_prompt(api, request, query_info, output_format),
            settings.payload_temperature,
        )
    except CompletionError as e:
        logger.error(f"Request payload synthesis failed: {e}")
        raise PayloadSynthesisError(f"request payload synthesis failed: {e}") from e
    return _finalize_payload(raw, output_format)


def build_event_payload_prompt(event_fields: Sequence[str]) -> str:
    fields = ", ".join(event_fields)
    return f"""Generate a JSON payload for an Event with the following fields: {fields}

Event model:
{describe_model(EventEnvelope)}

Rules:
- Only include the fields mentioned: {fields}
- Use dummy values for the fields
- Wrap the event as {{"payload": {{"event": [<event object>]}}}}

Return ONLY the JSON payload, no explanations."""


def synthesize_event_payload(query_info: QueryInfo, completion: CompletionPort) -> str:
    """Event payload for async requests; empty string when not needed or on failure."""
    if query_info.is_async is not TriState.TRUE or not query_info.event_fields:
        return ""

    try:
        raw = completion.complete(
            build_event_payload_prompt(sorted(query_info.event_fields)),
            settings.payload_temperature,
        )
    except CompletionError as e:
        logger.warning(f"Event payload synthesis failed: {e}. Continuing without it.")
        return ""

    payload = strip_code_fences(raw)
    pretty = pretty_json(payload)
    if pretty is None:
        return payload
    data = json.loads(payload)
    if isinstance(data, dict):
        for problem in lint_payload(data, EventEnvelope):
            logger.warning(f"Event payload does not match the event model: {problem}")
    return pretty


def recommend(
    catalog: Sequence[ApiCatalogEntry],
    request: str,
    query_info: QueryInfo,
    completion: CompletionPort,
    user_texts: Sequence[str] = (),
) -> Recommendation:
    """Run the four recommendation steps for a complete slot set."""
    _, api = select_api(catalog, request, query_info, completion)
    fields = select_fields(api, request, query_info, completion)
    request_payload = synthesize_request_payload(api, request, query_info, completion, user_texts)
    event_payload = synthesize_event_payload(query_info, completion)
    return Recommendation(
        api=api,
        fields=fields,
        request_payload=request_payload,
        event_payload=event_payload or None,
    )
