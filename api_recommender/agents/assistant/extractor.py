"""
Slot extraction

Builds the QueryInfo for the current turn. One generator call extracts every
slot; the keyword fallback fills the slots the generator leaves unknown and
replaces the generator entirely when the call or its JSON fails. The result
is merged onto the slots carried from previous turns.
"""

from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from loguru import logger

from api_recommender.agents.assistant.classifier import is_explanation
from api_recommender.config.constants import (
    EVENT_CUES,
    KNOWN_FIELDS,
    OPERATION_KEYWORDS,
    USECASE_CUES,
    USECASE_KEYWORDS,
    YES_NO_TOKENS,
)
from api_recommender.config.settings import settings
from api_recommender.llm.completion import CompletionPort
from api_recommender.llm.json_utils import parse_json_object
from api_recommender.models.conversation import (
    ASSISTANT,
    USER,
    ConversationTurn,
    format_window,
)
from api_recommender.models.query_info import Operation, QueryInfo, TriState
from api_recommender.utils.errors import CompletionError, ExtractionError
from api_recommender.utils.text import contains_any, contains_phrase, find_phrase, words

_NEGATIONS = frozenset({"not", "no", "non", "without"})
_NEGATIVE_ANSWERS = frozenset({"no", "n", "nope", "false"})
_POSITIVE_ANSWERS = frozenset({"yes", "y", "yeah", "yep", "true", "sure", "ok", "okay"})
# Tokens allowed between a flag keyword and its yes/no value ("umi compliant: yes")
_FLAG_FILLERS = frozenset({"compliant", "compliance", "is", "request", "should", "be", "mode", "flag"})
_SYNC_WORDS = ("sync", "synchronous")

_FLAG_KEYWORDS = {
    "async": ("async", "asynchronous", "isasync"),
    "umi": ("umi", "isumicompliant"),
}


# ============================================================================
# Keyword fallback
# ============================================================================


def _flag_from_text(text: str, flag: str) -> Optional[bool]:
    """Resolve a yes/no flag from text that mentions its keyword, or None."""
    tokens = words(text)
    keywords = _FLAG_KEYWORDS[flag]
    positions = [i for i, token in enumerate(tokens) if token in keywords]

    if not positions:
        if flag == "async" and any(token in _SYNC_WORDS for token in tokens):
            return False
        return None

    for pos in positions:
        if pos > 0 and tokens[pos - 1] in _NEGATIONS:
            return False
        nxt = pos + 1
        while nxt < len(tokens) and nxt - pos <= 2 and tokens[nxt] in _FLAG_FILLERS:
            nxt += 1
        if nxt < len(tokens):
            if tokens[nxt] in _NEGATIVE_ANSWERS:
                return False
            if tokens[nxt] in _POSITIVE_ANSWERS:
                return True
    return True


def _positional_answers(utterance: str, question: str) -> Dict[str, bool]:
    """Match bare yes/no tokens of a reply to the yes/no questions that were asked."""
    asked: List[Tuple[int, str]] = []
    question_tokens = words(question)
    for flag, keywords in _FLAG_KEYWORDS.items():
        for i, token in enumerate(question_tokens):
            if token in keywords:
                asked.append((i, flag))
                break
    asked.sort()

    answers = [token for token in words(utterance) if token in YES_NO_TOKENS]
    resolved = {}
    for (_, flag), answer in zip(asked, answers):
        if answer in _POSITIVE_ANSWERS:
            resolved[flag] = True
        elif answer in _NEGATIVE_ANSWERS:
            resolved[flag] = False
    return resolved


def _resolve_flag(texts: Sequence[str], flag: str) -> Optional[bool]:
    """Latest user text that mentions the flag decides."""
    for text in texts:
        value = _flag_from_text(text, flag)
        if value is not None:
            return value
    return None


def _resolve_privacy(texts: Sequence[str]) -> TriState:
    for text in texts:
        private = find_phrase(text, "private")
        public = find_phrase(text, "public")
        if private and public:
            return TriState.from_bool(private.start() > public.start())
        if private:
            return TriState.TRUE
        if public:
            return TriState.FALSE
    return TriState.UNKNOWN


def _resolve_use_case(texts: Sequence[str]) -> Optional[str]:
    combined = " ".join(texts)
    if not contains_any(combined, USECASE_CUES):
        return None
    for keyword, use_case in USECASE_KEYWORDS:
        if contains_phrase(combined, keyword):
            return use_case
    return None


def _resolve_operation(texts: Sequence[str]) -> Operation:
    for text in texts:
        for keyword, operation in OPERATION_KEYWORDS:
            if contains_phrase(text, keyword, inflected=True):
                return Operation.parse(operation)
    return Operation.UNSET


def _is_explained(text: str, name: str) -> bool:
    return contains_any(text, (f"explain {name}", f"what is {name}", f"explain the {name}", f"what is the {name}"))


def _event_cue_position(text: str) -> Optional[int]:
    starts = [m.start() for m in (find_phrase(text, cue, last=False) for cue in EVENT_CUES) if m]
    return min(starts) if starts else None


def _collect_fields(text: str, event_only: bool) -> Tuple[Set[str], Set[str]]:
    """Known field names in text, split at the first event cue."""
    request_fields, event_fields = set(), set()
    cue = _event_cue_position(text)

    for name in KNOWN_FIELDS:
        match = find_phrase(text, name)
        if match is None or _is_explained(text, name):
            continue
        if event_only or (cue is not None and match.start() > cue):
            event_fields.add(name)
        else:
            request_fields.add(name)
    return request_fields, event_fields


def _asks_only_event_fields(question: str) -> bool:
    return contains_phrase(question, "event payload") and not contains_phrase(question, "request payload")


def _user_exchanges(
    utterance: str, context: Sequence[ConversationTurn]
) -> List[Tuple[str, str]]:
    """
    (user text, assistant question preceding it) pairs, latest first.

    Questions about a field or concept are not answers and are left out, and
    the assistant reply to such a question is not treated as a question.
    """
    exchanges = []
    question = ""
    explained = False
    for turn in context:
        if turn.role == ASSISTANT:
            question = "" if explained else turn.text
        elif turn.role == USER:
            explained = is_explanation(turn.text)
            if not explained:
                exchanges.append((turn.text, question))
    if not is_explanation(utterance):
        exchanges.append((utterance, question))
    return list(reversed(exchanges))


def extract_query_info_fallback(
    utterance: str,
    context: Sequence[ConversationTurn] = (),
) -> QueryInfo:
    """
    Keyword heuristics over the user's own words.

    Only user turns are scanned; the assistant question preceding a reply is
    used to map bare yes/no answers and event-field answers onto the slots
    it asked for.
    """
    exchanges = _user_exchanges(utterance, context)
    texts = [text for text, _ in exchanges]
    question = exchanges[0][1] if exchanges and not is_explanation(utterance) else ""

    flags = {flag: _resolve_flag(texts, flag) for flag in _FLAG_KEYWORDS}
    if question and any(value is None for value in flags.values()):
        for flag, value in _positional_answers(utterance, question).items():
            if flags[flag] is None:
                flags[flag] = value

    field_names: Set[str] = set()
    event_fields: Set[str] = set()
    for text, asked in exchanges:
        request_part, event_part = _collect_fields(text, bool(asked) and _asks_only_event_fields(asked))
        field_names |= request_part
        event_fields |= event_part
    # The request payload wins when a name shows up on both sides
    event_fields -= field_names

    return QueryInfo(
        is_async=TriState.from_bool(flags["async"]),
        is_umi_compliant=TriState.from_bool(flags["umi"]),
        is_private=_resolve_privacy(texts),
        field_names=field_names,
        event_fields=event_fields,
        operation=_resolve_operation(texts),
        use_case=_resolve_use_case(texts),
    )


# ============================================================================
# Generator path
# ============================================================================


def build_extraction_prompt(utterance: str, context: Sequence[ConversationTurn]) -> str:
    if not context:
        context_msg = (
            "Previous conversation context: IGNORE - this is a new request, start fresh. "
            "Do NOT extract event_fields from previous requests. If async is true in this new "
            "request, event_fields should be empty (will be asked separately)."
        )
    else:
        context_msg = f"""Recent conversation context (this is a CONTINUATION - the user is answering questions):
{format_window(context)}

Look for question-answer pairs:
- "Is this async?" followed by "yes" or "no" -> is_async
- "Is this UMI compliant?" followed by "yes" or "no" -> is_umi_compliant
- "Is this private or public?" followed by "private" or "public" -> is_private
- field names mentioned by the user -> field_names
- event_fields only when the user explicitly names event fields in this request's conversation"""

    return f"""Analyze the current creation request and extract the required information.

Current user query: "{utterance}"
{context_msg}

Extract:
1. Usecase ("insurance", "fd", "gold bond", "mutual fund", ...) when the user builds a usecase
2. Operation: "create"/"issue" -> "create", "burn"/"manage" -> "burn", "trade"/"settle" -> "trade"
3. Is it async?
4. Is it UMI compliant?
5. Is it private or public? (private -> true, public -> false)
6. Field names for the REQUEST payload (fields for "request payload", "main payload", or named before any event discussion)
7. Event field names (fields named after "event payload", "event", or "event will have")

Return ONLY a JSON object:
{{
  "usecase": "insurance"/"fd"/"gold bond"/etc. or null,
  "operation": "create"/"burn"/"trade" or null,
  "is_async": true/false/null,
  "is_umi_compliant": true/false/null,
  "is_private": true/false/null,
  "field_names": ["field1", "field2"],
  "event_fields": ["eventField1"]
}}

SEPARATION RULES:
- field_names and event_fields never share a member.
- "request payload will have X, Y" -> X, Y in field_names only.
- "event will have A, B" -> A, B in event_fields only.
- Use null only when the information is not present in this request's conversation."""


def _tri_state(value: Any) -> TriState:
    if isinstance(value, bool):
        return TriState.from_bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes"):
            return TriState.TRUE
        if lowered in ("false", "no"):
            return TriState.FALSE
    return TriState.UNKNOWN


def _name_list(value: Any) -> Set[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple, set)):
        return set()
    return {str(item).strip() for item in value if isinstance(item, (str, int)) and str(item).strip()}


def _use_case(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    cleaned = value.strip().lower()
    if cleaned in ("", "null", "none", "unset", "n/a"):
        return None
    return cleaned


def coerce_query_info(data: Dict[str, Any]) -> QueryInfo:
    """Turn the generator's JSON into a QueryInfo, tolerating loose typing."""
    return QueryInfo(
        is_async=_tri_state(data.get("is_async")),
        is_umi_compliant=_tri_state(data.get("is_umi_compliant")),
        is_private=_tri_state(data.get("is_private")),
        field_names=_name_list(data.get("field_names")),
        event_fields=_name_list(data.get("event_fields")),
        operation=Operation.parse(data.get("operation") if isinstance(data.get("operation"), str) else None),
        use_case=_use_case(data.get("usecase", data.get("use_case"))),
    )


def _extract_with_generator(
    utterance: str,
    context: Sequence[ConversationTurn],
    completion: CompletionPort,
) -> QueryInfo:
    try:
        raw = completion.complete(build_extraction_prompt(utterance, context), settings.extraction_temperature)
    except CompletionError as e:
        raise ExtractionError(f"extraction call failed: {e}") from e

    parsed = parse_json_object(raw)
    if parsed is None:
        raise ExtractionError(f"no JSON object in extraction response: {raw[:200]!r}")
    return coerce_query_info(parsed)


def extract_query_info(
    utterance: str,
    context: Sequence[ConversationTurn],
    prior: Optional[QueryInfo],
    is_new_request: bool,
    completion: CompletionPort,
) -> QueryInfo:
    """
    Extract this turn's slots and merge them onto the carried slots.

    A new request never sees history or prior slots.
    """
    if is_new_request:
        context = []
        prior = QueryInfo()
    prior = prior or QueryInfo()

    fallback = extract_query_info_fallback(utterance, context)
    try:
        generated = _extract_with_generator(utterance, context, completion)
    except ExtractionError as e:
        logger.warning(f"Slot extraction failed: {e}. Using keyword fallback.")
        generated = QueryInfo()

    use_case = generated.use_case if generated.use_case is not None else fallback.use_case
    # The verb that introduces a usecase does not choose its operation
    introduces_use_case = prior.use_case is None and use_case is not None
    extracted = generated.fill_gaps(fallback, include_operation=not introduces_use_case)

    merged = prior.merge(extracted)
    logger.info(f"Extracted slots: {merged.to_dict()}")
    return merged
