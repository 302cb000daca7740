"""
Intent & relevance classification

Decides whether an utterance is off-topic, a question about a field, or part
of a creation request. The keyword checks run first and cannot be overridden
by the generator; the generator is only consulted for the remaining cases and
falls back to keyword heuristics whenever it fails or answers "irrelevant".
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from loguru import logger

from api_recommender.config.constants import (
    CREATION_PHRASES,
    DOMAIN_TERMS,
    EXPLANATION_PHRASES,
    OFF_TOPIC_TERMS,
    SHORT_ANSWER_MAX_TOKENS,
)
from api_recommender.config.settings import settings
from api_recommender.llm.completion import CompletionPort
from api_recommender.llm.json_utils import parse_json_object
from api_recommender.models.conversation import ConversationTurn, format_window, last_turns
from api_recommender.utils.errors import ClassificationError, CompletionError
from api_recommender.utils.text import contains_any, contains_prefix, is_short


@dataclass(frozen=True)
class IntentResult:
    """Outcome of classifying one utterance"""
    is_creation: bool
    is_relevant: bool

    @property
    def is_field_question(self) -> bool:
        return self.is_relevant and not self.is_creation


IRRELEVANT = IntentResult(is_creation=False, is_relevant=False)
FIELD_QUESTION = IntentResult(is_creation=False, is_relevant=True)
CREATION = IntentResult(is_creation=True, is_relevant=True)


def is_off_topic(utterance: str) -> bool:
    """Purchase/vehicle talk with no mention of assets, bonds, tokens or APIs."""
    return contains_any(utterance, OFF_TOPIC_TERMS) and not contains_prefix(
        utterance, DOMAIN_TERMS
    )


def is_explanation(utterance: str) -> bool:
    return contains_any(utterance, EXPLANATION_PHRASES)


def classify_fallback(utterance: str) -> bool:
    """Keyword-only creation decision."""
    if is_explanation(utterance):
        return False
    if contains_any(utterance, CREATION_PHRASES, inflected=True):
        return True
    # Short replies answer a previous follow-up question
    return is_short(utterance, SHORT_ANSWER_MAX_TOKENS)


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes"):
            return True
        if lowered in ("false", "no"):
            return False
    return None


def build_classification_prompt(utterance: str, window: Sequence[ConversationTurn]) -> str:
    recent = format_window(last_turns(window, settings.classification_window_turns))
    return f"""Analyze the following user query for the {settings.system_name} API assistant and determine:
1. Is this asking to CREATE something (e.g., "I want to create a gold bond", "create asset", "make a transaction", "burn asset", "build insurance usecase")
2. Is this asking ABOUT a field or property (e.g., "what is toWalletAddress?", "explain id field", "what does async mean?")
3. Is this providing answers to previous questions (e.g., "yes", "no", "async", "private", field names like "id", "value", operations like "create", "burn", "trade")

Answers to follow-up questions are still part of a creation request, not field questions.

User query: "{utterance}"
Recent conversation:
{recent or "(none)"}

Return ONLY a JSON object:
{{
  "is_creation_request": true or false,
  "is_relevant": true or false,
  "reason": "brief explanation"
}}

Rules:
- "explain X" or "what is X" -> is_creation_request = false, is_relevant = true
- create/make/generate/burn/lock/build usecase -> is_creation_request = true, is_relevant = true
- answers to questions (yes/no/field names/operation types) -> is_creation_request = true, is_relevant = true
- completely unrelated to APIs -> is_relevant = false"""


def _classify_with_generator(
    utterance: str,
    window: Sequence[ConversationTurn],
    completion: CompletionPort,
) -> IntentResult:
    try:
        raw = completion.complete(
            build_classification_prompt(utterance, window),
            settings.classification_temperature,
        )
    except CompletionError as e:
        raise ClassificationError(f"classification call failed: {e}") from e

    parsed = parse_json_object(raw)
    if parsed is None:
        raise ClassificationError(f"no JSON object in classification response: {raw[:200]!r}")

    is_relevant = _as_bool(parsed.get("is_relevant"))
    is_creation = bool(_as_bool(parsed.get("is_creation_request")))
    if is_relevant is False:
        # Only a keyword match may rescue a turn the generator calls irrelevant
        if classify_fallback(utterance):
            logger.info("Generator marked turn irrelevant; keyword fallback overrides to creation")
            return CREATION
        return IRRELEVANT
    return IntentResult(is_creation=is_creation, is_relevant=True)


def classify_intent(
    utterance: str,
    window: Sequence[ConversationTurn],
    completion: CompletionPort,
) -> IntentResult:
    """
    Classify an utterance.

    Order (first match wins):
    1. off-topic lexicon without domain terms -> irrelevant
    2. explanation phrasing -> field question
    3. generator verdict
    4. keyword fallback when the generator fails
    """
    if is_off_topic(utterance):
        logger.info("Utterance classified as off-topic")
        return IRRELEVANT

    if is_explanation(utterance):
        logger.info("Utterance classified as field question")
        return FIELD_QUESTION

    try:
        result = _classify_with_generator(utterance, window, completion)
    except ClassificationError as e:
        logger.warning(f"Classification failed: {e}. Using keyword fallback.")
        return IntentResult(is_creation=classify_fallback(utterance), is_relevant=True)

    logger.info(f"Classified utterance: creation={result.is_creation}, relevant={result.is_relevant}")
    return result
