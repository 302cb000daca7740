"""
New-request detection - decides whether carried slots are discarded
"""

from typing import Optional, Sequence

from api_recommender.config.constants import (
    CREATION_PHRASES,
    NEW_REQUEST_NOUNS,
    SHORT_ANSWER_MAX_TOKENS,
    YES_NO_TOKENS,
)
from api_recommender.models.conversation import ConversationTurn
from api_recommender.utils.text import contains_any, contains_prefix, is_short, words


def is_yes_no_answer(utterance: str) -> bool:
    tokens = words(utterance)
    return bool(tokens) and all(token in YES_NO_TOKENS for token in tokens)


def is_new_request(utterance: str, window: Optional[Sequence[ConversationTurn]] = None) -> bool:
    """
    True when the utterance starts a fresh creation flow.

    Requires a creation phrase and a domain noun; short replies and yes/no
    answers are always continuations. ``window`` is accepted for symmetry with
    the other pipeline steps; the decision only looks at the utterance.
    """
    if is_short(utterance, SHORT_ANSWER_MAX_TOKENS) or is_yes_no_answer(utterance):
        return False
    return contains_any(utterance, CREATION_PHRASES, inflected=True) and contains_prefix(
        utterance, NEW_REQUEST_NOUNS
    )
