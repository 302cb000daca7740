"""
Field question answering
"""

from loguru import logger

from api_recommender.config.constants import ASYNC_ANSWER, REDIRECT_MESSAGE, UMI_ANSWER, UMI_COMPLIANT_ANSWER
from api_recommender.config.settings import settings
from api_recommender.llm.completion import CompletionPort
from api_recommender.utils.errors import AnswerGenerationError, CompletionError
from api_recommender.utils.text import contains_any, contains_phrase

_UMI_QUESTION_PHRASES = (
    "explain", "what is", "what does", "meaning", "stand for", "stands for", "full form", "fullform",
)
_ASYNC_QUESTION_PHRASES = (
    "what is", "explain", "what does", "field", "sync vs async", "sync versus async", "difference",
)


def canned_answer(question: str) -> str:
    """Fixed answers for UMI and async questions; empty when none applies."""
    if contains_any(question, ("umi compliant", "umi-compliant")):
        return UMI_COMPLIANT_ANSWER
    if contains_phrase(question, "umi") and contains_any(question, _UMI_QUESTION_PHRASES):
        return UMI_ANSWER
    if contains_any(question, ("async", "isasync")) and contains_any(question, _ASYNC_QUESTION_PHRASES):
        return ASYNC_ANSWER
    return ""


def build_answer_prompt(question: str) -> str:
    name = settings.system_name
    return f"""You are an AI agent for the {name} (Unified Market Interface) project. You answer ONLY questions related to this project.

User question: "{question}"

RULES:
- "{name}" or "{name} compliant" means Unified Market Interface, the compliance standard of this project.
- For "async", "isAsync" or "sync vs async": async flow is FSP commits on DLT -> chaincode sends an event to FSP via gRPC -> FSP produces the event in Kafka -> backend consumes it from Kafka; sync flow processes the request and waits for completion.
- Answer ONLY the current question, clearly and concisely.
- Do NOT suggest APIs or generate payloads.

If the question is not related to the project, reply: "{REDIRECT_MESSAGE}"
If you don't know the answer, say so politely."""


def answer_field_question(question: str, completion: CompletionPort) -> str:
    """Answer a question about a field or concept. Raises AnswerGenerationError."""
    canned = canned_answer(question)
    if canned:
        return canned

    try:
        answer = completion.complete(build_answer_prompt(question), settings.answer_temperature)
    except CompletionError as e:
        logger.error(f"Field question answering failed: {e}")
        raise AnswerGenerationError(f"could not answer question: {e}") from e
    return answer.strip()
