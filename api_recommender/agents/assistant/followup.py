"""
Follow-up question composer

Turns the gate's missing slots into exactly one question. A usecase without
an operation is asked on its own before anything else.
"""

from typing import List

from loguru import logger

from api_recommender.agents.assistant.gate import CompletenessResult, MissingSlot, check_completeness
from api_recommender.config.constants import USECASE_FIELDS
from api_recommender.config.settings import settings
from api_recommender.llm.completion import CompletionPort
from api_recommender.models.query_info import Operation, QueryInfo
from api_recommender.utils.errors import CompletionError

ASYNC_ITEM = "Is this request async? (yes/no)"
UMI_ITEM = "Is this UMI compliant? (yes/no)"
PRIVATE_ITEM = "Is this private or public?"
FIELDS_ITEM = "Please provide at least one field name for the REQUEST payload (e.g., id, type, value, etc.)"
EVENT_FIELDS_ITEM = (
    "Since this is an async request, please provide at least one field name for the EVENT payload "
    "separately (e.g., id, type, eventType, timestamp, etc.). These are kept apart from the "
    "fields of the main payload."
)


def suggested_fields(use_case: str, operation: Operation) -> List[str]:
    """Usecase specific request fields; create is assumed when no operation is chosen."""
    op = operation.value if operation is not Operation.UNSET else Operation.CREATE.value
    return list(USECASE_FIELDS.get(use_case.lower(), {}).get(op, ()))


def _fields_item(query_info: QueryInfo) -> str:
    if not query_info.has_use_case:
        return FIELDS_ITEM
    suggestions = suggested_fields(query_info.use_case, query_info.operation)
    if not suggestions:
        return FIELDS_ITEM
    op = query_info.operation.value if query_info.operation is not Operation.UNSET else "create"
    return (
        "Please provide at least one field name for the REQUEST payload. "
        f"Suggested fields for {query_info.use_case} ({op}): {', '.join(suggestions)}"
    )


def missing_items(query_info: QueryInfo, result: CompletenessResult) -> List[str]:
    """Natural-language item per missing slot (operation excluded)."""
    items = []
    for slot in result.missing:
        if slot is MissingSlot.ASYNC:
            items.append(ASYNC_ITEM)
        elif slot is MissingSlot.UMI:
            items.append(UMI_ITEM)
        elif slot is MissingSlot.PRIVATE:
            items.append(PRIVATE_ITEM)
        elif slot is MissingSlot.FIELDS:
            items.append(_fields_item(query_info))
        elif slot is MissingSlot.EVENT_FIELDS:
            items.append(EVENT_FIELDS_ITEM)
    return items


def operation_question_fallback(use_case: str) -> str:
    return (
        f"For {use_case} usecase, which operation do you want to perform?\n\n"
        "- CREATE/ISSUE -> use req issue API\n"
        "- BURN/MANAGE -> use req manage API\n"
        "- TRADE/SETTLE -> use req settle API\n\n"
        "Please specify: create, burn, or trade"
    )


def consolidated_question_fallback(items: List[str]) -> str:
    if len(items) == 1:
        return f"To proceed with your request, please answer: {items[0]}"
    numbered = "".join(f"{i}. {item}\n" for i, item in enumerate(items, start=1))
    return (
        "To proceed with your request, I need the following information:\n"
        f"{numbered}Please provide all of these details at once."
    )


def _paraphrase(prompt: str, completion: CompletionPort) -> str:
    """Generator paraphrase; empty string when it fails or says nothing."""
    try:
        return completion.complete(prompt, settings.followup_temperature).strip()
    except CompletionError as e:
        logger.warning(f"Follow-up generation failed: {e}. Using template.")
        return ""


def compose_operation_question(use_case: str, completion: CompletionPort) -> str:
    prompt = f"""The user wants to build a {use_case} usecase. Ask them which operation they want to perform:
- Create/Issue (req issue API)
- Burn/Manage (req manage API)
- Trade/Settle (req settle API)

Generate a friendly question asking which operation they want. Return ONLY the question."""
    return _paraphrase(prompt, completion) or operation_question_fallback(use_case)


def compose_followup(query_info: QueryInfo, completion: CompletionPort) -> str:
    """
    Compose one follow-up question for everything the gate reports missing.

    Returns an empty string when nothing is missing.
    """
    result = check_completeness(query_info)
    if MissingSlot.OPERATION in result.missing:
        return compose_operation_question(query_info.use_case, completion)

    items = missing_items(query_info, result)
    if not items:
        return ""

    listing = "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))
    prompt = f"""You are an API assistant for the {settings.system_name} project. The user wants to create something, but you need {len(items)} piece(s) of information before you can proceed.

Missing information:
{listing}

Generate ONE single question that asks for ALL {len(items)} item(s) above.
- Do not ask them one by one
- Do not split into multiple questions
- Do not ask for anything that is not listed above
- Format it like: "To proceed, I need the following: 1) [item 1], 2) [item 2]. Please provide all of these."

Return ONLY the single question text. Be friendly and clear."""
    return _paraphrase(prompt, completion) or consolidated_question_fallback(items)
