"""
Shared fixtures: a scripted completion port and a small API catalog
"""

import json
from typing import Any, Callable, List, Sequence, Tuple, Union

import pytest

from api_recommender.models.catalog import ApiCatalogEntry, ApiField
from api_recommender.utils.errors import CompletionError

# Prompt markers of each generator call
CLASSIFY = "is_creation_request"
EXTRACT = "Analyze the current creation request"
FOLLOWUP = "Generate ONE single question"
OPERATION = "which operation they want"
SELECT_API = '"api_index"'
SELECT_FIELDS = '"field_index"'
REQUEST_PAYLOAD = "sample request payload"
EVENT_PAYLOAD = "Generate a JSON payload for an Event"
ANSWER = "You answer ONLY questions"

Reply = Union[str, Exception, Callable[[str], str]]


class FakeCompletion:
    """
    Completion port that answers by prompt marker.

    Routes are checked in order; the first marker found in the prompt picks
    the reply. A reply can be a string, an exception to raise, or a callable
    receiving the prompt. Unrouted prompts fail like an unreachable model.
    """

    def __init__(self, routes: Sequence[Tuple[str, Reply]] = ()):
        self.routes: List[Tuple[str, Reply]] = list(routes)
        self.prompts: List[str] = []

    def complete(self, prompt: str, temperature: float) -> str:
        self.prompts.append(prompt)
        for marker, reply in self.routes:
            if marker in prompt:
                if isinstance(reply, Exception):
                    raise reply
                if callable(reply):
                    return reply(prompt)
                return reply
        raise CompletionError("generator unavailable")

    def calls_with(self, marker: str) -> List[str]:
        return [p for p in self.prompts if marker in p]


def as_json(**values: Any) -> str:
    return json.dumps(values)


NULL_EXTRACTION = as_json(
    usecase=None,
    operation=None,
    is_async=None,
    is_umi_compliant=None,
    is_private=None,
    field_names=[],
    event_fields=[],
)


@pytest.fixture
def catalog() -> List[ApiCatalogEntry]:
    return [
        ApiCatalogEntry(
            name="Req Issue",
            path="/v1/req/issue",
            method="POST",
            description="Issue tokenized assets",
            fields=(
                ApiField("id", "string", "Asset identifier"),
                ApiField("value", "string", "Asset value"),
                ApiField("toWalletAddress", "string", "Receiving wallet"),
            ),
        ),
        ApiCatalogEntry(
            name="Req Manage",
            path="/v1/req/manage",
            method="POST",
            description="Burn or lock tokenized assets",
            fields=(ApiField("id", "string", "Asset identifier"),),
        ),
        ApiCatalogEntry(
            name="Req Settle",
            path="/v1/req/settle",
            method="POST",
            description="Trade and settle tokenized assets",
            fields=(),
        ),
    ]
