"""
Assistant Agent - per-turn pipeline boundary

handle_turn(session_id, utterance) -> (response, session_id)
"""

import asyncio
import uuid
import weakref
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from api_recommender.agents.assistant.context import AssistantContext
from api_recommender.agents.assistant.state import AssistantState
from api_recommender.agents.assistant.workflow import build_assistant_workflow
from api_recommender.config.settings import settings
from api_recommender.llm.completion import CompletionPort, LLMCompletion
from api_recommender.memory.history_store import HistoryStore
from api_recommender.models.catalog import ApiCatalogEntry
from api_recommender.models.conversation import ConversationTurn, SessionSummary
from api_recommender.models.query_info import QueryInfo
from api_recommender.utils.errors import ValidationError


class AssistantAgent:
    """
    LangGraph-based API recommender assistant.

    Workflow: classify → [redirect | answer | detect_new_request → extract → gate → (followup | recommend)]

    Turns of one session run one at a time; different sessions may run concurrently.
    A failed turn leaves history and slot state untouched.
    """

    def __init__(
        self,
        catalog: Sequence[ApiCatalogEntry],
        history_store: HistoryStore,
        completion: Optional[CompletionPort] = None,
    ):
        self.catalog = list(catalog)
        self.history_store = history_store
        self.completion = completion or LLMCompletion()
        self.ctx = AssistantContext(completion=self.completion, catalog=self.catalog)
        self.workflow = build_assistant_workflow(self.ctx)
        # Entries vanish once no turn of the session holds or awaits the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

        logger.info(f"AssistantAgent initialized with {len(self.catalog)} APIs")

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    @staticmethod
    def _history_size() -> int:
        return max(
            settings.classification_window_turns,
            settings.new_request_window_turns,
            settings.continuation_window_turns,
        )

    @staticmethod
    def _initial_state(
        session_id: str,
        utterance: str,
        history: List[ConversationTurn],
        prior: QueryInfo,
    ) -> AssistantState:
        return {
            "session_id": session_id,
            "utterance": utterance,
            "history": history,
            "prior_query_info": prior,
            "is_creation": False,
            "is_relevant": True,
            "is_new_request": False,
            "query_info": None,
            "missing": [],
            "recommendation": None,
            "response": "",
            "outcome": "",
        }

    async def handle_turn(self, session_id: Optional[str], utterance: Optional[str]) -> Tuple[str, str]:
        """
        Process one user message.

        Returns (response text, session id). A blank session id starts a new session.
        Raises ValidationError for a blank message and AgentError subclasses for
        failed turns.
        """
        utterance = (utterance or "").strip()
        if not utterance:
            raise ValidationError("message must not be empty")

        session_id = (session_id or "").strip() or str(uuid.uuid4())

        async with self._lock_for(session_id):
            history = await self.history_store.recent_turns(session_id, self._history_size())
            prior = await self.history_store.load_query_info(session_id)

            state = self._initial_state(session_id, utterance, history, prior)
            try:
                out = await self.workflow.ainvoke(state)
            except Exception as e:
                logger.error(f"Turn failed for session {session_id}: {e}")
                raise

            response = out.get("response") or ""
            outcome = out.get("outcome")

            await self.history_store.append_turn(session_id, utterance, response)
            if outcome == "recommendation":
                await self.history_store.clear_query_info(session_id)
            elif outcome == "followup" and out.get("query_info") is not None:
                await self.history_store.save_query_info(session_id, out["query_info"])

        logger.info(f"Session {session_id}: turn handled ({outcome})")
        return response, session_id

    async def list_sessions(self, limit: Optional[int] = None) -> List[SessionSummary]:
        return await self.history_store.list_sessions(limit)

    async def get_session_messages(self, session_id: str, limit: Optional[int] = None) -> List[ConversationTurn]:
        session_id = (session_id or "").strip()
        if not session_id:
            raise ValidationError("session id is required")
        return await self.history_store.get_messages(session_id, limit)
