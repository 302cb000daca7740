"""
Memory layer - conversation history and per-session slot state
"""

from api_recommender.memory.history_store import HistoryStore, get_history_store

__all__ = [
    "HistoryStore",
    "get_history_store",
]
