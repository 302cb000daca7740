"""
Data models - slot set, catalog entries and recommendations
"""

from api_recommender.models.catalog import ApiCatalogEntry, ApiField, Recommendation
from api_recommender.models.query_info import Operation, QueryInfo, TriState

__all__ = [
    "ApiCatalogEntry",
    "ApiField",
    "Recommendation",
    "Operation",
    "QueryInfo",
    "TriState",
]
