"""
Assistant context - dependencies for workflow nodes
"""

from dataclasses import dataclass
from typing import List

from api_recommender.llm.completion import CompletionPort
from api_recommender.models.catalog import ApiCatalogEntry


@dataclass
class AssistantContext:
    """Context holding dependencies for assistant workflow nodes"""

    completion: CompletionPort
    catalog: List[ApiCatalogEntry]
