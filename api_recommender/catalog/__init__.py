"""
API catalog - markdown docs parser and payload model
"""

from api_recommender.catalog.parser import parse_api_docs, parse_api_docs_text

__all__ = [
    "parse_api_docs",
    "parse_api_docs_text",
]
