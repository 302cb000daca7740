"""
API Recommender Assistant - multi-turn slot filling assistant for UMI tokenization APIs
"""

__version__ = "1.0.0"
