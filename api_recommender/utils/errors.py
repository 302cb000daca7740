"""
Custom error classes for the application
"""


class AgentError(Exception):
    """Base exception for assistant pipeline errors"""
    pass


class CompletionError(AgentError):
    """The text generator call failed"""
    pass


class ClassificationError(AgentError):
    """Error during intent classification (recovered by fallback)"""
    pass


class ExtractionError(AgentError):
    """Error during slot extraction (recovered by fallback)"""
    pass


class ApiSelectionError(AgentError):
    """The API could not be selected from the catalog"""
    pass


class IndexOutOfRangeError(ApiSelectionError):
    """Generator returned an API index outside the catalog bounds"""

    def __init__(self, index: int, catalog_size: int):
        self.index = index
        self.catalog_size = catalog_size
        super().__init__(f"api_index {index} out of range for catalog of {catalog_size} entries")


class PayloadSynthesisError(AgentError):
    """Error while generating the request payload"""
    pass


class AnswerGenerationError(AgentError):
    """Error while answering a field question"""
    pass


class ValidationError(AgentError):
    """Invalid input at the pipeline boundary"""
    pass


class CatalogError(Exception):
    """The API catalog could not be loaded"""
    pass
