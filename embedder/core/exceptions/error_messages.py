import logging
from enum import Enum
from typing import Optional, Sequence

from fastapi import Request


logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en",)


class ErrorKey(Enum):
    INTERNAL_ERROR = "error_500"
    INVALID_REQUEST = "INVALID_REQUEST"
    EMPTY_INPUT = "EMPTY_INPUT"
    EMPTY_STRING = "EMPTY_STRING"
    INVALID_DIMENSION = "INVALID_DIMENSION"
    INVALID_VALUES = "INVALID_VALUES"
    MISMATCHED_LENGTH = "MISMATCHED_LENGTH"
    INVALID_TOP_K = "INVALID_TOP_K"
    MISSING_OPEN_AI_API_KEY = "MISSING_OPEN_AI_API_KEY"
    PROVIDER_NOT_SUPPORTED = "PROVIDER_NOT_SUPPORTED"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    PROVIDER_RESPONSE_FORMAT = "PROVIDER_RESPONSE_FORMAT"
    MODEL_DIMENSION_MISMATCH = "MODEL_DIMENSION_MISMATCH"
    BATCH_TOO_LARGE = "BATCH_TOO_LARGE"
    STORE_ERROR = "STORE_ERROR"


ERROR_MESSAGES = {
    "en": {
        ErrorKey.INTERNAL_ERROR: "An internal server error occurred. Please try again later.",
        ErrorKey.INVALID_REQUEST: "Invalid request: {0}",
        ErrorKey.EMPTY_INPUT: "Input text is empty",
        ErrorKey.EMPTY_STRING: "Input text is an empty string",
        ErrorKey.INVALID_DIMENSION: "Invalid dimension: expected {0}, got {1}",
        ErrorKey.INVALID_VALUES: "Invalid values in the embedding vector",
        ErrorKey.MISMATCHED_LENGTH: "Mismatched lengths: texts={0}, embeddings={1}",
        ErrorKey.INVALID_TOP_K: "Invalid top_k: expected a non-negative integer, got {0}",
        ErrorKey.MISSING_OPEN_AI_API_KEY: "OpenAI API key is required",
        ErrorKey.PROVIDER_NOT_SUPPORTED: "The embedding provider '{0}' is not supported.",
        ErrorKey.PROVIDER_ERROR: "Embedding provider error: {0}",
        ErrorKey.PROVIDER_RESPONSE_FORMAT: "Invalid response format from embedding provider: {0}",
        ErrorKey.MODEL_DIMENSION_MISMATCH: "Embedding model '{0}' produces {1}-dimensional vectors, the store expects {2}",
        ErrorKey.BATCH_TOO_LARGE: "Batch of {0} texts exceeds the limit of {1} per insert",
        ErrorKey.STORE_ERROR: "Database error: {0}",
    },
}


def get_error_message(
    error_key: ErrorKey,
    request: Optional[Request] = None,
    lang: str = DEFAULT_LANGUAGE,
    error_variables: Sequence = (),
) -> str:
    """
    Retrieves an error message based on the caller's language preference.
    Falls back to DEFAULT_LANGUAGE if no valid language is found.
    """
    if not isinstance(error_key, ErrorKey):
        raise ValueError(f"Invalid error key: {error_key}")

    user_lang = (
        (request.query_params.get("lang") or request.headers.get("Accept-Language"))
        if request
        else lang
    )
    lang = user_lang if user_lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE

    template = ERROR_MESSAGES[lang].get(error_key, error_key.value)
    return template.format(*error_variables)
