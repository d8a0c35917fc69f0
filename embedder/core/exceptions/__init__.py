from .error_messages import ErrorKey, get_error_message
from .exception_classes import (
    AppException,
    ValidationError,
    EmptyInputError,
    EmptyStringError,
    InvalidDimensionError,
    InvalidValuesError,
    MismatchedLengthError,
    InvalidTopKError,
    BatchTooLargeError,
    ProviderError,
    StoreError,
)

__all__ = [
    "ErrorKey",
    "get_error_message",
    "AppException",
    "ValidationError",
    "EmptyInputError",
    "EmptyStringError",
    "InvalidDimensionError",
    "InvalidValuesError",
    "MismatchedLengthError",
    "InvalidTopKError",
    "BatchTooLargeError",
    "ProviderError",
    "StoreError",
]
