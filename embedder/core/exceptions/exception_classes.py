from typing import Sequence

from embedder.core.exceptions.error_messages import ErrorKey, get_error_message


class AppException(Exception):
    """
        Root of every error raised by the embedder.

        The exception carries an error key, resolved to a human readable
        message through the error messages module, and the HTTP status code
        the REST layer answers with.

        Attributes:
            error_key (ErrorKey): Key used to look up the message.
            status_code (int): HTTP status code for the error response (default: 400).
            error_detail (str): Optional free-form detail, logged and returned only in DEBUG.
            error_variables (Sequence): Values interpolated into the message.

        Example:
            ```python
            raise AppException(ErrorKey.INVALID_VALUES, 400)
            ```
        """
    def __init__(self, error_key: ErrorKey, status_code=400, error_detail="",
                 error_variables: Sequence = ()):
        self.error_key: ErrorKey = error_key
        self.status_code = status_code
        self.error_detail = error_detail
        self.error_variables = tuple(error_variables)
        super().__init__(get_error_message(error_key, error_variables=self.error_variables))


# --------------------------------------------------------------------------- #
# Validation errors: raised by the smart constructors, before any I/O
# --------------------------------------------------------------------------- #
class ValidationError(AppException):
    def __init__(self, error_key: ErrorKey, error_variables: Sequence = ()):
        super().__init__(error_key, status_code=400, error_variables=error_variables)


class EmptyInputError(ValidationError):
    def __init__(self):
        super().__init__(ErrorKey.EMPTY_INPUT)


class EmptyStringError(ValidationError):
    def __init__(self):
        super().__init__(ErrorKey.EMPTY_STRING)


class InvalidDimensionError(ValidationError):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(ErrorKey.INVALID_DIMENSION, error_variables=(expected, got))


class InvalidValuesError(ValidationError):
    def __init__(self):
        super().__init__(ErrorKey.INVALID_VALUES)


class MismatchedLengthError(ValidationError):
    def __init__(self, texts: int, embeddings: int):
        self.texts = texts
        self.embeddings = embeddings
        super().__init__(ErrorKey.MISMATCHED_LENGTH, error_variables=(texts, embeddings))


class InvalidTopKError(ValidationError):
    def __init__(self, top_k):
        self.top_k = top_k
        super().__init__(ErrorKey.INVALID_TOP_K, error_variables=(top_k,))


class BatchTooLargeError(ValidationError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(ErrorKey.BATCH_TOO_LARGE, error_variables=(size, limit))


# --------------------------------------------------------------------------- #
# I/O errors: surfaced as-is, never retried
# --------------------------------------------------------------------------- #
class ProviderError(AppException):
    def __init__(self, error_key: ErrorKey = ErrorKey.PROVIDER_ERROR, error_detail="",
                 status_code=502):
        super().__init__(error_key, status_code=status_code, error_detail=error_detail,
                         error_variables=(error_detail,))


class StoreError(AppException):
    def __init__(self, error_detail="", error_key: ErrorKey = ErrorKey.STORE_ERROR):
        super().__init__(error_key, status_code=500, error_detail=error_detail,
                         error_variables=(error_detail,))
