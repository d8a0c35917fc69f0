import pytest

from embedder.core.exceptions import (
    AppException,
    ErrorKey,
    ProviderError,
    StoreError,
    get_error_message,
)
from embedder.core.exceptions.error_messages import ERROR_MESSAGES


def test_every_key_has_an_english_message():
    assert set(ERROR_MESSAGES["en"]) == set(ErrorKey)


def test_message_interpolation():
    message = get_error_message(ErrorKey.INVALID_DIMENSION, error_variables=(3072, 1536))

    assert message == "Invalid dimension: expected 3072, got 1536"


def test_unknown_language_falls_back_to_english():
    assert get_error_message(ErrorKey.EMPTY_INPUT, lang="xx") == "Input text is empty"


def test_invalid_key_is_rejected():
    with pytest.raises(ValueError):
        get_error_message("EMPTY_INPUT")


def test_app_exception_defaults():
    error = AppException(ErrorKey.INVALID_VALUES)

    assert error.status_code == 400
    assert str(error) == "Invalid values in the embedding vector"


def test_provider_and_store_errors_carry_detail():
    provider_error = ProviderError(error_detail="timeout")
    store_error = StoreError(error_detail="relation does not exist")

    assert provider_error.status_code == 502
    assert str(provider_error) == "Embedding provider error: timeout"
    assert store_error.status_code == 500
    assert str(store_error) == "Database error: relation does not exist"


def test_app_exception_keeps_only_message_inputs():
    error = AppException(ErrorKey.PROVIDER_ERROR, 502, error_detail="boom", error_variables=("boom",))

    assert (error.error_key, error.status_code, error.error_detail, error.error_variables) == (
        ErrorKey.PROVIDER_ERROR, 502, "boom", ("boom",)
    )
    with pytest.raises(TypeError):
        AppException(ErrorKey.INVALID_VALUES, error_obj=object())
