"""Тесты ErrorClassifier."""

import pytest

from resilient_client.core.error_handler import (
    GENERIC_HTTP_MESSAGE,
    NETWORK_MESSAGE,
    STATUS_MESSAGES,
    TIMEOUT_MESSAGE,
    UNKNOWN_MESSAGE,
    ErrorClassifier,
)
from resilient_client.core.exceptions import ApiError, ErrorKind
from resilient_client.core.outcome import Failure, Success


@pytest.fixture
def classifier():
    return ErrorClassifier()


@pytest.mark.parametrize("status", [200, 201, 204, 299])
def test_2xx_is_not_an_error(classifier, status):
    assert classifier.classify(Success(status, b""), None) is None


@pytest.mark.parametrize("status,message", [
    (400, "Bad request. Please check your input."),
    (401, "Unauthorized. Please log in again."),
    (403, "Access forbidden. You don't have permission."),
    (404, "Resource not found."),
    (409, "Conflict. The resource already exists."),
    (422, "Validation failed. Please check your input."),
    (429, "Too many requests. Please try again later."),
    (500, "Server error. Please try again later."),
    (502, "Bad gateway. Service temporarily unavailable."),
    (503, "Service unavailable. Please try again later."),
    (504, "Gateway timeout. Please try again later."),
])
def test_status_table(classifier, status, message):
    error = classifier.classify(Success(status, b""), None)

    assert error.kind is ErrorKind.HTTP
    assert error.status_code == status
    assert error.message == message == STATUS_MESSAGES[status]


def test_unlisted_status_gets_generic_message(classifier):
    error = classifier.classify(Success(418, b""), None)
    assert error.message == GENERIC_HTTP_MESSAGE == "An unexpected error occurred."


def test_body_message_wins(classifier):
    body = {"message": "Email already taken"}
    error = classifier.classify(Success(409, b"..."), body)

    assert error.message == "Email already taken"
    assert error.cause == body


@pytest.mark.parametrize("body", [{"message": ""}, {"message": 42}, ["message"], "message"])
def test_unusable_body_message_ignored(classifier, body):
    error = classifier.classify(Success(404, b"..."), body)
    assert error.message == "Resource not found."


def test_network_failure(classifier):
    cause = ConnectionError("refused")
    error = classifier.classify(Failure(ErrorKind.NETWORK, cause=cause))

    assert error.kind is ErrorKind.NETWORK
    assert error.status_code == 0
    assert error.message == NETWORK_MESSAGE
    assert error.cause is cause


def test_timeout_failure(classifier):
    error = classifier.classify(Failure(ErrorKind.TIMEOUT, status=408))

    assert error.kind is ErrorKind.TIMEOUT
    assert error.status_code == 408
    assert error.message == TIMEOUT_MESSAGE


def test_unknown_failure(classifier):
    error = classifier.classify(Failure(ErrorKind.UNKNOWN, status=200, cause=ValueError("bad json")))

    assert error.kind is ErrorKind.UNKNOWN
    assert error.status_code == 0
    assert error.message == UNKNOWN_MESSAGE


def test_custom_status_messages():
    classifier = ErrorClassifier({404: "Nothing here."})

    assert classifier.message_for_status(404) == "Nothing here."
    assert classifier.message_for_status(500) == STATUS_MESSAGES[500]


@pytest.mark.parametrize("error,expected", [
    (ApiError(ErrorKind.HTTP, "", 503), True),
    (ApiError(ErrorKind.HTTP, "", 429), False),
    (ApiError(ErrorKind.TIMEOUT, "", 408), True),
    (ApiError(ErrorKind.UNKNOWN, "", 0), False),
])
def test_is_retryable(error, expected):
    assert ErrorClassifier.is_retryable(error) is expected
