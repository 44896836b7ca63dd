"""Tests for RequestResult and AttemptOutcome."""

import pytest

from resilient_client.core.exceptions import ErrorKind
from resilient_client.core.outcome import Failure, Success
from resilient_client.core.result import RequestResult


def test_success_result_to_dict():
    result = RequestResult(success=True, data={"ok": True}, status_code=200)
    assert result.to_dict() == {"success": True, "data": {"ok": True}, "statusCode": 200}


def test_fallback_result_to_dict():
    result = RequestResult(
        success=False,
        data={"items": []},
        status_code=503,
        error="Service unavailable. Please try again later.",
        is_fallback=True,
    )
    assert result.to_dict() == {
        "success": False,
        "data": {"items": []},
        "statusCode": 503,
        "error": "Service unavailable. Please try again later.",
        "isFallback": True,
    }


def test_fallback_cannot_be_success():
    with pytest.raises(ValueError):
        RequestResult(success=True, data=None, status_code=200, is_fallback=True)


def test_result_immutable():
    result = RequestResult(success=True, data=None, status_code=204)
    with pytest.raises(AttributeError):
        result.success = False


@pytest.mark.parametrize("status,ok", [(200, True), (204, True), (299, True), (199, False), (300, False), (503, False)])
def test_success_outcome_ok(status, ok):
    assert Success(status, b"").ok is ok


def test_failure_outcome_defaults():
    failure = Failure(ErrorKind.NETWORK)
    assert failure.status is None
    assert failure.cause is None
