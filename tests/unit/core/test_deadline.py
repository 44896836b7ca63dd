"""Тесты deadline gate."""

import asyncio
import time

import pytest

from resilient_client.core.deadline import (
    TIMEOUT_STATUS,
    run_under_deadline,
    run_under_deadline_sync,
)
from resilient_client.core.exceptions import ErrorKind
from resilient_client.core.outcome import Failure, Success


class TestSyncDeadline:

    def test_action_result_returned(self):
        outcome = run_under_deadline_sync(lambda: Success(200, b"ok"), 1000)
        assert outcome == Success(200, b"ok")

    def test_timeout_yields_failure(self):
        def slow():
            time.sleep(0.5)
            return Success(200, b"late")

        start = time.monotonic()
        outcome = run_under_deadline_sync(slow, 50)
        elapsed = time.monotonic() - start

        assert isinstance(outcome, Failure)
        assert outcome.kind is ErrorKind.TIMEOUT
        assert outcome.status == TIMEOUT_STATUS == 408
        assert elapsed < 0.4

    def test_action_exception_propagates(self):
        def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            run_under_deadline_sync(broken, 1000)

    @pytest.mark.parametrize("timeout_ms", [0, -1])
    def test_non_positive_timeout(self, timeout_ms):
        with pytest.raises(ValueError):
            run_under_deadline_sync(lambda: Success(200, b""), timeout_ms)


class TestAsyncDeadline:

    @pytest.mark.asyncio
    async def test_action_result_returned(self):
        async def fast():
            return Success(200, b"ok")

        outcome = await run_under_deadline(fast, 1000)
        assert outcome == Success(200, b"ok")

    @pytest.mark.asyncio
    async def test_timeout_cancels_attempt(self):
        cancelled = asyncio.Event()

        async def slow():
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return Success(200, b"late")

        outcome = await run_under_deadline(slow, 50)

        assert isinstance(outcome, Failure)
        assert outcome.kind is ErrorKind.TIMEOUT
        assert outcome.status == 408
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_no_pending_tasks_after_success(self):
        async def fast():
            return Success(200, b"ok")

        before = len(asyncio.all_tasks())
        await run_under_deadline(fast, 1000)
        assert len(asyncio.all_tasks()) == before

    @pytest.mark.asyncio
    async def test_non_positive_timeout(self):
        async def fast():
            return Success(200, b"")

        with pytest.raises(ValueError):
            await run_under_deadline(fast, 0)
