"""Tests for correlation ID and extra field filters."""

import asyncio
import logging

import pytest

from resilient_client.core.logging.filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


def make_record():
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", (), None)


def test_set_get_clear():
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"
    clear_correlation_id()
    assert get_correlation_id() is None


def test_correlation_filter_adds_id():
    set_correlation_id("req-2")
    record = make_record()

    assert CorrelationIdFilter().filter(record) is True
    assert record.correlation_id == "req-2"


def test_correlation_filter_without_id():
    record = make_record()
    CorrelationIdFilter().filter(record)
    assert not hasattr(record, "correlation_id")


@pytest.mark.asyncio
async def test_correlation_id_isolated_between_tasks():
    async def worker(request_id):
        set_correlation_id(request_id)
        await asyncio.sleep(0.01)
        return get_correlation_id()

    assert await asyncio.gather(worker("a"), worker("b")) == ["a", "b"]


def test_extra_fields_filter():
    record = make_record()
    record.service = "kept"

    ExtraFieldsFilter({"service": "dashboard", "env": "test"}).filter(record)

    assert record.service == "kept"
    assert record.env == "test"
