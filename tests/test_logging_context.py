"""
Tests for logging context management and log formatting.

Trace IDs live in a contextvar so concurrent uploads never see each other's IDs.
"""

import asyncio
import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from gcloud_storage.core.logging_config import (
    CustomJsonFormatter,
    InfoAndBelowFilter,
    add_app_context,
    clear_trace_id,
    get_logging_config,
    get_trace_id,
    set_trace_id,
)


def make_record(level: int = logging.INFO, msg: str = "gcs_upload_success") -> logging.LogRecord:
    return logging.LogRecord("gcloud_storage.test", level, __file__, 1, msg, None, None)


# ============================================================================
# Context isolation tests
# ============================================================================

@pytest.mark.unit
def test_trace_id_basic_set_get():
    set_trace_id("test-trace-123")
    assert get_trace_id() == "test-trace-123"

    clear_trace_id()
    assert get_trace_id() is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_trace_id_async_task_isolation():
    """Each concurrent task keeps its own trace ID across suspension points."""
    results = []

    async def task_with_trace_id(trace_id: str, delay: float):
        set_trace_id(trace_id)
        await asyncio.sleep(delay)
        results.append((trace_id, get_trace_id()))

    await asyncio.gather(
        task_with_trace_id("trace-1", 0.01),
        task_with_trace_id("trace-2", 0.02),
        task_with_trace_id("trace-3", 0.01),
        task_with_trace_id("trace-4", 0.02),
    )

    assert len(results) == 4
    for expected_id, retrieved_id in results:
        assert expected_id == retrieved_id


@pytest.mark.unit
def test_trace_id_thread_isolation():
    results = []

    def thread_with_trace_id(trace_id: str):
        set_trace_id(trace_id)
        import time
        time.sleep(0.01)
        results.append((trace_id, get_trace_id()))

    with ThreadPoolExecutor(max_workers=4) as executor:
        futures = [executor.submit(thread_with_trace_id, f"trace-{i}") for i in range(4)]
        for future in futures:
            future.result()

    assert len(results) == 4
    for expected_id, retrieved_id in results:
        assert expected_id == retrieved_id


@pytest.mark.unit
@pytest.mark.asyncio
async def test_trace_id_visible_in_worker_thread():
    """Blocking storage writes run via asyncio.to_thread and keep the caller's trace ID."""
    async def handle_request():
        set_trace_id("upload-trace")
        return await asyncio.to_thread(get_trace_id)

    assert await asyncio.create_task(handle_request()) == "upload-trace"


# ============================================================================
# Formatting tests
# ============================================================================

@pytest.mark.unit
def test_add_app_context_includes_trace_id():
    from gcloud_storage.core.config import settings

    async def run():
        set_trace_id("ctx-trace")
        return add_app_context(None, "info", {"event": "gcs_upload_started"})

    event = asyncio.run(run())

    assert event["service"] == settings.SERVICE_NAME
    assert event["version"] == settings.VERSION
    assert event["trace_id"] == "ctx-trace"


@pytest.mark.unit
def test_add_app_context_without_trace_id():
    clear_trace_id()

    event = add_app_context(None, "info", {"event": "gcs_upload_started"})

    assert "trace_id" not in event


@pytest.mark.unit
def test_json_formatter_fields():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    set_trace_id("fmt-trace")
    try:
        payload = json.loads(formatter.format(make_record(logging.WARNING)))
    finally:
        clear_trace_id()

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "gcloud_storage.test"
    assert payload["trace_id"] == "fmt-trace"
    assert payload["timestamp"]


@pytest.mark.unit
def test_info_and_below_filter():
    log_filter = InfoAndBelowFilter()

    assert log_filter.filter(make_record(logging.DEBUG))
    assert log_filter.filter(make_record(logging.INFO))
    assert not log_filter.filter(make_record(logging.ERROR))


@pytest.mark.unit
def test_logging_config_quiets_google_libraries():
    config = get_logging_config(debug=False, json_logs=True)

    assert config["loggers"]["google"]["level"] == "WARNING"
    assert config["loggers"]["urllib3"]["level"] == "WARNING"
    assert config["handlers"]["stderr"]["level"] == "ERROR"
    assert config["formatters"]["json"]["()"].endswith("CustomJsonFormatter")


@pytest.mark.unit
def test_logging_config_console_mode():
    config = get_logging_config(debug=True, json_logs=False)

    assert config["handlers"]["stdout"]["formatter"] == "console"
    assert config["formatters"]["json"]["()"] == "logging.Formatter"
