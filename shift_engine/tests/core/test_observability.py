"""Tests for logging and metrics helpers."""

import pytest
from prometheus_client import REGISTRY

from shift_engine.core import observability
from shift_engine.core.config import Settings
from shift_engine.core.observability import (
    get_correlation_id,
    initialize_observability,
    log_template_transition,
    monitor_operation,
    set_correlation_id,
    setup_metrics,
)
from shift_engine.custom_types import Failure, Success


def _operations(operation_type: str, status: str) -> float:
    value = REGISTRY.get_sample_value(
        "shift_engine_operations_total",
        {"operation_type": operation_type, "status": status},
    )
    return value or 0.0


class TestMonitorOperation:
    """Test the operation monitoring decorator."""

    @pytest.mark.asyncio
    async def test_counts_success_and_failure(self):
        @monitor_operation("test_async_op")
        async def operation(ok: bool):
            return Success(1) if ok else Failure("nope")

        before_success = _operations("test_async_op", "success")
        before_failure = _operations("test_async_op", "failure")

        await operation(True)
        await operation(False)

        assert _operations("test_async_op", "success") == before_success + 1
        assert _operations("test_async_op", "failure") == before_failure + 1

    @pytest.mark.asyncio
    async def test_exceptions_counted_and_reraised(self):
        @monitor_operation("test_async_error")
        async def operation():
            raise RuntimeError("boom")

        before = _operations("test_async_error", "error")

        with pytest.raises(RuntimeError):
            await operation()

        assert _operations("test_async_error", "error") == before + 1

    def test_sync_functions(self):
        @monitor_operation("test_sync_op", include_args=True)
        def operation(value):
            return Success(value * 2)

        before = _operations("test_sync_op", "success")

        assert operation(21).value == 42
        assert _operations("test_sync_op", "success") == before + 1

    def test_correlation_id_bound_for_call_only(self):
        seen = []

        @monitor_operation("test_correlation")
        def operation():
            seen.append(get_correlation_id())
            return Success(None)

        operation()

        assert seen[0]
        assert get_correlation_id() == ""

    def test_existing_correlation_id_is_kept(self):
        seen = []

        @monitor_operation("test_correlation_kept")
        def operation():
            seen.append(get_correlation_id())
            return Success(None)

        token_id = set_correlation_id("req-123")
        try:
            operation()
        finally:
            set_correlation_id("")

        assert token_id == "req-123"
        assert seen == ["req-123"]

    def test_wrapped_function_metadata(self):
        @monitor_operation("test_metadata")
        async def named_operation():
            """Docstring."""

        assert named_operation.__name__ == "named_operation"
        assert named_operation.__doc__ == "Docstring."


class TestTemplateTransitionMetric:
    """Test the template transition counter."""

    def test_counter_incremented(self):
        labels = {"from_status": "draft", "to_status": "pending_approval"}
        before = (
            REGISTRY.get_sample_value("shift_engine_template_transitions_total", labels)
            or 0.0
        )

        log_template_transition("tpl-1", "draft", "pending_approval")

        after = REGISTRY.get_sample_value(
            "shift_engine_template_transitions_total", labels
        )
        assert after == before + 1


class TestInitialization:
    """Test one-time logging and metrics setup."""

    @pytest.fixture
    def started_ports(self, monkeypatch):
        ports = []
        monkeypatch.setattr(observability, "start_http_server", ports.append)
        monkeypatch.setattr(observability, "_observability_initialized", False)
        monkeypatch.setattr(
            observability, "setup_structured_logging", lambda config=None: None
        )
        return ports

    def test_metrics_server_disabled_by_default(self, started_ports):
        setup_metrics(Settings(_env_file=None, ENABLE_METRICS=False))

        assert started_ports == []

    def test_initializes_once(self, started_ports):
        config = Settings(_env_file=None, ENABLE_METRICS=True, METRICS_PORT=9464)

        initialize_observability(config)
        initialize_observability(config)

        assert started_ports == [9464]
