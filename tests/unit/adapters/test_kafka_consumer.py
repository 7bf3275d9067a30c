"""Unit tests for the Kafka order-stream consumer (aiokafka mocked)."""
from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from order_views.adapters.kafka import consumer as consumer_module
from order_views.adapters.kafka import OrderStreamConsumer, create_kafka_consumer
from order_views.application.commands import ExecutionContext
from order_views.config.settings import KafkaSettings, ProcessorSettings
from order_views.kernel.clock import FrozenClock
from order_views.testing import FailingViewGateway, InMemoryViewGateway, make_order_payload

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_aiokafka_consumer(batches: list[Any] | None = None) -> MagicMock:
    mock_cons = MagicMock()
    mock_cons.start = AsyncMock()
    mock_cons.stop = AsyncMock()
    mock_cons.commit = AsyncMock()
    mock_cons.getmany = AsyncMock(side_effect=batches or [{}])
    return mock_cons


def _records(*payloads: Any) -> dict[str, list[SimpleNamespace]]:
    return {"orders-0": [SimpleNamespace(value=json.dumps(p).encode()) for p in payloads]}


def _make(
    batches: list[Any] | None = None,
    gateway: Any = None,
    clock: FrozenClock | None = None,
) -> tuple[OrderStreamConsumer, MagicMock, ExecutionContext, FrozenClock]:
    clock = clock or FrozenClock(0)
    ctx = ExecutionContext.create(
        ProcessorSettings(batch_size=10, commit_interval_ms=5000),
        gateway if gateway is not None else InMemoryViewGateway(),
        clock=clock,
    )
    mock_cons = _mock_aiokafka_consumer(batches)
    stream = OrderStreamConsumer(ctx, KafkaSettings(), consumer=mock_cons, clock=clock, error_pause_seconds=0)
    return stream, mock_cons, ctx, clock


# ---------------------------------------------------------------------------
# create_kafka_consumer
# ---------------------------------------------------------------------------


class TestCreateKafkaConsumer:
    def test_manual_commit_configuration(self) -> None:
        with patch.object(consumer_module.aiokafka, "AIOKafkaConsumer") as ctor:
            create_kafka_consumer(
                KafkaSettings(bootstrap_servers="kafka:9092", topics=["orders", "orders-replay"]),
                ProcessorSettings(batch_size=50),
            )
        args, kwargs = ctor.call_args
        assert args == ("orders", "orders-replay")
        assert kwargs["bootstrap_servers"] == "kafka:9092"
        assert kwargs["group_id"] == "query-processor"
        assert kwargs["enable_auto_commit"] is False
        assert kwargs["auto_offset_reset"] == "earliest"
        assert kwargs["max_poll_records"] == 50


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_context_manager_starts_and_stops(self) -> None:
        stream, mock_cons, _, _ = _make()

        async def run() -> None:
            async with stream:
                mock_cons.start.assert_awaited_once()
            mock_cons.stop.assert_awaited_once()

        asyncio.run(run())
        assert not stream.running


# ---------------------------------------------------------------------------
# poll_once
# ---------------------------------------------------------------------------


class TestPollOnce:
    def test_processes_batch(self) -> None:
        batch = _records(make_order_payload(order_id="O1"), {"order_id": "bad"}, make_order_payload(order_id="O2"))
        stream, mock_cons, ctx, _ = _make([batch])
        stats = asyncio.run(stream.poll_once())
        assert stats == {"total": 3, "success": 2, "errors": 1}
        assert ctx.view_store.read().processing_stats.processed_count == 2
        mock_cons.getmany.assert_awaited_once_with(timeout_ms=1000, max_records=10)

    def test_empty_poll(self) -> None:
        stream, mock_cons, _, _ = _make([{}])
        assert asyncio.run(stream.poll_once()) == {"total": 0, "success": 0, "errors": 0}
        mock_cons.commit.assert_not_awaited()

    def test_no_commit_before_interval(self) -> None:
        stream, mock_cons, _, clock = _make([_records(make_order_payload())])
        clock.advance(5000)
        asyncio.run(stream.poll_once())
        mock_cons.commit.assert_not_awaited()

    def test_persists_then_commits_after_interval(self) -> None:
        gateway = InMemoryViewGateway()
        stream, mock_cons, ctx, clock = _make([_records(make_order_payload())], gateway=gateway)
        clock.advance(5001)
        asyncio.run(stream.poll_once())
        mock_cons.commit.assert_awaited_once()
        # one save from consume, one from the persist before commit
        assert len(gateway.saved) == 2
        assert gateway.saved[-1] is ctx.view_store.read()

    def test_commits_even_when_persist_fails(self) -> None:
        stream, mock_cons, _, clock = _make([_records(make_order_payload())], gateway=FailingViewGateway())
        clock.advance(6000)
        asyncio.run(stream.poll_once())
        mock_cons.commit.assert_awaited_once()


# ---------------------------------------------------------------------------
# run loop
# ---------------------------------------------------------------------------


class TestRunLoop:
    def test_runs_until_stop_requested(self) -> None:
        stream, mock_cons, ctx, _ = _make()
        calls = 0

        async def getmany(**_: Any) -> dict[str, Any]:
            nonlocal calls
            calls += 1
            if calls == 1:
                return _records(make_order_payload())
            stream.request_stop()
            return {}

        mock_cons.getmany = AsyncMock(side_effect=getmany)
        asyncio.run(stream.run())
        assert calls == 2
        assert ctx.view_store.read().processing_stats.processed_count == 1
        assert not stream.running

    def test_survives_poll_errors(self) -> None:
        stream, mock_cons, _, _ = _make()
        calls = 0

        async def getmany(**_: Any) -> dict[str, Any]:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("broker unavailable")
            stream.request_stop()
            return {}

        mock_cons.getmany = AsyncMock(side_effect=getmany)
        asyncio.run(stream.run())
        assert calls == 2

    def test_cancellation_propagates(self) -> None:
        stream, mock_cons, _, _ = _make()

        async def getmany(**_: Any) -> dict[str, Any]:
            await asyncio.sleep(10)
            return {}

        mock_cons.getmany = AsyncMock(side_effect=getmany)

        async def run() -> None:
            task = asyncio.create_task(stream.run())
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            assert task.cancelled()

        asyncio.run(run())
        assert not stream.running

    def test_stop_requested_before_start_is_honoured(self) -> None:
        stream, mock_cons, _, _ = _make()
        stream.request_stop()
        asyncio.run(stream.run())
        mock_cons.getmany.assert_not_awaited()
