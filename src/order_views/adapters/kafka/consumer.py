"""Kafka adapter – OrderStreamConsumer.

Polls the order topics with aiokafka, feeds each batch through
:func:`~order_views.application.processing.process_batch`, and every
``commit_interval_ms`` persists the views and then commits offsets.
Offsets are committed only after a persist attempt so a restart replays
at most one interval of orders.
"""
from __future__ import annotations

import asyncio
from typing import Any

import aiokafka

from order_views.application.commands import Command, CommandKind, ExecutionContext, execute
from order_views.application.processing import process_batch
from order_views.config.settings import KafkaSettings, ProcessorSettings
from order_views.kernel.clock import SYSTEM_CLOCK, Clock
from order_views.observability.logging import get_logger

log = get_logger(__name__)


def create_kafka_consumer(kafka: KafkaSettings, processor: ProcessorSettings) -> Any:
    """Build an :class:`aiokafka.AIOKafkaConsumer` with manual offset commits."""
    log.info("kafka_consumer_creating", group_id=kafka.group_id, bootstrap_servers=kafka.bootstrap_servers)
    return aiokafka.AIOKafkaConsumer(
        *kafka.topics,
        bootstrap_servers=kafka.bootstrap_servers,
        group_id=kafka.group_id,
        enable_auto_commit=False,
        auto_offset_reset="earliest",
        max_poll_records=processor.batch_size,
    )


class OrderStreamConsumer:
    """Consume loop driving the command dispatcher."""

    def __init__(
        self,
        context: ExecutionContext,
        kafka: KafkaSettings,
        *,
        consumer: Any | None = None,
        clock: Clock = SYSTEM_CLOCK,
        error_pause_seconds: float = 1.0,
    ) -> None:
        self._context = context
        self._kafka = kafka
        self._processor = context.config
        self._consumer = consumer if consumer is not None else create_kafka_consumer(kafka, self._processor)
        self._clock = clock
        self._error_pause = error_pause_seconds
        self._running = False
        self._stop_requested = False
        self._last_commit_ms = clock.now_ms()

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        await self._consumer.start()
        log.info("kafka_consumer_started", topics=self._kafka.topics)

    async def stop(self) -> None:
        self._stop_requested = True
        await self._consumer.stop()
        log.info("kafka_consumer_stopped")

    async def __aenter__(self) -> "OrderStreamConsumer":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    async def commit(self) -> None:
        """Persist the current views, then commit consumed offsets."""
        log.info("views_persisting_before_commit")
        await execute(self._context, Command(CommandKind.PERSIST))
        await self._consumer.commit()
        self._last_commit_ms = self._clock.now_ms()
        log.debug("kafka_offsets_committed")

    async def poll_once(self) -> dict[str, int]:
        """Poll one batch, process it, and commit when the interval elapsed."""
        batches = await self._consumer.getmany(
            timeout_ms=self._kafka.poll_timeout_ms,
            max_records=self._processor.batch_size,
        )
        records = [record.value for partition in batches.values() for record in partition]
        if not records:
            return {"total": 0, "success": 0, "errors": 0}

        stats = await process_batch(self._context, records)
        log.info("batch_processed", **stats)
        if self._clock.now_ms() - self._last_commit_ms > self._processor.commit_interval_ms:
            await self.commit()
        return stats

    async def run(self) -> None:
        """Loop until :meth:`stop` or :meth:`request_stop` is called."""
        self._running = True
        log.info(
            "consumer_loop_started",
            poll_timeout_ms=self._kafka.poll_timeout_ms,
            commit_interval_ms=self._processor.commit_interval_ms,
        )
        try:
            while not self._stop_requested:
                try:
                    await self.poll_once()
                except asyncio.CancelledError:
                    log.info("consumer_loop_cancelled")
                    raise
                except Exception as exc:  # noqa: BLE001
                    log.error("consumer_loop_error", error=str(exc))
                    await asyncio.sleep(self._error_pause)
        finally:
            self._running = False
        log.info("consumer_loop_stopped")

    def request_stop(self) -> None:
        """Ask the loop to exit after the poll in progress."""
        self._stop_requested = True


__all__ = ["OrderStreamConsumer", "create_kafka_consumer"]
