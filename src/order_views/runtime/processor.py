"""Runtime – start and stop a processor instance.

Wires settings → database gateway → view store → command context →
Kafka consume loop, and tears them down in reverse order with a final
persist of the views.
"""
from __future__ import annotations

import asyncio
import dataclasses
import signal
from typing import Any

from order_views.adapters.kafka import OrderStreamConsumer
from order_views.adapters.sqlalchemy import SqlAlchemySessionFactory, SqlAlchemyViewGateway, create_schema
from order_views.application.commands import Command, CommandKind, ExecutionContext, execute
from order_views.config.loaders import load_settings
from order_views.config.settings import AppSettings
from order_views.kernel.errors import ConfigError
from order_views.observability.logging import bind_processor, configure_logging, get_logger
from order_views.resilience.retry import ExponentialBackoff, RetryPolicy

log = get_logger(__name__)

STOP_TIMEOUT_SECONDS = 5.0


def default_connect_policy() -> RetryPolicy:
    """10 attempts, 2 s initial delay doubling up to 30 s."""
    return RetryPolicy(max_attempts=10, backoff=ExponentialBackoff(initial=2.0, maximum=30.0))


@dataclasses.dataclass
class Processor:
    """Handle on a running processor, returned by :func:`start_processor`."""

    settings: AppSettings
    session_factory: SqlAlchemySessionFactory
    gateway: SqlAlchemyViewGateway
    context: ExecutionContext
    stream: OrderStreamConsumer
    task: asyncio.Task[None] | None = None


async def start_processor(
    settings: AppSettings,
    *,
    kafka_consumer: Any | None = None,
    connect_policy: RetryPolicy | None = None,
    run_loop: bool = True,
) -> Processor:
    """Connect storage (with retry), create the schema and start consuming."""
    processor_id = settings.processor.processor_id
    bind_processor(processor_id)
    log.info("processor_starting", processor_id=processor_id)

    session_factory = SqlAlchemySessionFactory(settings.database.url, echo=settings.database.echo)
    gateway = SqlAlchemyViewGateway(
        session_factory,
        timeout=settings.processor.persist_timeout_seconds,
        timeline_limit=settings.processor.timeline_max_size,
    )
    try:
        await (connect_policy or default_connect_policy()).execute_async(gateway.liveness_probe)
        await create_schema(session_factory.engine)
    except Exception:
        log.error("processor_start_failed", processor_id=processor_id)
        await gateway.close()
        raise
    log.info("database_connected", url=session_factory.engine.url.render_as_string(hide_password=True))

    context = ExecutionContext.create(settings.processor, gateway)
    stream = OrderStreamConsumer(context, settings.kafka, consumer=kafka_consumer)
    try:
        await stream.start()
    except Exception:
        log.error("kafka_consumer_start_failed", processor_id=processor_id)
        await gateway.close()
        raise

    processor = Processor(
        settings=settings,
        session_factory=session_factory,
        gateway=gateway,
        context=context,
        stream=stream,
    )
    if run_loop:
        processor.task = asyncio.create_task(stream.run(), name=f"consumer-{processor_id}")
    log.info("processor_started", processor_id=processor_id)
    return processor


async def stop_processor(processor: Processor) -> None:
    """Stop consuming, persist the final views and release connections.

    Failures are logged; this never raises.
    """
    log.info("processor_stopping")
    processor.stream.request_stop()
    if processor.task is not None:
        try:
            await asyncio.wait_for(processor.task, timeout=STOP_TIMEOUT_SECONDS)
        except TimeoutError:
            log.warning("consumer_loop_stop_timeout")
        except Exception as exc:  # noqa: BLE001
            log.error("consumer_loop_failed", error=str(exc))

    result = await execute(processor.context, Command(CommandKind.PERSIST))
    log.info("final_views_persisted", success=result["success"])

    try:
        await processor.stream.stop()
    except Exception as exc:  # noqa: BLE001
        log.error("kafka_consumer_stop_failed", error=str(exc))
    try:
        await processor.gateway.close()
    except Exception as exc:  # noqa: BLE001
        log.error("gateway_close_failed", error=str(exc))
    log.info("processor_stopped")


async def run_forever(settings: AppSettings | None = None) -> None:
    """Start a processor and run it until SIGINT/SIGTERM."""
    settings = settings or load_settings()
    processor = await start_processor(settings)
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)
    log.info("processor_running")
    await stop_event.wait()
    await stop_processor(processor)


def main() -> None:
    configure_logging()
    try:
        settings = load_settings()
    except ConfigError as exc:
        log.error("invalid_configuration", **exc.log_context())
        raise SystemExit(2) from exc
    asyncio.run(run_forever(settings))


__all__ = [
    "Processor",
    "default_connect_policy",
    "main",
    "run_forever",
    "start_processor",
    "stop_processor",
]
