"""Kafka adapter – the order stream consumer."""
from order_views.adapters.kafka.consumer import OrderStreamConsumer, create_kafka_consumer

__all__ = ["OrderStreamConsumer", "create_kafka_consumer"]
