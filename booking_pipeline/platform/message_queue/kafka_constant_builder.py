from booking_pipeline.platform.config.core_setting import settings


class ServiceNames:
    """Service name constants"""

    BOOKING_SERVICE = 'booking-service'  # HTTP API + admission check + publish
    INVENTORY_SERVICE = 'inventory-service'  # Capacity owner (read + decrement)
    ORDER_SERVICE = 'order-service'  # Kafka consumer + order persistence


class KafkaTopicBuilder:
    """
    Kafka Topic Naming Unified Builder

    One topic carries every Booking Record; records are keyed by event_id so that
    bookings of the same event land on the same partition in admission order.
    """

    @staticmethod
    def booking_placed() -> str:
        """Booking Records published by the booking service, consumed by the order service."""
        return settings.KAFKA_BOOKING_TOPIC

    # ====== Dead Letter Queues =======
    @staticmethod
    def booking_dlq() -> str:
        """Dead Letter Queue for records the order service cannot process (permanent errors)"""
        return f'{settings.KAFKA_BOOKING_TOPIC}-dlq'

    @staticmethod
    def get_all_topics() -> list[str]:
        return [
            KafkaTopicBuilder.booking_placed(),
            KafkaTopicBuilder.booking_dlq(),
        ]


class KafkaConsumerGroupBuilder:
    @staticmethod
    def order_service() -> str:
        return settings.KAFKA_ORDER_CONSUMER_GROUP


class KafkaMessageKeyBuilder:
    """Partition key for Booking Records: ordering is guaranteed per event."""

    @staticmethod
    def booking_placed(*, event_id: int) -> str:
        return str(event_id)
