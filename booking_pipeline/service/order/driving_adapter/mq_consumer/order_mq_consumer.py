"""
Order Fulfillment Consumer

Responsibility: turn every Booking Record into exactly one Order and one
inventory decrement.

Listens to 1 Topic:
- booking: BookingPlacedEvent, keyed by event_id

Error routing:
- TransientStoreFailure (inventory timeout/unavailable) → retried with backoff,
  then the partition is rewound; the offset is never committed for a failed record
- Malformed record, unknown event → Dead Letter Queue
"""

from typing import Any, Dict, Optional

from booking_pipeline.platform.config.di import container
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.message_queue.base_kafka_consumer import (
    AsyncHandler,
    BaseKafkaConsumer,
)
from booking_pipeline.platform.message_queue.kafka_constant_builder import (
    KafkaConsumerGroupBuilder,
    KafkaTopicBuilder,
    ServiceNames,
)
from booking_pipeline.service.order.app.command.fulfill_booking_use_case import (
    FulfillBookingUseCase,
)
from booking_pipeline.service.order.app.dto.fulfillment_result import FulfillmentResult
from booking_pipeline.service.shared_kernel.domain.domain_event import BookingPlacedEvent


class OrderMqConsumer(BaseKafkaConsumer):
    # Sequential processing keeps decrements in admission order per event
    MAX_CONCURRENT_TASKS: int = 1

    def __init__(self, *, fulfill_booking_use_case: Optional[FulfillBookingUseCase] = None) -> None:
        super().__init__(
            service_name=ServiceNames.ORDER_SERVICE,
            consumer_group_id=KafkaConsumerGroupBuilder.order_service(),
            dlq_topic=KafkaTopicBuilder.booking_dlq(),
        )
        self.booking_topic = KafkaTopicBuilder.booking_placed()
        self.fulfill_booking_use_case: Any = fulfill_booking_use_case

    def _initialize_dependencies(self) -> None:
        if self.fulfill_booking_use_case is None:
            self.fulfill_booking_use_case = container.fulfill_booking_use_case()

    def _get_topic_handlers(self) -> Dict[str, AsyncHandler]:
        return {self.booking_topic: self._handle_booking_placed}

    async def _handle_booking_placed(self, message: Dict) -> FulfillmentResult:
        record = BookingPlacedEvent.from_message(message)

        Logger.base.info(
            f'\033[94m[ORDER-{self.instance_id}] Processing booking_id={record.booking_id} '
            f'event={record.event_id} count={record.ticket_count}\033[0m'
        )

        return await self.fulfill_booking_use_case.fulfill(record=record)
