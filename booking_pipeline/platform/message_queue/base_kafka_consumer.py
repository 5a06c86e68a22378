from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import Event
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional

from confluent_kafka import Consumer, KafkaError, KafkaException, Message, Producer, TopicPartition
from opentelemetry import trace
import orjson
from sqlalchemy.exc import InterfaceError, OperationalError, TimeoutError as PoolTimeoutError


if TYPE_CHECKING:
    from anyio.from_thread import BlockingPortal

from booking_pipeline.platform.config.core_setting import settings
from booking_pipeline.platform.exception.exceptions import TransientStoreFailure
from booking_pipeline.platform.logging.loguru_io import Logger
from booking_pipeline.platform.message_queue.event_serializer import deserialize_message
from booking_pipeline.platform.observability.tracing import extract_trace_context


AsyncHandler = Callable[[Dict], Awaitable[Any]]


class BaseKafkaConsumer(ABC):
    # === Tuning Parameters (subclasses can override) ===
    #
    # POLL_TIMEOUT_SECONDS: Max time poll() waits for messages
    #   - Too long → high latency; Too short → CPU spin
    #
    # COMMIT_INTERVAL_SECONDS: How often to batch commit offsets
    #   - Too long → more reprocessing on restart; Too short → broker overhead
    #
    # MAX_PENDING_COMMITS: Force commit after this many messages
    #
    # MAX_CONCURRENT_TASKS: Records handled at once
    #   - 1 = strictly sequential on the poll thread (per-partition order preserved)
    #
    # RETRYABLE_ERRORS: Handler errors that are retried in place and never dead-lettered.
    #   When retries run out the partition is rewound so the record is redelivered.
    #   Covers store outages: dropped or refused DB connections and pool exhaustion.
    #
    # DLQ_FLUSH_TIMEOUT_SECONDS: Max wait for the DLQ ack before the record is rewound
    #
    POLL_TIMEOUT_SECONDS: float = 0.05
    COMMIT_INTERVAL_SECONDS: float = 0.1
    MAX_PENDING_COMMITS: int = 100
    MAX_CONCURRENT_TASKS: int = 1
    RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
        TransientStoreFailure,
        OperationalError,
        InterfaceError,
        PoolTimeoutError,
    )
    DLQ_FLUSH_TIMEOUT_SECONDS: float = 5.0

    def __init__(
        self,
        *,
        service_name: str,
        consumer_group_id: str,
        dlq_topic: str,
        retry_attempts: Optional[int] = None,
        retry_backoff_seconds: Optional[float] = None,
    ) -> None:
        self.service_name = service_name
        self.consumer_group_id = consumer_group_id
        self.dlq_topic = dlq_topic
        self.instance_id = settings.KAFKA_CONSUMER_INSTANCE_ID
        self.retry_attempts = (
            retry_attempts if retry_attempts is not None else settings.ORDER_CONSUMER_RETRY_ATTEMPTS
        )
        self.retry_backoff_seconds = (
            retry_backoff_seconds
            if retry_backoff_seconds is not None
            else settings.ORDER_CONSUMER_RETRY_BACKOFF_SECONDS
        )
        if self.retry_attempts < 1:
            raise ValueError(f'retry_attempts must be >= 1, got {self.retry_attempts}')

        # Kafka clients
        self.consumer: Optional[Consumer] = None
        self.producer: Optional[Producer] = None  # For sending to DLQ
        self.portal: Optional['BlockingPortal'] = None  # anyio cross-thread bridge
        self.tracer = trace.get_tracer(__name__)

        # Running state control
        self.running = False
        self.stop_event = Event()
        # Offset tracking (for batch commit) # Structure: { topic_name: { partition_id: next_offset_to_commit } }
        self._pending_offsets: Dict[str, Dict[int, int]] = {}
        self._pending_count = 0  # Messages pending commit
        self._last_commit_time = time.monotonic()

    def set_portal(self, portal: 'BlockingPortal') -> None:
        self.portal = portal

    @abstractmethod
    def _get_topic_handlers(self) -> Dict[str, AsyncHandler]:
        """
        Return topic name to async handler mapping.

        Example:
            return {
                'booking': self._handle_booking_placed,
            }
        """
        pass

    @abstractmethod
    def _initialize_dependencies(self) -> None:
        """Initialize use cases and dependencies before consumer starts."""
        pass

    def _create_consumer(self) -> Consumer:
        """
        Create Kafka Consumer.

        Key settings explained:
        - group.id: Consumer group name, consumers in same group share topic
        - auto.offset.reset: Where to start when no committed offset (earliest/latest)
        - enable.auto.commit: False = offsets committed only after a record is handled
        - fetch.wait.max.ms: Max time broker waits for data (lower = lower latency)
        - session.timeout.ms: How long before consumer is considered dead
        - max.poll.interval.ms: Must exceed the worst-case retry loop of one record
        """
        return Consumer(
            {
                'bootstrap.servers': settings.KAFKA_BOOTSTRAP_SERVERS,
                'group.id': self.consumer_group_id,
                'client.id': f'{self.service_name}-{self.instance_id}',
                'auto.offset.reset': settings.KAFKA_CONSUMER_AUTO_OFFSET_RESET,
                'enable.auto.commit': False,
                # Low latency settings (librdkafka default: 500, 1)
                'fetch.wait.max.ms': 50,
                'fetch.min.bytes': 1,
                # Session management (librdkafka default: 45000, 3000)
                'session.timeout.ms': 45000,
                'heartbeat.interval.ms': 15000,
                'max.poll.interval.ms': 300000,
                # Reconnection (librdkafka default: 100, 10000)
                'reconnect.backoff.ms': 1000,
                'reconnect.backoff.max.ms': 30000,
            }
        )

    def _create_producer(self) -> Producer:
        return Producer(
            {
                'bootstrap.servers': settings.KAFKA_BOOTSTRAP_SERVERS,
                'acks': 'all',  # Wait for all replicas to acknowledge
                'retries': 3,
            }
        )

    def _send_to_dlq(
        self,
        *,
        message: Dict,
        original_topic: str,
        error: str,
        retry_count: int = 0,
    ) -> bool:
        """
        Write the record to the DLQ and wait for the broker ack.

        Returns:
            True only when the DLQ write is confirmed; the caller may then acknowledge
            the original record. False means the caller must rewind instead.
        """
        if not self.producer:
            Logger.base.error('DLQ producer not initialized')
            return False

        dlq_message = {
            'original_message': message,
            'original_topic': original_topic,
            'error': error,
            'retry_count': retry_count,
            'timestamp': time.time(),
            'instance_id': self.instance_id,
        }
        delivery_errors: List[KafkaError] = []

        def _on_delivery(err: Optional[KafkaError], _msg: Optional[Message]) -> None:
            if err is not None:
                delivery_errors.append(err)

        try:
            self.producer.produce(
                topic=self.dlq_topic,
                key=str(message.get('booking_id', 'unknown')).encode('utf-8'),
                value=orjson.dumps(dlq_message),
                on_delivery=_on_delivery,
            )
            undelivered = self.producer.flush(self.DLQ_FLUSH_TIMEOUT_SECONDS)
        except (BufferError, KafkaException) as e:
            Logger.base.error(f'[DLQ] Failed to send {message.get("booking_id")}: {e}')
            return False

        if undelivered or delivery_errors:
            Logger.base.error(
                f'[DLQ] Not confirmed {message.get("booking_id")}: '
                f'undelivered={undelivered} errors={delivery_errors}'
            )
            return False

        Logger.base.warning(f'[DLQ] Sent: {message.get("booking_id")} - {error}')
        return True

    def _track_offset(self, msg: Message) -> None:
        """
        Track processed offset for batch commit.

        Kafka commits the NEXT offset to read, not the one just processed.
        Example: processed offset=5 → commit offset=6
        """
        topic, partition = msg.topic(), msg.partition()
        offset = msg.offset() + 1

        if topic not in self._pending_offsets:
            self._pending_offsets[topic] = {}

        if offset > self._pending_offsets[topic].get(partition, -1):
            self._pending_offsets[topic][partition] = offset
            self._pending_count += 1

    def _maybe_commit_offsets(self, *, force: bool = False) -> None:
        """
        Batch commit offsets.

        Triggers when ANY of:
        - force=True (shutdown)
        - pending_count >= MAX_PENDING_COMMITS
        - time >= COMMIT_INTERVAL_SECONDS
        """
        now = time.monotonic()
        time_elapsed = now - self._last_commit_time

        should_commit = (
            force
            or self._pending_count >= self.MAX_PENDING_COMMITS
            or time_elapsed >= self.COMMIT_INTERVAL_SECONDS
        )

        if not should_commit or not self._pending_offsets:
            return

        try:
            offsets_to_commit = [
                TopicPartition(topic, partition, offset)
                for topic, partitions in self._pending_offsets.items()
                for partition, offset in partitions.items()
            ]

            if offsets_to_commit and self.consumer:
                self.consumer.commit(offsets=offsets_to_commit, asynchronous=False)
                Logger.base.debug(f'[{self.service_name}] Committed {self._pending_count} offsets')

            self._pending_offsets.clear()
            self._pending_count = 0
            self._last_commit_time = now

        except Exception as e:
            Logger.base.error(f'[{self.service_name}] Commit failed: {e}')

    def _rewind(self, msg: Message) -> None:
        """Seek the partition back to this record so the next poll redelivers it."""
        if not self.consumer:
            return
        self.consumer.seek(TopicPartition(msg.topic(), msg.partition(), msg.offset()))
        Logger.base.warning(
            f'[{self.service_name}] Rewound {msg.topic()} p={msg.partition()} to offset={msg.offset()}'
        )

    def _run_handler(self, handler: AsyncHandler, data: Dict) -> Any:
        if self.portal is None:
            raise RuntimeError('BlockingPortal not set; call set_portal() before start()')
        return self.portal.call(handler, data)

    def _backoff(self, attempt: int) -> None:
        # Interruptible sleep: stop() wakes the consumer immediately
        self.stop_event.wait(self.retry_backoff_seconds * (2 ** (attempt - 1)))

    def _process_message(self, msg: Message, handler: AsyncHandler, topic: str) -> bool:
        """
        Process one record on the poll thread.

        Flow: deserialize → extract trace → call handler → track offset
        - Retryable error → backoff and retry; exhausted → rewind, offset NOT tracked
        - Any other error → send to DLQ, track offset once the DLQ write is confirmed
        - DLQ write fails → rewind, offset NOT tracked

        Returns:
            True if the record is done (handled or dead-lettered), False if rewound
        """
        ts = msg.timestamp()
        if ts and ts[0] == 1:  # CreateTime
            age_ms = int(datetime.now(timezone.utc).timestamp() * 1000) - ts[1]
            if age_ms > 1000:
                Logger.base.warning(f'[SLOW] {topic} p={msg.partition()} age={age_ms}ms')

        try:
            data = deserialize_message(msg.value())
        except Exception as e:
            Logger.base.error(f'[{self.service_name}] Undecodable record: {e}')
            raw = msg.value()
            if not self._send_to_dlq(
                message={'raw': raw.hex() if raw else 'empty'}, original_topic=topic, error=str(e)
            ):
                self._rewind(msg)
                return False
            self._track_offset(msg)
            return True

        extract_trace_context(
            headers={
                'traceparent': data.get('traceparent', ''),
                'tracestate': data.get('tracestate', ''),
            }
        )

        with self.tracer.start_as_current_span(
            f'consumer.{topic}',
            attributes={
                'messaging.system': 'kafka',
                'messaging.destination': topic,
                'messaging.kafka.partition': msg.partition(),
                'messaging.kafka.offset': msg.offset(),
                'booking.id': str(data.get('booking_id', 'unknown')),
            },
        ):
            for attempt in range(1, self.retry_attempts + 1):
                try:
                    self._run_handler(handler, data)
                    self._track_offset(msg)
                    return True
                except self.RETRYABLE_ERRORS as e:
                    Logger.base.warning(
                        f'[{self.service_name}] Retryable failure {attempt}/{self.retry_attempts} '
                        f'booking_id={data.get("booking_id")}: {e}'
                    )
                    if attempt < self.retry_attempts and not self.stop_event.is_set():
                        self._backoff(attempt)
                except Exception as e:
                    Logger.base.error(f'[{self.service_name}] Error: {e}')
                    if not self._send_to_dlq(
                        message=data, original_topic=topic, error=str(e), retry_count=attempt - 1
                    ):
                        break
                    self._track_offset(msg)
                    return True

        # Not acknowledged: leave the offset uncommitted and redeliver
        self._rewind(msg)
        return False

    def start(self) -> None:
        """Start consumer with retry for topic creation. Blocks until stop()."""
        max_retries, delay = 5, 2

        for attempt in range(1, max_retries + 1):
            try:
                self._initialize_dependencies()
                self.consumer = self._create_consumer()
                self.producer = self._create_producer()

                handlers = self._get_topic_handlers()
                self.consumer.subscribe(list(handlers.keys()))

                Logger.base.info(
                    f'[{self.service_name}-{self.instance_id}] Started | '
                    f'group={self.consumer_group_id} topics={list(handlers.keys())} '
                    f'concurrency={self.MAX_CONCURRENT_TASKS}'
                )

                self.running = True
                self._run_loop(handlers)
                break

            except KafkaException as e:
                if 'UNKNOWN_TOPIC_OR_PART' in str(e) and attempt < max_retries:
                    Logger.base.warning(
                        f'[{self.service_name}] {attempt}/{max_retries}: Topic not ready, retry in {delay}s'
                    )
                    time.sleep(delay)
                    delay *= 2
                else:
                    Logger.base.error(f'[{self.service_name}] Start failed: {e}')
                    raise

        self._shutdown_clients()

    def _poll_once(self, handlers: Dict[str, AsyncHandler]) -> None:
        """
        1. poll() fetches next message (max POLL_TIMEOUT_SECONDS)
        2. No message → check if commit needed
        3. Has message → process it in place (sequential)
        """
        msg = self.consumer.poll(timeout=self.POLL_TIMEOUT_SECONDS)  # type: ignore[union-attr]

        if msg is None:
            self._maybe_commit_offsets()
            return

        if msg.error():
            if msg.error().code() != KafkaError._PARTITION_EOF:
                Logger.base.error(f'[{self.service_name}] Kafka error: {msg.error()}')
            return

        topic = msg.topic()
        handler = handlers.get(topic)
        if handler is None:
            return

        self._process_message(msg, handler, topic)
        self._maybe_commit_offsets()

    def _run_loop(self, handlers: Dict[str, AsyncHandler]) -> None:
        while self.running and not self.stop_event.is_set():
            try:
                self._poll_once(handlers)
            except Exception as e:
                Logger.base.error(f'[{self.service_name}] Loop error: {e}')
                time.sleep(0.1)

    def stop(self) -> None:
        """
        Graceful shutdown: set stop flag; the poll thread finishes the current
        record, commits and closes the clients.
        """
        # Set even before start() so a consumer still connecting exits its loop
        self.stop_event.set()
        if not self.running:
            return

        Logger.base.info(f'[{self.service_name}] Stopping...')
        self.running = False

    def _shutdown_clients(self) -> None:
        # Final commit
        self._maybe_commit_offsets(force=True)

        # Close consumer (triggers rebalance, other consumers take over partitions)
        if self.consumer:
            try:
                self.consumer.close()
            except Exception as e:
                Logger.base.warning(f'[{self.service_name}] Close error: {e}')

        # Flush DLQ producer
        if self.producer:
            self.producer.flush(timeout=5.0)

        Logger.base.info(f'[{self.service_name}] Stopped')
