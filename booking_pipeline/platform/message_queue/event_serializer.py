"""
Domain Event Serializer

Booking Records travel as orjson-encoded JSON objects:
- attrs fields are flattened with attrs.asdict
- Decimal is encoded as a string so money never passes through float
- trace context (traceparent/tracestate) is embedded in the body
- message_type names the event class for routing on the consumer side
"""

from decimal import Decimal
from typing import Any, Dict, Optional

import attrs
import orjson

from booking_pipeline.service.shared_kernel.domain.domain_event.mq_domain_event import MqDomainEvent


class EventDecodeError(ValueError):
    """Payload is not a JSON object; the record can never be processed."""


def _default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f'Type is not JSON serializable: {type(obj).__name__}')


def serialize_domain_event(
    event: MqDomainEvent, *, trace_context: Optional[Dict[str, str]] = None
) -> bytes:
    payload: Dict[str, Any] = attrs.asdict(event, recurse=True)
    payload['message_type'] = event.__class__.__name__

    if trace_context:
        payload['traceparent'] = trace_context.get('traceparent', '')
        payload['tracestate'] = trace_context.get('tracestate', '')

    return orjson.dumps(payload, default=_default)


def deserialize_message(value: Optional[bytes]) -> Dict[str, Any]:
    if not value:
        raise EventDecodeError('Empty message body')

    try:
        data = orjson.loads(value)
    except orjson.JSONDecodeError as e:
        raise EventDecodeError(f'Invalid JSON payload: {e}') from e

    if not isinstance(data, dict):
        raise EventDecodeError(f'Expected a JSON object, got {type(data).__name__}')
    return data
