"""Event publishing with filtered subscriptions, a bounded cache and statistics."""

from __future__ import annotations

import enum
import queue
import secrets
import string
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from daoflow.api.errors import ApiError, ApiErrorCode

DEFAULT_CACHE_SIZE = 1000
SUBSCRIPTION_BUFFER_SIZE = 100

_ID_ALPHABET = string.ascii_letters + string.digits


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EventType(str, enum.Enum):
    """Kind of a system event."""

    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"
    SYSTEM_ERROR = "system.error"

    STATE_CHANGE = "lifecycle.state"
    HEALTH_CHECK = "lifecycle.health"

    PATTERN_DETECTED = "pattern.detected"
    PATTERN_LEARNED = "pattern.learned"
    PATTERN_EVOLVED = "pattern.evolved"

    ENERGY_LOW = "energy.low"
    ENERGY_BALANCE = "energy.balance"
    ENERGY_OVERFLOW = "energy.overflow"


class EventPriority(enum.IntEnum):
    """Priority of an event."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


@dataclass
class Event:
    """A published event."""

    type: EventType
    id: str = ""
    priority: EventPriority = EventPriority.NORMAL
    source: str = ""
    timestamp: datetime = field(default_factory=_now)
    payload: Any = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EventFilter:
    """Selects events; empty fields match everything."""

    types: tuple[EventType, ...] = ()
    priority: EventPriority = EventPriority.LOW
    source: str = ""
    from_time: datetime | None = None
    to_time: datetime | None = None


@dataclass
class Subscription:
    """A subscriber's filter and the queue its events arrive on."""

    id: str
    filter: EventFilter
    channel: queue.Queue[Event] = field(
        default_factory=lambda: queue.Queue(maxsize=SUBSCRIPTION_BUFFER_SIZE)
    )
    active: bool = True


@dataclass
class EventStats:
    """Counts of published events."""

    total_events: int = 0
    events_by_type: dict[EventType, int] = field(default_factory=dict)
    events_by_priority: dict[EventPriority, int] = field(default_factory=dict)
    last_event_time: datetime | None = None


def generate_subscription_id() -> str:
    """Timestamp to the second followed by six random alphanumerics."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return datetime.now().strftime("%Y%m%d%H%M%S") + suffix


class EventsAPI:
    """Publishes events to matching subscribers and keeps recent ones."""

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        self._lock = threading.RLock()
        self._subscriptions: dict[str, Subscription] = {}
        self._cache: list[Event] = []
        self.cache_size = cache_size
        self._stats = EventStats()

    def subscribe(self, event_filter: EventFilter | None = None) -> Subscription:
        with self._lock:
            sub_id = generate_subscription_id()
            while sub_id in self._subscriptions:
                sub_id = generate_subscription_id()
            sub = Subscription(id=sub_id, filter=event_filter or EventFilter())
            self._subscriptions[sub.id] = sub
            return sub

    def unsubscribe(self, sub_id: str) -> None:
        with self._lock:
            sub = self._subscriptions.pop(sub_id, None)
            if sub is None:
                raise ApiError(ApiErrorCode.SUBSCRIPTION_NOT_FOUND, "subscription not found")
            sub.active = False

    def publish(self, event: Event) -> None:
        """Record ``event`` and hand it to every matching subscriber with room."""
        with self._lock:
            stats = self._stats
            stats.total_events += 1
            stats.events_by_type[event.type] = stats.events_by_type.get(event.type, 0) + 1
            stats.events_by_priority[event.priority] = (
                stats.events_by_priority.get(event.priority, 0) + 1
            )
            stats.last_event_time = event.timestamp

            self._cache.append(event)
            if len(self._cache) > self.cache_size:
                del self._cache[0]

            for sub in self._subscriptions.values():
                if sub.active and self.matches(event, sub.filter):
                    try:
                        sub.channel.put_nowait(event)
                    except queue.Full:
                        pass

    def events(self, event_filter: EventFilter | None = None) -> list[Event]:
        """Cached events matching ``event_filter``, oldest first."""
        event_filter = event_filter or EventFilter()
        with self._lock:
            return [e for e in self._cache if self.matches(e, event_filter)]

    def stats(self) -> EventStats:
        """A snapshot of the event statistics."""
        with self._lock:
            return EventStats(
                total_events=self._stats.total_events,
                events_by_type=dict(self._stats.events_by_type),
                events_by_priority=dict(self._stats.events_by_priority),
                last_event_time=self._stats.last_event_time,
            )

    @staticmethod
    def matches(event: Event, event_filter: EventFilter) -> bool:
        if event_filter.types and event.type not in event_filter.types:
            return False
        if event.priority < event_filter.priority:
            return False
        if event_filter.source and event.source != event_filter.source:
            return False
        if event_filter.from_time is not None and event.timestamp < event_filter.from_time:
            return False
        if event_filter.to_time is not None and event.timestamp > event_filter.to_time:
            return False
        return True

    def close(self) -> None:
        """Deactivate and drop every subscription."""
        with self._lock:
            for sub in self._subscriptions.values():
                sub.active = False
            self._subscriptions = {}