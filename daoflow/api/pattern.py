"""Pattern registry with weighted feature matching and change events."""

from __future__ import annotations

import enum
import queue
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from daoflow.api.errors import ApiError, ApiErrorCode

EVENT_BUFFER_SIZE = 100
DEFAULT_LEARNING_RATE = 0.1
DEFAULT_MIN_CONFIDENCE = 0.6


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PatternType(str, enum.Enum):
    """Kind of a pattern."""

    BEHAVIOR = "behavior"
    RESOURCE = "resource"
    ENERGY = "energy"
    ANOMALY = "anomaly"
    CYCLE = "cycle"


@dataclass
class Pattern:
    """A pattern described by feature weights and a match threshold."""

    id: str
    type: PatternType
    name: str = ""
    features: dict[str, float] = field(default_factory=dict)
    weights: dict[str, float] = field(default_factory=dict)
    threshold: float = 0.0
    confidence: float = 0.0
    create_time: datetime | None = None
    update_time: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PatternMatch:
    """A pattern that matched a feature set, with its score."""

    pattern_id: str
    score: float
    timestamp: datetime = field(default_factory=_now)
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class PatternStats:
    """Summary of the registered patterns."""

    total_patterns: int = 0
    active_patterns: int = 0
    match_rate: float = 0.0
    average_score: float = 0.0
    type_distribution: dict[PatternType, int] = field(default_factory=dict)


@dataclass(frozen=True)
class PatternEvent:
    """Notification about a pattern being registered, updated or matched."""

    type: str
    pattern: Pattern
    match: PatternMatch | None = None
    timestamp: datetime = field(default_factory=_now)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class PatternAPI:
    """Registers patterns and scores feature sets against them."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._patterns: dict[str, Pattern] = {}
        self.learning_rate = DEFAULT_LEARNING_RATE
        self.min_confidence = DEFAULT_MIN_CONFIDENCE
        self._events: queue.Queue[PatternEvent] = queue.Queue(maxsize=EVENT_BUFFER_SIZE)
        self._closed = False

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("pattern API is closed")

    def _emit(self, event: PatternEvent) -> None:
        try:
            self._events.put_nowait(event)
        except queue.Full:
            pass

    def register_pattern(self, pattern: Pattern) -> None:
        """Add ``pattern``, replacing any with the same ID."""
        with self._lock:
            self._ensure_open()
            if not pattern.id:
                raise ApiError(ApiErrorCode.INVALID_PATTERN, "pattern ID is required")
            try:
                pattern.type = PatternType(pattern.type)
            except ValueError:
                raise ApiError(ApiErrorCode.INVALID_PATTERN, "invalid pattern type") from None
            pattern.create_time = _now()
            pattern.update_time = pattern.create_time
            self._patterns[pattern.id] = pattern
            self._emit(PatternEvent(type="pattern_registered", pattern=pattern))

    def match_pattern(self, features: dict[str, float]) -> list[PatternMatch]:
        """Every pattern whose score for ``features`` reaches its threshold."""
        with self._lock:
            self._ensure_open()
            matches = []
            for pattern in self._patterns.values():
                score = self.calculate_match_score(pattern, features)
                if score < pattern.threshold:
                    continue
                match = PatternMatch(
                    pattern_id=pattern.id,
                    score=score,
                    details={"features": features, "threshold": pattern.threshold},
                )
                matches.append(match)
                self._emit(PatternEvent(type="pattern_matched", pattern=pattern, match=match))
            return matches

    def update_pattern(self, pattern_id: str, updates: dict[str, Any]) -> Pattern:
        """Apply ``features``, ``weights`` and ``threshold`` from ``updates``."""
        with self._lock:
            self._ensure_open()
            pattern = self.get_pattern(pattern_id)
            features = updates.get("features")
            if isinstance(features, dict):
                pattern.features = dict(features)
            weights = updates.get("weights")
            if isinstance(weights, dict):
                pattern.weights = dict(weights)
            threshold = updates.get("threshold")
            if _is_number(threshold):
                pattern.threshold = float(threshold)
            pattern.update_time = _now()
            self._emit(PatternEvent(type="pattern_updated", pattern=pattern))
            return pattern

    def get_pattern(self, pattern_id: str) -> Pattern:
        with self._lock:
            pattern = self._patterns.get(pattern_id)
            if pattern is None:
                raise ApiError(ApiErrorCode.PATTERN_NOT_FOUND, "pattern not found")
            return pattern

    def stats(self) -> PatternStats:
        """Counts, active patterns and average confidence."""
        with self._lock:
            result = PatternStats(total_patterns=len(self._patterns))
            total_confidence = 0.0
            for pattern in self._patterns.values():
                result.type_distribution[pattern.type] = (
                    result.type_distribution.get(pattern.type, 0) + 1
                )
                if pattern.confidence >= self.min_confidence:
                    result.active_patterns += 1
                total_confidence += pattern.confidence
            if self._patterns:
                result.average_score = total_confidence / len(self._patterns)
            return result

    def subscribe(self) -> queue.Queue[PatternEvent]:
        """Queue receiving pattern events; events are dropped when it is full."""
        return self._events

    @staticmethod
    def calculate_match_score(pattern: Pattern, features: dict[str, float]) -> float:
        """Weighted mean of ``features`` over the pattern's weights; 0 without weight."""
        score = 0.0
        total_weight = 0.0
        for feature, weight in pattern.weights.items():
            if feature in features:
                score += weight * features[feature]
            total_weight += weight
        return score / total_weight if total_weight > 0 else 0.0

    def close(self) -> None:
        with self._lock:
            self._closed = True