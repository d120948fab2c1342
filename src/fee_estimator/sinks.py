"""Persistence and analytics sinks for completed estimates.

The engine never calls these.  Callers that archive results or emit
analytics go through ``record_calculation``, which keeps sink failures
away from the report: a broken store or event pipeline is logged and
skipped, never raised.
"""

from __future__ import annotations

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fee_estimator.config.inputs import Inputs
from fee_estimator.models.results import FeeReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationRecord:
    """One archived estimate."""

    record_id: str
    session_id: str
    inputs: Inputs
    report: FeeReport
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class TrackedEvent:
    name: str
    properties: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CalculationStore(ABC):
    """Abstract archive of ``(inputs, report)`` pairs keyed by an opaque session id."""

    @abstractmethod
    def save(self, inputs: Inputs, report: FeeReport, session_id: str) -> str:
        """Store one estimate and return its record id."""

    @abstractmethod
    def list_for_session(self, session_id: str, limit: int = 50) -> List[CalculationRecord]:
        """Most recent records first."""


class EventSink(ABC):
    """Fire-and-forget analytics."""

    @abstractmethod
    def track(self, event_name: str, properties: Dict[str, Any]) -> None:
        """Publish one event."""


class InMemoryCalculationStore(CalculationStore):
    """
    In-memory store for development and testing.

    Note: not durable; everything is lost when the process exits.
    """

    def __init__(self, max_records: int = 10_000):
        self._records: List[CalculationRecord] = []
        self._max_records = max_records
        self._lock = threading.Lock()

    def save(self, inputs: Inputs, report: FeeReport, session_id: str) -> str:
        record = CalculationRecord(
            record_id=f"calc_{uuid.uuid4().hex[:16]}",
            session_id=session_id,
            inputs=inputs,
            report=report,
        )
        with self._lock:
            self._records.append(record)
            # Trim old records if needed
            if len(self._records) > self._max_records:
                self._records = self._records[-self._max_records:]
        return record.record_id

    def list_for_session(self, session_id: str, limit: int = 50) -> List[CalculationRecord]:
        with self._lock:
            results = [r for r in reversed(self._records) if r.session_id == session_id]
        return results[:limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class InMemoryEventSink(EventSink):
    """Keeps events in a list; for tests and local runs."""

    def __init__(self):
        self.events: List[TrackedEvent] = []
        self._lock = threading.Lock()

    def track(self, event_name: str, properties: Dict[str, Any]) -> None:
        with self._lock:
            self.events.append(TrackedEvent(name=event_name, properties=dict(properties)))


class LoggingEventSink(EventSink):
    """Event sink that logs events for debugging."""

    def __init__(self, log_level: int = logging.INFO):
        self._log_level = log_level

    def track(self, event_name: str, properties: Dict[str, Any]) -> None:
        logger.log(self._log_level, "event %s: %s", event_name, properties)


def calculation_event_properties(inputs: Inputs, report: FeeReport, session_id: str) -> Dict[str, Any]:
    """Flat property map for the ``calculation_completed`` event."""
    platform = inputs.platform.model_dump()
    features_enabled = [name.removesuffix("_enabled") for name, on in platform.items() if on]
    if inputs.fraud_protection_enabled:
        features_enabled.append("fraud_protection")
    if inputs.instant_payouts_enabled:
        features_enabled.append("instant_payouts")
    return {
        "session_id": session_id,
        "monthly_volume": inputs.monthly_volume,
        "effective_rate": report.effective_rate_percent,
        "total_fees": report.total_fees,
        "features_enabled": features_enabled,
    }


def record_calculation(
    store: Optional[CalculationStore],
    events: Optional[EventSink],
    inputs: Inputs,
    report: FeeReport,
    session_id: str,
) -> Optional[str]:
    """Archive an estimate and emit ``calculation_completed``.

    Returns the stored record id, or None when there is no store or it
    failed.  Neither sink can alter or block the report.
    """
    record_id: Optional[str] = None

    if store is not None:
        try:
            record_id = store.save(inputs, report, session_id)
        except Exception:
            logger.warning("failed to archive calculation for session %s", session_id, exc_info=True)

    if events is not None:
        try:
            events.track("calculation_completed", calculation_event_properties(inputs, report, session_id))
        except Exception:
            logger.warning("failed to track calculation_completed for session %s", session_id, exc_info=True)

    return record_id


def track_feature_toggle(events: Optional[EventSink], session_id: str, feature: str, enabled: bool) -> None:
    """Emit ``feature_toggle``; failures are logged, never raised."""
    if events is None:
        return
    try:
        events.track("feature_toggle", {"session_id": session_id, "feature": feature, "enabled": enabled})
    except Exception:
        logger.warning("failed to track feature_toggle for session %s", session_id, exc_info=True)
