"""
In-memory audit logs.

Every Furfolio feature that keeps a diagnostic trail (loyalty, reward pools,
tags, charges, crash reports, update checks, exports, ...) records into one
``AuditLog``: a bounded, thread-safe ring buffer of ``AuditEntry`` values.
When the buffer is full the oldest entries are dropped.

Logs are looked up by name through ``get_audit_log()`` so that services and
views share one buffer per feature within a process. Capacities come from
``settings.FURFOLIO_AUDIT_CAPACITIES``.

Example:
    Recording and reading events::

        from apps.audit.buffer import get_audit_log

        log = get_audit_log('loyalty_program')
        log.record('points_added', actor='alice@example.com', points=20)

        for entry in log.recent(5):
            print(entry.timestamp, entry.event, entry.payload)

        json_text = log.export_json()

Note:
    Recording never raises into the caller. Buffers live in process memory
    and are not persisted; use the JSON export for durable copies.
"""

import json
import logging
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)

MIN_CAPACITY = 1
MAX_CAPACITY = 1000
DEFAULT_RECENT_LIMIT = 20


@dataclass(frozen=True)
class AuditEntry:
    """A single audit event."""

    event: str
    payload: Dict[str, Any] = field(default_factory=dict)
    actor: Optional[str] = None
    escalate: bool = False
    timestamp: datetime = field(default_factory=timezone.now)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'timestamp': self.timestamp.isoformat(),
            'event': self.event,
            'actor': self.actor,
            'escalate': self.escalate,
            'payload': self.payload,
        }


class AuditLog:
    """
    Bounded, append-only ring buffer of audit entries.

    All operations are guarded by a single lock, so a log can be shared
    between request threads.

    Args:
        name: Log name, used in log lines and exports.
        capacity: Maximum number of retained entries (1-1000).

    Raises:
        ValueError: If capacity is outside the allowed range.
    """

    def __init__(self, name: str, capacity: int = 100):
        if not MIN_CAPACITY <= capacity <= MAX_CAPACITY:
            raise ValueError(
                f"Audit log capacity must be between {MIN_CAPACITY} and {MAX_CAPACITY}, got {capacity}"
            )
        self.name = name
        self.capacity = capacity
        self._entries = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __repr__(self):
        return f"<AuditLog {self.name} {len(self)}/{self.capacity}>"

    def append(self, entry: AuditEntry) -> AuditEntry:
        """Append an entry, dropping the oldest one when full."""
        with self._lock:
            self._entries.append(entry)
        self._emit(entry)
        return entry

    def record(
        self,
        event: str,
        *,
        actor: Optional[str] = None,
        escalate: bool = False,
        **payload,
    ) -> AuditEntry:
        """
        Build an entry from keyword arguments and append it.

        Args:
            event: Short event name, e.g. ``'points_added'``.
            actor: Who triggered the event (email, role or system name).
            escalate: Flag the entry for attention.
            **payload: JSON-serializable event details.

        Returns:
            The appended AuditEntry.
        """
        entry = AuditEntry(
            event=event,
            payload=payload,
            actor=str(actor) if actor is not None else None,
            escalate=escalate,
        )
        return self.append(entry)

    def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[AuditEntry]:
        """Return the last ``limit`` entries, oldest first."""
        if limit <= 0:
            return []
        with self._lock:
            return list(self._entries)[-limit:]

    def all(self) -> List[AuditEntry]:
        with self._lock:
            return list(self._entries)

    def last(self) -> Optional[AuditEntry]:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_json(self) -> str:
        """Pretty-printed JSON array of all retained entries."""
        return json.dumps(
            [entry.to_dict() for entry in self.all()],
            indent=2,
            sort_keys=True,
            cls=DjangoJSONEncoder,
        )

    def export_last_json(self) -> Optional[str]:
        """Pretty-printed JSON of the newest entry, or None when empty."""
        entry = self.last()
        if entry is None:
            return None
        return json.dumps(entry.to_dict(), indent=2, sort_keys=True, cls=DjangoJSONEncoder)

    def summary(self) -> Dict[str, Any]:
        entries = self.all()
        return {
            'name': self.name,
            'capacity': self.capacity,
            'count': len(entries),
            'escalated': sum(1 for e in entries if e.escalate),
            'last_event_at': entries[-1].timestamp.isoformat() if entries else None,
        }

    def _emit(self, entry: AuditEntry) -> None:
        level = logging.WARNING if entry.escalate else logging.DEBUG
        logger.log(level, "[%s] %s actor=%s %s", self.name, entry.event, entry.actor, entry.payload)


class NullAuditLog(AuditLog):
    """Audit log that keeps nothing. Handy for previews and tests."""

    def __init__(self, name: str = 'null'):
        super().__init__(name, capacity=MIN_CAPACITY)

    def append(self, entry: AuditEntry) -> AuditEntry:
        return entry


# =============================================================================
# Registry
# =============================================================================

_registry: Dict[str, AuditLog] = {}
_registry_lock = threading.Lock()


def capacity_for(name: str) -> int:
    capacities = getattr(settings, 'FURFOLIO_AUDIT_CAPACITIES', {})
    default = getattr(settings, 'FURFOLIO_AUDIT_DEFAULT_CAPACITY', 100)
    return capacities.get(name, default)


def get_audit_log(name: str) -> AuditLog:
    """Return the process-wide audit log called ``name``, creating it on first use."""
    with _registry_lock:
        log = _registry.get(name)
        if log is None:
            log = AuditLog(name, capacity=capacity_for(name))
            _registry[name] = log
        return log


def registered_logs() -> List[AuditLog]:
    with _registry_lock:
        return sorted(_registry.values(), key=lambda log: log.name)


def reset_audit_logs() -> None:
    """Drop every registered log."""
    with _registry_lock:
        _registry.clear()


def record_on_commit(name: str, event: str, *, actor: Optional[str] = None, escalate: bool = False, **payload) -> None:
    """
    Record ``event`` in the log called ``name`` once the current transaction commits.

    Outside a transaction the event is recorded at once. Nothing is
    recorded when the transaction rolls back.
    """
    transaction.on_commit(
        lambda: get_audit_log(name).record(event, actor=actor, escalate=escalate, **payload)
    )


# =============================================================================
# Escalation rule
# =============================================================================

ESCALATION_KEYWORDS = ('danger', 'critical', 'delete')


def should_escalate(operation: str, force: bool = False) -> bool:
    """True when ``force`` is set or the operation name mentions a risky keyword."""
    if force:
        return True
    lowered = (operation or '').lower()
    return any(keyword in lowered for keyword in ESCALATION_KEYWORDS)
