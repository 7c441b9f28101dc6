"""Batch lifecycle controller.

    active ──dispatch──▶ dispatched   (terminal)
       └────expire────▶ expired       (terminal)

One ``BatchLifecycle`` owns the status of one batch; transitions on it are
serialized by an instance lock.  Expiry is observed, not scheduled: the
caller invokes ``check_expiry`` when it reads or evaluates the batch.

The controller consumes risk tiers (``should_prompt_dispatch``) but never
calls the scorer, and the scorer never changes a status.
"""

import logging
import threading
from datetime import datetime

from app.middleware.exceptions import InvalidTransitionError
from app.schemas.batch import BatchSnapshot, BatchStatus, DispatchCommand, LifecycleEvent
from app.schemas.risk import RiskAssessment, RiskTier
from app.services.risk_scoring import ensure_valid_shelf_life
from app.utils.dates import as_utc, elapsed_days

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[BatchStatus, frozenset[BatchStatus]] = {
    BatchStatus.ACTIVE: frozenset({BatchStatus.DISPATCHED, BatchStatus.EXPIRED}),
    BatchStatus.DISPATCHED: frozenset(),
    BatchStatus.EXPIRED: frozenset(),
}

# Tiers at which an operator is prompted to dispatch an active batch
DISPATCH_PROMPT_TIERS = frozenset({RiskTier.HIGH})


def can_transition(from_status: BatchStatus, to_status: BatchStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS[from_status]


class BatchLifecycle:
    """Authoritative status holder for a single batch."""

    def __init__(
        self,
        batch_id: str,
        status: BatchStatus = BatchStatus.ACTIVE,
        destination: str | None = None,
        dispatch_date: datetime | None = None,
    ):
        self.batch_id = batch_id
        self._status = BatchStatus(status)
        self.destination = destination
        self.dispatch_date = dispatch_date
        self._history: list[LifecycleEvent] = []
        self._lock = threading.Lock()

    @classmethod
    def from_snapshot(cls, snapshot: BatchSnapshot) -> "BatchLifecycle":
        return cls(
            batch_id=snapshot.batch_id,
            status=snapshot.status,
            destination=snapshot.destination,
            dispatch_date=snapshot.dispatch_date,
        )

    @property
    def status(self) -> BatchStatus:
        return self._status

    @property
    def is_terminal(self) -> bool:
        return self._status.is_terminal

    @property
    def history(self) -> list[LifecycleEvent]:
        return list(self._history)

    def _transition(
        self,
        to_status: BatchStatus,
        occurred_at: datetime,
        destination: str | None = None,
        reason: str | None = None,
    ) -> LifecycleEvent:
        # Caller holds self._lock
        if not can_transition(self._status, to_status):
            logger.warning(
                "Refused transition for batch %s: %s -> %s",
                self.batch_id, self._status.value, to_status.value,
            )
            raise InvalidTransitionError(
                self.batch_id, self._status.value, to_status.value
            )

        event = LifecycleEvent(
            batch_id=self.batch_id,
            from_status=self._status,
            to_status=to_status,
            occurred_at=as_utc(occurred_at),
            destination=destination,
            reason=reason,
        )
        self._status = to_status
        self._history.append(event)
        logger.info(
            "Batch %s: %s -> %s", self.batch_id, event.from_status.value, to_status.value
        )
        return event

    def dispatch(self, command: DispatchCommand) -> LifecycleEvent:
        """Send the batch to ``command.destination``.

        Raises:
            InvalidTransitionError: if the batch is already dispatched or
                expired.  Status, destination and dispatch date are untouched.
        """
        with self._lock:
            event = self._transition(
                BatchStatus.DISPATCHED,
                command.dispatch_date,
                destination=command.destination,
                reason="dispatch command",
            )
            self.destination = command.destination
            self.dispatch_date = event.occurred_at
            return event

    def expire(self, at: datetime, reason: str = "marked expired") -> LifecycleEvent:
        """Mark the batch expired.  Raises InvalidTransitionError from a terminal state."""
        with self._lock:
            return self._transition(BatchStatus.EXPIRED, at, reason=reason)

    def check_expiry(
        self,
        entry_date: datetime,
        shelf_life_days: float,
        now: datetime,
    ) -> LifecycleEvent | None:
        """Expire an active batch whose shelf life has run out as of ``now``.

        Returns the expiry event, or None when nothing changed (still within
        shelf life, or already in a terminal state).

        Raises:
            InvalidConfigurationError: if ``shelf_life_days`` is not positive.
        """
        ensure_valid_shelf_life(self.batch_id, shelf_life_days)
        with self._lock:
            if self._status is not BatchStatus.ACTIVE:
                return None
            elapsed = elapsed_days(entry_date, now)
            if elapsed < shelf_life_days:
                return None
            return self._transition(
                BatchStatus.EXPIRED,
                now,
                reason=f"shelf life of {shelf_life_days:g} days reached after {elapsed:.1f} days",
            )

    def should_prompt_dispatch(self, assessment: RiskAssessment) -> bool:
        """Whether an operator should be asked to dispatch this batch now."""
        return (
            self._status is BatchStatus.ACTIVE
            and assessment.tier in DISPATCH_PROMPT_TIERS
        )

    def apply_to(self, snapshot: BatchSnapshot) -> BatchSnapshot:
        """Copy of ``snapshot`` carrying this controller's status fields."""
        return snapshot.model_copy(update={
            "status": self._status,
            "destination": self.destination,
            "dispatch_date": self.dispatch_date,
        })
