"""Committed-obligation lookups per owner."""

import bisect
from collections.abc import Iterable
from datetime import datetime

from leadtime.logger import get_logger

from .config import CapacityPolicy
from .core import CommittedObligation

logger = get_logger()


class ResourceLedger:
    """Index of blocking obligations by owner, built once per evaluation.

    Each owner's obligations are kept sorted by window start. The ledger is
    read-only after construction, so one instance can serve every candidate
    plan of an evaluation.
    """

    def __init__(
        self,
        obligations: Iterable[CommittedObligation],
        policy: CapacityPolicy | None = None,
    ) -> None:
        """Index the obligations that count against capacity.

        Args:
            obligations: All obligations supplied for the evaluation
            policy: Which obligations are blocking (defaults to committed ones
                flagged as counting toward capacity)
        """
        self.policy = policy or CapacityPolicy()
        self._by_owner: dict[str, list[CommittedObligation]] = {}
        ignored = 0

        for obligation in obligations:
            if not self.is_blocking(obligation):
                ignored += 1
                logger.debug(
                    f"Ignoring obligation {obligation.task_id or '?'} for {obligation.owner_id} "
                    f"(status={obligation.status}, "
                    f"counts_toward_capacity={obligation.counts_toward_capacity})"
                )
                continue
            windows = self._by_owner.setdefault(obligation.owner_id, [])
            idx = bisect.bisect_right(
                windows, obligation.window_start, key=lambda o: o.window_start
            )
            windows.insert(idx, obligation)

        logger.debug(
            f"Ledger: {sum(len(w) for w in self._by_owner.values())} blocking obligations "
            f"across {len(self._by_owner)} owners, {ignored} ignored"
        )

    def is_blocking(self, obligation: CommittedObligation) -> bool:
        """Whether an obligation counts against its owner's capacity."""
        if obligation.status not in self.policy.blocking_statuses:
            return False
        if self.policy.require_counts_toward_capacity and not obligation.counts_toward_capacity:
            return False
        return True

    @property
    def owners(self) -> set[str]:
        """Owners with at least one blocking obligation."""
        return set(self._by_owner)

    def obligations_for(self, owner_id: str) -> list[CommittedObligation]:
        """Blocking obligations of an owner, sorted by start."""
        return list(self._by_owner.get(owner_id, []))

    def earliest_free(self, owner_id: str, not_before: datetime) -> datetime:
        """When the owner is next free, no earlier than ``not_before``.

        Conservative: the owner is considered busy until the latest end of
        any obligation still running or yet to start at ``not_before``. Gaps
        between obligations are never used.
        """
        latest_end = not_before
        for obligation in self._by_owner.get(owner_id, []):
            if obligation.window_end > latest_end:
                latest_end = obligation.window_end
        if latest_end > not_before:
            logger.debug(f"{owner_id} busy until {latest_end.isoformat()}")
        return latest_end

    def blocking_obligation(
        self, owner_id: str, window_start: datetime, window_end: datetime
    ) -> CommittedObligation | None:
        """The overlapping obligation with the latest end, if any.

        Overlap is half-open: ``o.start < window_end and window_start < o.end``.
        """
        found: CommittedObligation | None = None
        for obligation in self._by_owner.get(owner_id, []):
            if obligation.window_start >= window_end:
                break
            if obligation.overlaps(window_start, window_end) and (
                found is None or obligation.window_end > found.window_end
            ):
                found = obligation
        return found
