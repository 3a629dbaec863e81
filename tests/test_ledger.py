"""Tests for the committed-obligation ledger."""

from leadtime.engine import CapacityPolicy, ResourceLedger
from tests.conftest import FRI, MON, THU, TUE, WED, at, busy


class TestEarliestFree:
    """Test when an owner is next free."""

    def test_no_obligations(self):
        ledger = ResourceLedger([])
        assert ledger.earliest_free("alice", at(MON, 9)) == at(MON, 9)

    def test_running_obligation(self):
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(WED, 17))])
        assert ledger.earliest_free("alice", at(MON, 9)) == at(WED, 17)

    def test_other_owner_unaffected(self):
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(WED, 17))])
        assert ledger.earliest_free("bob", at(MON, 9)) == at(MON, 9)

    def test_finished_obligation_ignored(self):
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(MON, 12))])
        assert ledger.earliest_free("alice", at(TUE, 9)) == at(TUE, 9)

    def test_latest_end_wins(self):
        """Gaps between obligations are never used."""
        ledger = ResourceLedger(
            [
                busy("alice", at(MON, 9), at(MON, 12), task_id="A"),
                busy("alice", at(THU, 9), at(FRI, 12), task_id="B"),
                busy("alice", at(TUE, 9), at(TUE, 17), task_id="C"),
            ]
        )
        assert ledger.earliest_free("alice", at(MON, 9)) == at(FRI, 12)

    def test_future_obligation_counts(self):
        ledger = ResourceLedger([busy("alice", at(WED, 9), at(THU, 9))])
        assert ledger.earliest_free("alice", at(MON, 9)) == at(THU, 9)


class TestBlockingObligation:
    """Test overlap lookups."""

    def test_overlap_found(self):
        obligation = busy("alice", at(MON, 9), at(WED, 17))
        ledger = ResourceLedger([obligation])
        assert ledger.blocking_obligation("alice", at(TUE, 9), at(THU, 9)) == obligation

    def test_touching_windows_do_not_overlap(self):
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(WED, 9))])
        assert ledger.blocking_obligation("alice", at(WED, 9), at(THU, 9)) is None
        assert ledger.blocking_obligation("alice", at(MON, 8), at(MON, 9)) is None

    def test_latest_ending_overlap_reported(self):
        early = busy("alice", at(MON, 9), at(TUE, 9), task_id="EARLY")
        late = busy("alice", at(MON, 12), at(THU, 9), task_id="LATE")
        ledger = ResourceLedger([early, late])
        found = ledger.blocking_obligation("alice", at(MON, 9), at(FRI, 9))
        assert found is not None
        assert found.task_id == "LATE"

    def test_unknown_owner(self):
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(WED, 9))])
        assert ledger.blocking_obligation("bob", at(MON, 9), at(FRI, 9)) is None


class TestCapacityPolicy:
    """Test which obligations block."""

    def test_not_counting_toward_capacity_ignored(self):
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(WED, 9), counts=False)])
        assert ledger.earliest_free("alice", at(MON, 9)) == at(MON, 9)
        assert "alice" not in ledger.owners

    def test_uncommitted_status_ignored(self):
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(WED, 9), status="tentative")])
        assert ledger.earliest_free("alice", at(MON, 9)) == at(MON, 9)

    def test_custom_blocking_statuses(self):
        policy = CapacityPolicy(blocking_statuses=["committed", "tentative"])
        ledger = ResourceLedger(
            [busy("alice", at(MON, 9), at(WED, 9), status="tentative")], policy
        )
        assert ledger.earliest_free("alice", at(MON, 9)) == at(WED, 9)

    def test_capacity_flag_can_be_ignored(self):
        policy = CapacityPolicy(require_counts_toward_capacity=False)
        ledger = ResourceLedger([busy("alice", at(MON, 9), at(WED, 9), counts=False)], policy)
        assert ledger.earliest_free("alice", at(MON, 9)) == at(WED, 9)


def test_obligations_sorted_by_start():
    """Obligations are kept in window-start order per owner."""
    ledger = ResourceLedger(
        [
            busy("alice", at(WED, 9), at(WED, 17), task_id="W"),
            busy("alice", at(MON, 9), at(MON, 17), task_id="M"),
            busy("alice", at(TUE, 9), at(TUE, 17), task_id="T"),
        ]
    )
    assert [o.task_id for o in ledger.obligations_for("alice")] == ["M", "T", "W"]
    assert ledger.obligations_for("nobody") == []
