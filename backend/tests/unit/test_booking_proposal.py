"""
Unit tests for the booking proposal state machine.
"""

from datetime import date

import pytest

from core.exceptions import InvalidTransitionError
from shared_types.booking import BookingProposal, SchedulingStatus
from shared_types.time_interval import TimeInterval


@pytest.fixture
def proposal():
    return BookingProposal(partner_id=1, date=date(2025, 12, 22), interval=TimeInterval.parse("09:00", "10:00"))


class TestBookingProposal:

    def test_starts_proposed(self, proposal):
        assert proposal.status is SchedulingStatus.PROPOSED
        assert proposal.conflicts == []

    def test_confirm(self, proposal):
        proposal.confirm()
        assert proposal.status is SchedulingStatus.CONFIRMED

    def test_reject_keeps_conflicts(self, proposal):
        proposal.reject(["Parceiro já possui agendamento das 09:00 às 10:00"])
        assert proposal.status is SchedulingStatus.REJECTED
        assert proposal.conflicts == ["Parceiro já possui agendamento das 09:00 às 10:00"]

    @pytest.mark.parametrize("first,second", [
        ("confirm", "confirm"),
        ("confirm", "reject"),
        ("reject", "confirm"),
        ("reject", "reject"),
    ])
    def test_terminal_states_cannot_transition(self, proposal, first, second):
        def apply(action):
            if action == "confirm":
                proposal.confirm()
            else:
                proposal.reject(["x"])

        apply(first)
        with pytest.raises(InvalidTransitionError):
            apply(second)

    def test_status_values_serialize_as_strings(self):
        assert SchedulingStatus.CONFIRMED.value == "CONFIRMED"
        assert SchedulingStatus("REJECTED") is SchedulingStatus.REJECTED
