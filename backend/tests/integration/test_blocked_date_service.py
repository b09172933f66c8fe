"""
Integration tests for the blocked date registry.
"""

from datetime import date, time

import pytest

from core.exceptions import FormatError, NotFoundError, ValidationError
from services.blocked_date_service import BlockedDateService, validate_block_window
from tests.conftest import CHRISTMAS, MONDAY, TUESDAY, create_partner


class TestValidateBlockWindow:

    def test_full_day(self):
        assert validate_block_window(None, None) is None

    def test_times_must_come_together(self):
        with pytest.raises(ValidationError):
            validate_block_window("09:00", None)

    @pytest.mark.parametrize("start,end", [("10:00", "09:00"), ("10:00", "10:00")])
    def test_start_before_end(self, start, end):
        with pytest.raises(ValidationError) as exc_info:
            validate_block_window(start, end)
        assert exc_info.value.message == "Horário de início deve ser menor que o horário de fim"

    def test_bad_format(self):
        with pytest.raises(FormatError):
            validate_block_window("09:00", "9h30")


class TestBlockedDates:

    def test_create_full_day_block(self, db_session):
        partner = create_partner(db_session)

        block = BlockedDateService.create_blocked_date(db_session, partner.id, CHRISTMAS, reason="Feriado")

        assert block.is_full_day
        assert block.window is None
        assert block.reason == "Feriado"

    def test_create_partial_block(self, db_session):
        partner = create_partner(db_session)

        block = BlockedDateService.create_blocked_date(
            db_session, partner.id, TUESDAY, "14:00", "15:30", "  Reunião  "
        )

        assert block.start_time == time(14, 0)
        assert str(block.window) == "14:00-15:30"
        assert block.reason == "Reunião"

    def test_blank_reason_stored_as_null(self, db_session):
        partner = create_partner(db_session)
        block = BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY, reason="   ")
        assert block.reason is None

    def test_overlapping_blocks_are_allowed(self, db_session):
        partner = create_partner(db_session)
        BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY, "09:00", "11:00")
        BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY, "10:00", "12:00")

        assert len(BlockedDateService.find_blocks(db_session, partner.id, TUESDAY)) == 2

    def test_find_blocks_in_range_is_ordered(self, db_session):
        partner = create_partner(db_session)
        BlockedDateService.create_blocked_date(db_session, partner.id, CHRISTMAS, reason="Feriado")
        BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY, "15:00", "16:00")
        BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY, "09:00", "10:00")
        BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY)
        BlockedDateService.create_blocked_date(db_session, partner.id, date(2026, 1, 5))

        blocks = BlockedDateService.find_blocks(db_session, partner.id, MONDAY, CHRISTMAS)

        assert [(b.blocked_date, b.start_time) for b in blocks] == [
            (TUESDAY, None),
            (TUESDAY, time(9, 0)),
            (TUESDAY, time(15, 0)),
            (CHRISTMAS, None),
        ]

    def test_find_blocks_rejects_inverted_range(self, db_session):
        partner = create_partner(db_session)
        with pytest.raises(ValidationError):
            BlockedDateService.find_blocks(db_session, partner.id, CHRISTMAS, MONDAY)

    def test_deactivated_blocks_are_hidden(self, db_session):
        partner = create_partner(db_session)
        block = BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY)

        BlockedDateService.deactivate_blocked_date(db_session, partner.id, block.id)

        assert BlockedDateService.find_blocks(db_session, partner.id, TUESDAY) == []

    def test_update_merges_window(self, db_session):
        partner = create_partner(db_session)
        block = BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY, "14:00", "15:00", "Reunião")

        updated = BlockedDateService.update_blocked_date(db_session, partner.id, block.id, end_time="16:00")
        assert str(updated.window) == "14:00-16:00"
        assert updated.reason == "Reunião"

        with pytest.raises(ValidationError):
            BlockedDateService.update_blocked_date(db_session, partner.id, block.id, start_time="16:30")

    def test_update_to_full_day(self, db_session):
        partner = create_partner(db_session)
        block = BlockedDateService.create_blocked_date(db_session, partner.id, TUESDAY, "14:00", "15:00")

        updated = BlockedDateService.update_blocked_date(
            db_session, partner.id, block.id, start_time=None, end_time=None, blocked_date=CHRISTMAS
        )

        assert updated.is_full_day
        assert updated.blocked_date == CHRISTMAS

    def test_unknown_partner_and_block(self, db_session):
        with pytest.raises(NotFoundError):
            BlockedDateService.create_blocked_date(db_session, 404, TUESDAY)

        partner = create_partner(db_session)
        with pytest.raises(NotFoundError):
            BlockedDateService.deactivate_blocked_date(db_session, partner.id, 12345)
