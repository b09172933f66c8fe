"""
Availability service for partner slot evaluation.

The evaluation core is a pure function over already-fetched data
(weekly availability, blocked dates and the proposed interval), so the same
inputs always yield the same result. AvailabilityService wires it to a
ScheduleStore for the API layer and the conflict validator.
"""

import logging
from datetime import date as date_type
from typing import Any, Dict, List, Optional, Sequence

from core.constants import DAY_NAMES_PT, DEFAULT_BLOCK_REASON
from services.schedule_store import ScheduleStore
from shared_types.availability import (
    AvailabilityResult, BlockedDateSnapshot, WeeklyAvailabilitySnapshot,
)
from shared_types.settings import SuggestionGridSettings, get_suggestion_settings
from shared_types.time_interval import TimeInterval, TimeOfDay
from utils.datetime_utils import day_of_week_sunday_first

logger = logging.getLogger(__name__)

NOT_WORKING_MESSAGE = "Parceiro não trabalha neste dia da semana"


def _block_reason(block: BlockedDateSnapshot) -> str:
    return block.reason or DEFAULT_BLOCK_REASON


def evaluate_availability(
    availability: Optional[WeeklyAvailabilitySnapshot],
    blocks: Sequence[BlockedDateSnapshot],
    interval: TimeInterval,
    settings: SuggestionGridSettings,
) -> AvailabilityResult:
    """
    Decide whether ``interval`` is bookable against a partner's day.

    Conflicts accumulate in a fixed order: working window, break, then each
    block in the given order. A missing weekly entry short-circuits with a
    single conflict and no suggestions. Existing appointments are not
    consulted here; the conflict validator layers them on top.

    Args:
        availability: Weekly entry for the date's day of week, or None
        blocks: Active blocks for the date
        interval: Proposed appointment interval
        settings: Suggestion grid configuration

    Returns:
        AvailabilityResult with suggestions populated only when unavailable
    """
    if availability is None:
        return AvailabilityResult(available=False, conflicts=[NOT_WORKING_MESSAGE])

    conflicts: List[str] = []
    work = availability.work_window
    if not work.contains(interval):
        conflicts.append(f"Horário fora do expediente ({work.start} às {work.end})")

    lunch = availability.break_window
    if lunch is not None and lunch.overlaps(interval):
        conflicts.append(f"Conflito com horário de almoço ({lunch.start} às {lunch.end})")

    for block in blocks:
        if block.window is None:
            conflicts.append(f"Dia completamente bloqueado: {_block_reason(block)}")
        elif block.window.overlaps(interval):
            conflicts.append(
                f"Horário bloqueado ({block.window.start} às {block.window.end}): {_block_reason(block)}"
            )

    if not conflicts:
        return AvailabilityResult(available=True)

    return AvailabilityResult(
        available=False,
        conflicts=conflicts,
        suggested_times=suggest_times(availability, blocks, interval.duration_minutes, settings),
    )


def suggest_times(
    availability: WeeklyAvailabilitySnapshot,
    blocks: Sequence[BlockedDateSnapshot],
    duration_minutes: int,
    settings: SuggestionGridSettings,
    busy: Sequence[TimeInterval] = (),
    limit: Optional[int] = None,
) -> List[TimeOfDay]:
    """
    Candidate start times of the given duration that would be free.

    Walks the configured grid in ascending order and keeps candidates that
    fit the working window and avoid the break, every block and every
    ``busy`` interval. A full-day block yields an empty list.
    """
    if any(block.is_full_day for block in blocks):
        return []

    max_results = settings.max_suggestions if limit is None else limit
    suggestions: List[TimeOfDay] = []
    for start in settings.candidate_starts():
        if len(suggestions) >= max_results:
            break
        end = start.add_minutes(duration_minutes)
        if end is None:
            continue
        candidate = TimeInterval(start, end)
        if not availability.work_window.contains(candidate):
            continue
        if availability.break_window is not None and availability.break_window.overlaps(candidate):
            continue
        if any(block.window is not None and block.window.overlaps(candidate) for block in blocks):
            continue
        if any(taken.overlaps(candidate) for taken in busy):
            continue
        suggestions.append(start)
    return suggestions


class AvailabilityService:
    """
    Service class for availability operations.

    Contains the store-backed entry points shared by the partner API and the
    appointment conflict validator.
    """

    @staticmethod
    def check_availability(
        store: ScheduleStore,
        partner_id: int,
        on_date: date_type,
        interval: TimeInterval,
        settings: Optional[SuggestionGridSettings] = None,
    ) -> AvailabilityResult:
        """
        Check whether a partner can take an appointment in ``interval`` on ``on_date``.

        Args:
            store: Storage collaborator
            partner_id: Partner ID
            on_date: Calendar date of the proposed appointment
            interval: Proposed appointment interval
            settings: Suggestion grid (defaults to environment configuration)

        Returns:
            AvailabilityResult with every conflict found
        """
        settings = settings or get_suggestion_settings()
        day_of_week = day_of_week_sunday_first(on_date)
        availability = store.get_weekly_availability(partner_id, day_of_week)
        blocks = store.get_blocked_dates(partner_id, on_date) if availability is not None else []
        result = evaluate_availability(availability, blocks, interval, settings)
        if not result.available:
            logger.info(
                f"Partner {partner_id} unavailable on {on_date} {interval}: {result.conflicts}"
            )
        return result

    @staticmethod
    def get_day_schedule(
        store: ScheduleStore,
        partner_id: int,
        on_date: date_type,
        settings: Optional[SuggestionGridSettings] = None,
    ) -> Dict[str, Any]:
        """
        Build the partner's schedule for a single date.

        Returns the working window, break, active blocks, booked appointments
        and every grid start where a slot of ``slot_granularity_minutes`` is
        still free.

        Args:
            store: Storage collaborator
            partner_id: Partner ID
            on_date: Date to describe
            settings: Suggestion grid (defaults to environment configuration)

        Returns:
            Dictionary ready to be serialized by the API layer
        """
        settings = settings or get_suggestion_settings()
        day_of_week = day_of_week_sunday_first(on_date)
        availability = store.get_weekly_availability(partner_id, day_of_week)

        schedule: Dict[str, Any] = {
            "date": on_date.isoformat(),
            "day_of_week": day_of_week,
            "day_name": DAY_NAMES_PT[day_of_week],
            "works": availability is not None,
            "work_window": None,
            "break_window": None,
            "blocked": [],
            "appointments": [],
            "free_starts": [],
        }
        if availability is None:
            return schedule

        blocks = store.get_blocked_dates(partner_id, on_date)
        appointments = store.get_existing_appointments(partner_id, on_date)

        schedule["work_window"] = availability.work_window.to_dict()
        if availability.break_window is not None:
            schedule["break_window"] = availability.break_window.to_dict()
        schedule["blocked"] = [
            {
                "id": block.blocked_date_id,
                "start_time": str(block.window.start) if block.window else None,
                "end_time": str(block.window.end) if block.window else None,
                "reason": _block_reason(block),
            }
            for block in blocks
        ]
        schedule["appointments"] = [
            {"id": appt.appointment_id, "status": appt.status, **appt.interval.to_dict()}
            for appt in appointments
        ]
        free_starts = suggest_times(
            availability,
            blocks,
            settings.slot_granularity_minutes,
            settings,
            busy=[appt.interval for appt in appointments],
            limit=len(settings.candidate_starts()),
        )
        schedule["free_starts"] = [str(start) for start in free_starts]
        return schedule
