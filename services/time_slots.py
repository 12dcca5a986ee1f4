"""
Bookable time slots from business hours.

Slots are "HH:MM" strings computed in minutes of day only, so no timezone
conversion can shift them. Per-business prep and cleanup buffers widen
every appointment's footprint on the agenda.
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from core.business_config import BusinessHours
from core.settings import settings
from core.utils_datetime import format_time_of_day, minutes_now, parse_time_of_day
from domain.models import ExistingAppointment


logger = logging.getLogger(__name__)


def generate_business_time_slots(
    opening_time: Optional[str],
    closing_time: Optional[str],
    interval_minutes: Optional[int] = None
) -> List[str]:
    """
    Generate slot start times between opening and closing.

    The last slot starts at least ``interval_minutes`` before closing.

    Args:
        opening_time: Opening time "HH:MM"
        closing_time: Closing time "HH:MM"
        interval_minutes: Minutes between slots (default from settings, 30)

    Returns:
        ["08:00", "08:30", ...]; empty when hours are missing, malformed or
        opening is not before closing
    """
    if interval_minutes is None:
        interval_minutes = settings.default_slot_interval_minutes
    if interval_minutes <= 0:
        return []

    opening = parse_time_of_day(opening_time)
    closing = parse_time_of_day(closing_time)
    if opening is None or closing is None or opening >= closing:
        return []

    last_slot_start = closing - interval_minutes
    return [
        format_time_of_day(minutes)
        for minutes in range(opening, last_slot_start + 1, interval_minutes)
    ]


def is_business_hours_configured(opening_time: Optional[str], closing_time: Optional[str]) -> bool:
    """Check that both times parse and opening is before closing."""
    opening = parse_time_of_day(opening_time)
    closing = parse_time_of_day(closing_time)
    return opening is not None and closing is not None and opening < closing


def _blocked_range(start: int, duration: int, prep_buffer: int, cleanup_buffer: int) -> Tuple[int, int]:
    return start - prep_buffer, start + duration + cleanup_buffer


def filter_available_slots(
    all_slots: Sequence[str],
    existing_appointments: Iterable[ExistingAppointment],
    service_duration: int,
    closing_time: Optional[str],
    prep_buffer_minutes: int = 0,
    cleanup_buffer_minutes: int = 0
) -> List[str]:
    """
    Remove slots that cannot host a service of ``service_duration`` minutes.

    A slot is dropped when the service would end after closing, or when its
    buffered range [start - prep, end + cleanup) overlaps the buffered range
    of an existing appointment.

    Args:
        all_slots: Candidate slots ("HH:MM")
        existing_appointments: Appointments already booked that day
        service_duration: Duration of the service being booked
        closing_time: Closing time "HH:MM"
        prep_buffer_minutes: Minutes blocked before each appointment
        cleanup_buffer_minutes: Minutes blocked after each appointment

    Returns:
        Available slots, in input order. When closing time is missing or
        malformed the slots are returned unchanged.
    """
    closing = parse_time_of_day(closing_time)
    if closing is None:
        return list(all_slots)

    occupied = []
    for appointment in existing_appointments:
        start = parse_time_of_day(appointment.appointment_time)
        if start is None:
            logger.warning("Skipping appointment with malformed time %r", appointment.appointment_time)
            continue
        occupied.append(
            _blocked_range(start, appointment.duration, prep_buffer_minutes, cleanup_buffer_minutes)
        )

    available = []
    for slot in all_slots:
        slot_start = parse_time_of_day(slot)
        if slot_start is None:
            continue

        if slot_start + service_duration > closing:
            continue

        block_start, block_end = _blocked_range(
            slot_start, service_duration, prep_buffer_minutes, cleanup_buffer_minutes
        )
        has_conflict = any(
            block_start < occupied_end and block_end > occupied_start
            for occupied_start, occupied_end in occupied
        )
        if not has_conflict:
            available.append(slot)

    return available


def filter_past_slots(
    slots: Sequence[str],
    on_date: date,
    now: Optional[datetime] = None
) -> List[str]:
    """
    Drop slots that already started on ``on_date`` (business timezone).

    Future dates keep every slot; past dates keep none.
    """
    current = minutes_now(on_date, now)
    if current is None:
        return list(slots)

    remaining = []
    for slot in slots:
        minutes = parse_time_of_day(slot)
        if minutes is not None and minutes > current:
            remaining.append(slot)
    return remaining


def slots_for_business(
    hours: BusinessHours,
    existing_appointments: Iterable[ExistingAppointment],
    service_duration: int,
    on_date: Optional[date] = None,
    now: Optional[datetime] = None
) -> List[str]:
    """
    Available slots for a business on a day.

    Args:
        hours: Opening hours, interval and buffers of the business
        existing_appointments: Appointments already booked that day
        service_duration: Duration of the service being booked
        on_date: Day being booked; when given, past slots are removed
        now: Current time override (tests)

    Returns:
        Available "HH:MM" slots
    """
    slots = generate_business_time_slots(
        hours.opening_time, hours.closing_time, hours.slot_interval_minutes
    )
    slots = filter_available_slots(
        slots,
        existing_appointments,
        service_duration,
        hours.closing_time,
        hours.prep_buffer_minutes,
        hours.cleanup_buffer_minutes,
    )
    if on_date is not None:
        slots = filter_past_slots(slots, on_date, now)
    return slots
