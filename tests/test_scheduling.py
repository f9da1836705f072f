"""Tests for the conflict detector and booking status transitions."""

import random
from datetime import date, time

import pytest

from app.core.exceptions import InvalidRange, InvalidTransition
from app.core.scheduling import (
    Booking,
    BookingKind,
    BookingStatus,
    find_conflicts,
    format_window,
    has_conflict,
    validate_status,
    validate_transition,
)

DAY = date(2025, 11, 5)


def booking(start, end, status=BookingStatus.SCHEDULED, booking_id="b1", subject_id="S", on=DAY):
    return Booking(
        id=booking_id,
        subject_id=subject_id,
        scheduled_date=on,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        status=status,
    )


def conflicts_with(existing, start, end, **kwargs):
    return has_conflict("S", DAY, time.fromisoformat(start), time.fromisoformat(end), existing, **kwargs)


@pytest.mark.scheduling
class TestOverlap:
    @pytest.mark.parametrize("existing_start, existing_end, expected", [
        ("11:00", "12:00", False),
        ("10:30", "11:30", True),
        ("09:00", "10:00", False),
        ("09:00", "10:01", True),
        ("09:00", "12:00", True),
        ("10:15", "10:45", True),
    ])
    def test_half_open_semantics(self, existing_start, existing_end, expected):
        existing = [booking(existing_start, existing_end)]
        assert conflicts_with(existing, "10:00", "11:00") is expected

    def test_overlap_is_symmetric(self):
        a = booking("10:00", "11:00", booking_id="a")
        b = booking("10:30", "11:30", booking_id="b")
        assert a.overlaps(b.start_time, b.end_time) == b.overlaps(a.start_time, a.end_time)

    def test_no_bookings_no_conflict(self):
        assert conflicts_with([], "10:00", "11:00") is False

    def test_other_subject_or_date_is_ignored(self):
        existing = [
            booking("10:00", "11:00", subject_id="T"),
            booking("10:00", "11:00", on=date(2025, 11, 6)),
        ]
        assert conflicts_with(existing, "10:00", "11:00") is False

    def test_excluded_booking_is_ignored(self):
        existing = [booking("10:00", "11:00", booking_id="X")]
        assert conflicts_with(existing, "10:30", "11:30", exclude_booking_id="X") is False
        assert conflicts_with(existing, "10:30", "11:30", exclude_booking_id="Y") is True

    @pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.NO_SHOW])
    def test_freed_statuses_never_conflict(self, status):
        assert conflicts_with([booking("10:00", "11:00", status=status)], "10:00", "11:00") is False

    def test_completed_still_occupies_slot(self):
        assert conflicts_with([booking("10:00", "11:00", status=BookingStatus.COMPLETED)], "10:30", "11:00") is True

    @pytest.mark.parametrize("start, end", [("11:00", "10:00"), ("10:00", "10:00"), ("23:00", "00:00")])
    def test_invalid_range(self, start, end):
        with pytest.raises(InvalidRange):
            conflicts_with([], start, end)

    def test_scenario(self):
        existing = [booking("09:00", "12:00")]
        assert has_conflict("S", DAY, time(11, 30), time(13, 0), existing) is True
        assert has_conflict("S", date(2025, 11, 6), time(11, 30), time(13, 0), existing) is False
        assert has_conflict("S", DAY, time(12, 0), time(13, 0), existing) is False

    def test_find_conflicts_returns_overlapping_bookings(self):
        existing = [booking("09:00", "10:00", booking_id="a"), booking("10:30", "12:00", booking_id="b")]
        found = find_conflicts("S", DAY, time(9, 30), time(11, 0), existing)
        assert [b.id for b in found] == ["a", "b"]
        assert format_window(found[1]) == "10:30-12:00"

    def test_idempotence(self):
        rng = random.Random(7)
        existing = [
            booking(f"{h:02d}:00", f"{h + 1:02d}:30", booking_id=str(h), status=rng.choice(list(BookingStatus)))
            for h in range(6, 20, 2)
        ]
        for _ in range(300):
            start = rng.randrange(0, 22 * 60)
            end = rng.randrange(start + 1, 24 * 60)
            start_time = time(start // 60, start % 60)
            end_time = time(end // 60, end % 60)
            first = has_conflict("S", DAY, start_time, end_time, existing)
            assert has_conflict("S", DAY, start_time, end_time, existing) is first


@pytest.mark.scheduling
class TestBookingRows:
    def test_from_row_parses_supabase_strings(self):
        row = {
            "id": "b1",
            "safety_member_id": "m1",
            "scheduled_date": "2025-11-05",
            "start_time": "09:00:00",
            "end_time": "12:00:00",
            "status": "scheduled",
        }
        parsed = Booking.from_row(row, BookingKind.SAFETY)
        assert parsed.subject_id == "m1"
        assert parsed.scheduled_date == DAY
        assert parsed.start_time == time(9, 0)
        assert parsed.is_active

    def test_kind_configuration(self):
        assert BookingKind.MINISTRY.subject_column == "volunteer_id"
        assert BookingKind.SAFETY.schedule_table == "safety_schedules"
        assert BookingStatus.NO_SHOW in BookingKind.MINISTRY.statuses
        assert BookingStatus.NO_SHOW not in BookingKind.SAFETY.statuses


@pytest.mark.scheduling
class TestTransitions:
    @pytest.mark.parametrize("new_status", ["completed", "cancelled", "no_show"])
    def test_ministry_scheduled_moves_forward(self, new_status):
        assert validate_transition(BookingKind.MINISTRY, "scheduled", new_status) is BookingStatus(new_status)

    def test_safety_has_no_no_show(self):
        with pytest.raises(InvalidTransition):
            validate_transition(BookingKind.SAFETY, "scheduled", "no_show")

    @pytest.mark.parametrize("terminal", ["completed", "cancelled", "no_show"])
    def test_terminal_states_are_absorbing(self, terminal):
        for target in BookingStatus:
            if target.value == terminal:
                continue
            with pytest.raises(InvalidTransition):
                validate_transition(BookingKind.MINISTRY, terminal, target)

    def test_resending_current_status_is_noop(self):
        assert validate_transition(BookingKind.SAFETY, "completed", "completed") is BookingStatus.COMPLETED

    def test_unknown_status(self):
        with pytest.raises(InvalidTransition, match="Invalid schedule status"):
            validate_status(BookingKind.MINISTRY, "postponed")
