from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from site_attendance.attendance.classifier import classify_month
from site_attendance.attendance.model import ClockEvent, LeaveDay
from site_attendance.core.enums import DayStatusKind, EventType, Role, WfhStatus
from site_attendance.core.exceptions import InvalidInput
from site_attendance.wfh.model import WfhSession

UTC = timezone.utc
EMP = 7


def clock(kind: EventType, *args, site_id: int = 1) -> ClockEvent:
    return ClockEvent(employee_id=EMP, site_id=site_id, event_type=kind, timestamp=datetime(*args, tzinfo=UTC))


def by_date(days):
    return {d.work_date: d for d in days}


def june(role=Role.FIELD_WORKER, events=(), wfh=(), leave=(), today=datetime(2024, 6, 30, 20, 0), **kw):
    return classify_month(EMP, role, 2024, 6, list(events), list(wfh), list(leave), today, **kw)


@pytest.mark.parametrize("year,month", [(2024, 2), (2023, 2), (2024, 6), (2024, 12), (2025, 4)])
def test_one_entry_per_day_ascending(year, month):
    days = classify_month(EMP, Role.MANAGER, year, month, [], [], [], datetime(2024, 6, 15, 12, 0))

    assert len(days) == calendar.monthrange(year, month)[1]
    dates = [d.work_date for d in days]
    assert dates == sorted(dates)
    assert len(set(dates)) == len(dates)
    assert dates[0] == date(year, month, 1)


def test_office_saturday_without_events_is_not_applicable():
    days = by_date(june(role=Role.OFFICE_EMPLOYEE, today=datetime(2024, 6, 2, 10, 0)))

    assert days[date(2024, 6, 1)].status == DayStatusKind.NOT_APPLICABLE


def test_field_worker_saturday_with_full_shift_is_present():
    events = [
        clock(EventType.CLOCK_IN, 2024, 6, 1, 8, 0),
        clock(EventType.CLOCK_OUT, 2024, 6, 1, 16, 0),
    ]

    day = by_date(june(events=events, today=datetime(2024, 6, 2, 10, 0)))[date(2024, 6, 1)]

    assert day.status == DayStatusKind.PRESENT
    assert day.hours_worked == pytest.approx(8.0)
    assert day.clock_in == datetime(2024, 6, 1, 8, 0, tzinfo=UTC)
    assert day.clock_out == datetime(2024, 6, 1, 16, 0, tzinfo=UTC)


def test_office_saturday_with_clock_data_stays_not_applicable():
    events = [
        clock(EventType.CLOCK_IN, 2024, 6, 1, 8, 0),
        clock(EventType.CLOCK_OUT, 2024, 6, 1, 12, 0),
    ]

    day = by_date(june(role=Role.OFFICE_EMPLOYEE, events=events))[date(2024, 6, 1)]

    assert day.status == DayStatusKind.NOT_APPLICABLE
    assert day.hours_worked == pytest.approx(4.0)


def test_clock_in_without_clock_out_is_incomplete():
    events = [clock(EventType.CLOCK_IN, 2024, 6, 10, 8, 0)]

    day = by_date(june(events=events, today=datetime(2024, 6, 15, 9, 0)))[date(2024, 6, 10)]

    assert day.status == DayStatusKind.INCOMPLETE
    assert day.hours_worked == 0


@pytest.mark.parametrize("hour,expected", [(14, DayStatusKind.NOT_APPLICABLE), (19, DayStatusKind.ABSENT)])
def test_today_without_events_depends_on_cutoff(hour, expected):
    day = by_date(june(today=datetime(2024, 6, 10, hour, 0)))[date(2024, 6, 10)]

    assert day.status == expected
    assert day.hours_worked == 0


def test_complete_wfh_uses_duration_minutes():
    session = WfhSession(
        employee_id=EMP,
        work_date=date(2024, 6, 12),
        clock_in_time=datetime(2024, 6, 12, 9, 0, tzinfo=UTC),
        clock_out_time=datetime(2024, 6, 12, 15, 30, tzinfo=UTC),
        duration_minutes=390,
        status=WfhStatus.COMPLETE,
    )

    day = by_date(june(wfh=[session]))[date(2024, 6, 12)]

    assert day.status == DayStatusKind.WFH
    assert day.hours_worked == pytest.approx(6.5)
    assert day.clock_in == session.clock_in_time
    assert day.clock_out == session.clock_out_time
    assert day.counts_as_present


def test_active_and_incomplete_wfh():
    active = WfhSession(
        employee_id=EMP,
        work_date=date(2024, 6, 13),
        clock_in_time=datetime(2024, 6, 13, 9, 0, tzinfo=UTC),
        status=WfhStatus.ACTIVE,
    )
    stale = WfhSession(
        employee_id=EMP,
        work_date=date(2024, 6, 14),
        clock_in_time=datetime(2024, 6, 14, 9, 0, tzinfo=UTC),
        status=WfhStatus.INCOMPLETE,
    )

    days = by_date(june(wfh=[active, stale]))

    assert days[date(2024, 6, 13)].status == DayStatusKind.WFH
    assert days[date(2024, 6, 13)].hours_worked == 0
    assert not days[date(2024, 6, 13)].counts_as_present
    assert days[date(2024, 6, 14)].status == DayStatusKind.INCOMPLETE_WFH
    assert days[date(2024, 6, 14)].clock_in == stale.clock_in_time


def test_leave_wins_over_clock_and_wfh_data():
    day_ = date(2024, 6, 11)
    events = [
        clock(EventType.CLOCK_IN, 2024, 6, 11, 8, 0),
        clock(EventType.CLOCK_OUT, 2024, 6, 11, 17, 0),
    ]
    session = WfhSession(
        employee_id=EMP,
        work_date=day_,
        clock_in_time=datetime(2024, 6, 11, 9, 0, tzinfo=UTC),
        status=WfhStatus.ACTIVE,
    )

    days = by_date(june(events=events, wfh=[session], leave=[LeaveDay(employee_id=EMP, work_date=day_)]))

    assert days[day_].status == DayStatusKind.LEAVE
    assert days[day_].hours_worked == 0


def test_wfh_wins_over_site_events():
    day_ = date(2024, 6, 11)
    events = [clock(EventType.CLOCK_IN, 2024, 6, 11, 8, 0)]
    session = WfhSession(
        employee_id=EMP,
        work_date=day_,
        clock_in_time=datetime(2024, 6, 11, 9, 0, tzinfo=UTC),
        duration_minutes=60,
        status=WfhStatus.COMPLETE,
    )

    assert by_date(june(events=events, wfh=[session]))[day_].status == DayStatusKind.WFH


def test_pairs_are_matched_per_site_and_summed():
    events = [
        clock(EventType.CLOCK_IN, 2024, 6, 4, 7, 0, site_id=1),
        clock(EventType.CLOCK_OUT, 2024, 6, 4, 10, 30, site_id=1),
        clock(EventType.CLOCK_IN, 2024, 6, 4, 11, 0, site_id=2),
        clock(EventType.CLOCK_OUT, 2024, 6, 4, 15, 20, site_id=2),
    ]

    day = by_date(june(events=events))[date(2024, 6, 4)]

    assert day.status == DayStatusKind.PRESENT
    assert day.hours_worked == pytest.approx(3.5 + 4 + 20 / 60)
    assert day.clock_in == datetime(2024, 6, 4, 7, 0, tzinfo=UTC)
    assert day.clock_out == datetime(2024, 6, 4, 15, 20, tzinfo=UTC)


def test_one_completed_pair_plus_dangling_clock_in_is_present():
    events = [
        clock(EventType.CLOCK_IN, 2024, 6, 5, 8, 0),
        clock(EventType.CLOCK_OUT, 2024, 6, 5, 12, 0),
        clock(EventType.CLOCK_IN, 2024, 6, 5, 13, 0),
    ]

    day = by_date(june(events=events))[date(2024, 6, 5)]

    assert day.status == DayStatusKind.PRESENT
    assert day.hours_worked == pytest.approx(4.0)


def test_sunday_and_future_days_are_not_applicable():
    days = by_date(june(today=datetime(2024, 6, 20, 20, 0)))

    assert days[date(2024, 6, 2)].status == DayStatusKind.NOT_APPLICABLE  # Sunday
    assert days[date(2024, 6, 21)].status == DayStatusKind.NOT_APPLICABLE  # future
    assert days[date(2024, 6, 19)].status == DayStatusKind.ABSENT


def test_future_month_is_all_not_applicable():
    days = classify_month(EMP, Role.FIELD_WORKER, 2024, 7, [], [], [], datetime(2024, 6, 20, 20, 0))

    assert {d.status for d in days} == {DayStatusKind.NOT_APPLICABLE}


def test_present_days_have_hours_and_absent_days_none():
    events = [
        clock(EventType.CLOCK_IN, 2024, 6, 3, 8, 0),
        clock(EventType.CLOCK_OUT, 2024, 6, 3, 16, 0),
        clock(EventType.CLOCK_IN, 2024, 6, 6, 8, 0),
    ]

    for day in june(events=events):
        if day.status == DayStatusKind.PRESENT:
            assert day.hours_worked > 0
        if day.status == DayStatusKind.ABSENT:
            assert day.hours_worked == 0


def test_classification_is_idempotent():
    events = [clock(EventType.CLOCK_IN, 2024, 6, 3, 8, 0), clock(EventType.CLOCK_OUT, 2024, 6, 3, 9, 0)]
    today = datetime(2024, 6, 18, 17, 59)

    assert june(events=events, today=today) == june(events=events, today=today)


def test_events_are_bucketed_in_the_given_zone():
    # 23:30 UTC on the 3rd is already the 4th in Ho Chi Minh City (UTC+7)
    events = [
        clock(EventType.CLOCK_IN, 2024, 6, 3, 23, 30),
        clock(EventType.CLOCK_OUT, 2024, 6, 4, 8, 30),
    ]

    days = by_date(june(events=events, zone=ZoneInfo("Asia/Ho_Chi_Minh")))

    assert days[date(2024, 6, 4)].status == DayStatusKind.PRESENT
    assert days[date(2024, 6, 4)].hours_worked == pytest.approx(9.0)
    assert days[date(2024, 6, 3)].status == DayStatusKind.ABSENT


def test_iso_string_timestamps_are_accepted():
    events = [
        ClockEvent(employee_id=EMP, site_id=1, event_type=EventType.CLOCK_IN, timestamp="2024-06-03T08:00:00Z"),
        ClockEvent(employee_id=EMP, site_id=1, event_type="clock_out", timestamp="2024-06-03T10:00:00+00:00"),
    ]

    day = by_date(june(events=events))[date(2024, 6, 3)]

    assert day.hours_worked == pytest.approx(2.0)


def test_plain_dates_are_accepted_as_leave_days():
    days = by_date(june(leave=[date(2024, 6, 7)]))

    assert days[date(2024, 6, 7)].status == DayStatusKind.LEAVE


@pytest.mark.parametrize(
    "kwargs",
    [
        {"events": [ClockEvent(employee_id=EMP, site_id=1, event_type=EventType.CLOCK_IN, timestamp="yesterday")]},
        {"events": [ClockEvent(employee_id=EMP, site_id=1, event_type="lunch", timestamp="2024-06-03T08:00:00Z")]},
        {"events": [ClockEvent(employee_id=99, site_id=1, event_type=EventType.CLOCK_IN, timestamp="2024-06-03T08:00:00Z")]},
        {"leave": ["2024-06-07"]},
        {"leave": [datetime(2024, 6, 7, 0, 0)]},
        {"today": date(2024, 6, 30)},
    ],
)
def test_malformed_input_raises_invalid_input(kwargs):
    with pytest.raises(InvalidInput):
        june(**kwargs)


@pytest.mark.parametrize("month", [0, 13])
def test_invalid_month_raises(month):
    with pytest.raises(InvalidInput):
        classify_month(EMP, Role.FIELD_WORKER, 2024, month, [], [], [], datetime(2024, 6, 1))


def test_none_collections_are_rejected():
    with pytest.raises(InvalidInput):
        classify_month(EMP, Role.FIELD_WORKER, 2024, 6, None, [], [], datetime(2024, 6, 1))


def test_unknown_role_string_is_treated_as_office_role():
    days = by_date(classify_month(EMP, "contractor", 2024, 6, [], [], [], datetime(2024, 6, 30, 20, 0)))

    assert days[date(2024, 6, 1)].status == DayStatusKind.NOT_APPLICABLE
    assert days[date(2024, 6, 3)].status == DayStatusKind.ABSENT


def test_whole_month_walk_for_office_employee():
    today = datetime(2024, 6, 30, 20, 0)
    days = june(role=Role.OFFICE_EMPLOYEE, today=today)

    weekdays = [d for d in days if d.work_date.weekday() < 5]
    weekends = [d for d in days if d.work_date.weekday() >= 5]
    assert all(d.status == DayStatusKind.ABSENT for d in weekdays)
    assert all(d.status == DayStatusKind.NOT_APPLICABLE for d in weekends)
    assert days[-1].work_date - days[0].work_date == timedelta(days=29)
