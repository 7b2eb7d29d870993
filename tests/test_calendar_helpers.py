"""Tests for the Home Assistant mapping helpers and reminder notifier.

These cover the pure conversion functions without a running Home
Assistant instance. They need the ``homeassistant`` package installed.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

pytest.importorskip("homeassistant.components.calendar")

from custom_components.gridcal.gridcal_engine import (  # noqa: E402
    EventColor,
    EventTemplate,
    RecurrenceRule,
    RecurrenceType,
    Reminder,
    UnsupportedRecurrenceError,
    expand,
)

from custom_components.gridcal.calendar import (  # noqa: E402
    _instance_attributes,
    _kwargs_to_template,
    _map_instance,
)
from custom_components.gridcal.const import EVENT_REMINDER  # noqa: E402
from custom_components.gridcal.reminders import (  # noqa: E402
    ReminderNotifier,
    reminder_event_data,
)

UTC = ZoneInfo("UTC")
BERLIN = ZoneInfo("Europe/Berlin")


def _make_template(
    *,
    rec_type: RecurrenceType = RecurrenceType.NONE,
    event_id: str = "tmpl_1",
) -> EventTemplate:
    start = datetime(2026, 2, 9, 18, 30, tzinfo=UTC)
    return EventTemplate(
        id=event_id,
        title="Padel",
        start=start,
        end=start + timedelta(hours=2),
        description="Court 3",
        location="Club",
        color=EventColor.RED,
        reminders=(Reminder(id="rem", minutes_before=30),),
        recurrence=RecurrenceRule(type=rec_type),
    )


# =========================================================================== #
#  1. _map_instance
# =========================================================================== #


class TestMapInstance:
    def test_plain_template(self):
        cal_ev = _map_instance(_make_template())
        assert cal_ev.summary == "Padel"
        assert cal_ev.description == "Court 3"
        assert cal_ev.location == "Club"
        assert cal_ev.uid == "tmpl_1"
        assert cal_ev.recurrence_id is None
        assert cal_ev.end - cal_ev.start == timedelta(hours=2)

    def test_occurrence_points_back_at_series(self):
        template = _make_template(rec_type=RecurrenceType.WEEKLY)
        occurrence = expand(
            template,
            datetime(2026, 2, 1, tzinfo=UTC),
            datetime(2026, 3, 1, tzinfo=UTC),
        )[1]
        cal_ev = _map_instance(occurrence)
        assert cal_ev.uid == "tmpl_1"
        assert cal_ev.recurrence_id == occurrence.id
        assert cal_ev.start.tzinfo is not None

    def test_empty_description_becomes_none(self):
        cal_ev = _map_instance(_make_template().replace(description=""))
        assert cal_ev.description is None

    def test_state_attributes(self):
        attrs = _instance_attributes(_make_template(rec_type=RecurrenceType.WEEKLY))
        assert attrs["color"] == "red"
        assert attrs["style"] == "bg-red-500"
        assert attrs["recurrence"] == "Every week"


# =========================================================================== #
#  2. _kwargs_to_template
# =========================================================================== #


class TestKwargsToTemplate:
    def test_timed_event(self):
        template = _kwargs_to_template({
            "summary": "Team Meeting",
            "dtstart": datetime(2026, 3, 1, 10, 0, tzinfo=BERLIN),
            "dtend": datetime(2026, 3, 1, 11, 0, tzinfo=BERLIN),
            "description": "Weekly sync",
            "location": "Room A",
        })
        assert template.title == "Team Meeting"
        assert template.description == "Weekly sync"
        assert template.location == "Room A"
        assert template.duration == timedelta(hours=1)
        assert template.recurrence.type is RecurrenceType.NONE
        assert template.parent_id is None
        assert template.id

    def test_allday_event_spans_whole_days(self):
        template = _kwargs_to_template({
            "summary": "Vacation",
            "dtstart": date(2026, 7, 1),
            "dtend": date(2026, 7, 8),
        })
        assert template.duration == timedelta(days=7)
        assert template.start.hour == 0

    def test_ha_ui_keys(self):
        template = _kwargs_to_template({
            "summary": "From UI",
            "start_date_time": datetime(2026, 3, 1, 10, 0, tzinfo=UTC),
            "end_date_time": datetime(2026, 3, 1, 11, 0, tzinfo=UTC),
        })
        assert template.title == "From UI"

    def test_string_datetime_parsed(self):
        template = _kwargs_to_template({
            "summary": "Parsed",
            "start": "2026-03-01 10:00:00",
            "end": "2026-03-01 11:30:00",
        })
        assert template.duration == timedelta(minutes=90)
        assert template.start.tzinfo is not None

    def test_rrule_parsed(self):
        template = _kwargs_to_template({
            "summary": "Gym",
            "dtstart": datetime(2026, 3, 2, 7, 0, tzinfo=UTC),
            "dtend": datetime(2026, 3, 2, 8, 0, tzinfo=UTC),
            "rrule": "FREQ=WEEKLY;INTERVAL=2;COUNT=6",
        })
        assert template.recurrence == RecurrenceRule(
            type=RecurrenceType.WEEKLY, interval=2, occurrences=6
        )

    def test_unsupported_rrule(self):
        with pytest.raises(UnsupportedRecurrenceError):
            _kwargs_to_template({
                "summary": "Birthday",
                "dtstart": date(2026, 5, 1),
                "dtend": date(2026, 5, 2),
                "rrule": "FREQ=YEARLY",
            })

    def test_base_keeps_fields_the_form_cannot_express(self):
        base = _make_template(rec_type=RecurrenceType.DAILY)
        edited = _kwargs_to_template(
            {
                "summary": "Renamed",
                "dtstart": datetime(2026, 2, 10, 9, 0, tzinfo=UTC),
                "dtend": datetime(2026, 2, 10, 10, 0, tzinfo=UTC),
            },
            base=base,
        )
        assert edited.id == base.id
        assert edited.title == "Renamed"
        assert edited.color is EventColor.RED
        assert edited.reminders == base.reminders
        assert edited.recurrence == base.recurrence

    def test_empty_rrule_clears_recurrence(self):
        base = _make_template(rec_type=RecurrenceType.DAILY)
        edited = _kwargs_to_template(
            {"summary": "Once", "dtstart": base.start, "dtend": base.end, "rrule": ""},
            base=base,
        )
        assert edited.recurrence.type is RecurrenceType.NONE

    @pytest.mark.parametrize(
        "data",
        [
            {"summary": "No times"},
            {"summary": "Bad", "dtstart": "not a datetime", "dtend": "not a datetime"},
            {
                "summary": "Inverted",
                "dtstart": datetime(2026, 3, 1, 11, 0, tzinfo=UTC),
                "dtend": datetime(2026, 3, 1, 10, 0, tzinfo=UTC),
            },
        ],
    )
    def test_invalid_input_raises(self, data):
        with pytest.raises(ValueError):
            _kwargs_to_template(data)


# =========================================================================== #
#  3. Reminder notifier
# =========================================================================== #


class TestReminderNotifier:
    def test_fires_bus_event_for_due_reminder(self):
        template = _make_template()
        hass = MagicMock()
        coordinator = MagicMock()
        coordinator.calendar_name = "Family"
        coordinator.visible_instances.return_value = [template]
        now = template.start - timedelta(minutes=30)

        notifier = ReminderNotifier(hass, coordinator, now=lambda: now)
        due = notifier.async_check()

        assert len(due) == 1
        hass.bus.async_fire.assert_called_once()
        event_type, data = hass.bus.async_fire.call_args.args
        assert event_type == EVENT_REMINDER
        assert data["calendar"] == "Family"
        assert data["minutes_before"] == 30
        assert data["message"] == "Reminder: Padel starts in 30 minutes"

    def test_nothing_due(self):
        hass = MagicMock()
        coordinator = MagicMock()
        coordinator.visible_instances.return_value = [_make_template()]
        notifier = ReminderNotifier(
            hass, coordinator, now=lambda: datetime(2026, 1, 1, tzinfo=UTC)
        )
        assert notifier.async_check() == []
        hass.bus.async_fire.assert_not_called()

    def test_event_data_for_occurrence(self):
        template = _make_template(rec_type=RecurrenceType.DAILY)
        occurrence = expand(template, template.start, template.end)[0]
        hass = MagicMock()
        coordinator = MagicMock()
        coordinator.calendar_name = "Family"
        coordinator.visible_instances.return_value = [occurrence]
        notifier = ReminderNotifier(hass, coordinator, now=lambda: occurrence.start - timedelta(minutes=30))

        data = reminder_event_data(notifier.async_check()[0], "Family")
        assert data["parent_id"] == "tmpl_1"
        assert data["event_id"] == occurrence.id


# =========================================================================== #
#  4. Bundled engine
# =========================================================================== #


class TestBundledEngine:
    def test_integration_uses_engine_inside_its_own_package(self):
        from custom_components.gridcal import coordinator

        assert coordinator.engine.__name__ == "custom_components.gridcal.gridcal_engine"
        assert coordinator.engine.EventTemplate is EventTemplate
