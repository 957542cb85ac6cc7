import uuid
from datetime import date, datetime
from itertools import islice, takewhile
from typing import Iterator, List, Optional
from ..models.enums import RecurrenceEndType, RecurrenceType
from ..schemas.plan import Plan, PlanBase, PlanRecurrence
from ..utils.constants import AppConstants
from ..utils.date_helpers import DateHelpers

# Fields copied from a template onto every occurrence
TEMPLATE_FIELDS = {
    "title",
    "time",
    "location",
    "total_spots",
    "notes",
    "visibility",
}


def new_plan_id() -> str:
    return uuid.uuid4().hex


def new_series_id() -> str:
    return f"series_{uuid.uuid4().hex}"


class RecurrenceExpander:
    """Turns one recurring plan template into dated occurrences.

    Occurrence k is computed from the series anchor (the date of index 0,
    recorded on every member) rather than by chaining steps, so the sequence
    is deterministic and can be restarted from any member of a series, even
    after siblings were edited or deleted. Monthly series clamp to the last
    day of shorter months while keeping the anchor's day-of-month
    (Jan 31 -> Feb 28 -> Mar 31).
    """

    def __init__(self, id_factory=new_plan_id, series_id_factory=new_series_id):
        self.id_factory = id_factory
        self.series_id_factory = series_id_factory

    def iter_occurrences(
        self,
        template: PlanBase,
        created_by: str,
        created_at: Optional[datetime] = None,
        series_id: Optional[str] = None,
    ) -> Iterator[Plan]:
        """Lazily yield occurrences starting at the template's instance index"""

        recurrence = template.recurrence
        if recurrence is None or not recurrence.is_recurring:
            raise ValueError("Template does not recur")

        series_id = series_id or recurrence.series_id or self.series_id_factory()
        created_at = created_at or datetime.utcnow()
        start_index = recurrence.instance_index
        end = recurrence.end
        base_fields = template.dict(include=TEMPLATE_FIELDS)

        # Members of a generated series carry the index-0 anchor; a bare
        # template is its own anchor at its own index
        if recurrence.anchor_date is not None:
            anchor_date, anchor_index = recurrence.anchor_date, 0
        else:
            anchor_date, anchor_index = template.date, start_index
        if recurrence.deadline_gap_days is not None:
            deadline_gap = recurrence.deadline_gap_days
        else:
            deadline_gap = DateHelpers.days_between(template.rsvp_deadline, template.date)
        recorded_anchor = anchor_date if anchor_index == 0 else None

        index = start_index
        while True:
            if end.type == RecurrenceEndType.AFTER and index >= end.occurrences:
                return

            occurrence_date = DateHelpers.get_next_occurrence(
                anchor_date,
                recurrence.type,
                occurrences=index - anchor_index,
                custom_days=recurrence.custom_days,
            )

            if end.type == RecurrenceEndType.ON_DATE and occurrence_date > end.end_date:
                return

            yield Plan(
                **base_fields,
                id=self.id_factory(),
                date=occurrence_date,
                rsvp_deadline=DateHelpers.add_days(occurrence_date, -deadline_gap),
                filled_spots=0,
                created_by=created_by,
                created_at=created_at,
                recurrence=PlanRecurrence(
                    type=recurrence.type,
                    custom_days=recurrence.custom_days,
                    end=recurrence.end.dict(),
                    series_id=series_id,
                    instance_index=index,
                    anchor_date=recorded_anchor,
                    deadline_gap_days=deadline_gap,
                ),
            )
            index += 1

    def expand(
        self,
        template: PlanBase,
        created_by: str,
        max_count: int = AppConstants.DEFAULT_MAX_OCCURRENCES,
        created_at: Optional[datetime] = None,
    ) -> List[Plan]:
        """Materialize at most max_count occurrences of a new series"""
        if max_count <= 0:
            return []

        return list(
            islice(
                self.iter_occurrences(template, created_by, created_at=created_at),
                max_count,
            )
        )

    def expand_until(
        self,
        template: PlanBase,
        created_by: str,
        horizon: date,
        created_at: Optional[datetime] = None,
        series_id: Optional[str] = None,
        after_index: int = -1,
        limit: int = AppConstants.MAX_OCCURRENCES_PER_EXTENSION,
    ) -> List[Plan]:
        """Materialize occurrences past after_index dated on or before horizon"""
        occurrences = (
            p
            for p in self.iter_occurrences(
                template, created_by, created_at=created_at, series_id=series_id
            )
            if p.recurrence.instance_index > after_index
        )
        return list(
            islice(takewhile(lambda p: p.date <= horizon, occurrences), limit)
        )

    @staticmethod
    def get_recurrence_label(recurrence: Optional[PlanRecurrence]) -> str:
        """Human-readable summary, e.g. 'Repeats weekly, 4 times'"""

        if recurrence is None or not recurrence.is_recurring:
            return "Does not repeat"

        if recurrence.type == RecurrenceType.WEEKLY:
            label = "Repeats weekly"
        elif recurrence.type == RecurrenceType.BIWEEKLY:
            label = "Repeats every 2 weeks"
        elif recurrence.type == RecurrenceType.MONTHLY:
            label = "Repeats monthly"
        else:
            interval = DateHelpers.custom_interval(recurrence.custom_days)
            label = "Repeats daily" if interval == 1 else f"Repeats every {interval} days"

        end = recurrence.end
        if end.type == RecurrenceEndType.AFTER:
            times = "time" if end.occurrences == 1 else "times"
            label += f", {end.occurrences} {times}"
        elif end.type == RecurrenceEndType.ON_DATE:
            label += (
                f" until {end.end_date.strftime('%b')} {end.end_date.day}, "
                f"{end.end_date.year}"
            )

        return label
