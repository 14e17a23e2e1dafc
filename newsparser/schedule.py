"""Cron-style wall-clock schedule for the parser loop."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import FrozenSet

DEFAULT_SCHEDULE = "*/20 * * * *"

# (name, lowest, highest) for each of the five cron fields.
_FIELDS = (
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day", 1, 31),
    ("month", 1, 12),
    ("weekday", 0, 7),
)

# Guards against expressions that can never fire, such as "0 0 31 2 *".
_MAX_LOOKAHEAD = timedelta(days=366 * 5)


def _parse_field(text: str, name: str, low: int, high: int) -> FrozenSet[int]:
    values: set[int] = set()
    for part in text.split(","):
        if not part:
            raise ValueError(f"Empty entry in cron {name} field: {text!r}")
        base, _, step_raw = part.partition("/")
        step = 1
        if step_raw:
            if not step_raw.isdigit() or int(step_raw) == 0:
                raise ValueError(f"Invalid step in cron {name} field: {part!r}")
            step = int(step_raw)

        if base == "*":
            start, end = low, high
        elif "-" in base:
            first, _, last = base.partition("-")
            if not (first.isdigit() and last.isdigit()):
                raise ValueError(f"Invalid range in cron {name} field: {part!r}")
            start, end = int(first), int(last)
        elif base.isdigit():
            start = int(base)
            # "0/20" means every 20 starting at 0, like the Quartz syntax.
            end = high if step_raw else start
        else:
            raise ValueError(f"Invalid cron {name} field: {part!r}")

        if start < low or end > high or start > end:
            raise ValueError(f"Cron {name} value out of range {low}-{high}: {part!r}")
        values.update(range(start, end + 1, step))
    return frozenset(values)


class CronSchedule:
    """Five-field cron expression: ``minute hour day month weekday``.

    Supports ``*``, numbers, ranges, lists and steps. Weekday 0 and 7 both
    mean Sunday. When both day and weekday are restricted, a time matches if
    either one does, as in classic cron.
    """

    def __init__(self, expression: str = DEFAULT_SCHEDULE) -> None:
        parts = expression.split()
        if len(parts) != len(_FIELDS):
            raise ValueError(
                f"Cron expression must have {len(_FIELDS)} fields, got {len(parts)}: {expression!r}"
            )
        self.expression = expression
        parsed = [
            _parse_field(part, name, low, high)
            for part, (name, low, high) in zip(parts, _FIELDS)
        ]
        self._minutes, self._hours, self._days, self._months, weekdays = parsed
        self._weekdays = frozenset(7 if day == 0 else day for day in weekdays) | frozenset(
            0 if day == 7 else day for day in weekdays
        )
        self._day_any = parts[2].startswith("*")
        self._weekday_any = parts[4].startswith("*")

    def __repr__(self) -> str:
        return f"CronSchedule({self.expression!r})"

    def _day_matches(self, moment: datetime) -> bool:
        cron_weekday = (moment.weekday() + 1) % 7
        in_days = moment.day in self._days
        in_weekdays = cron_weekday in self._weekdays
        if self._day_any and self._weekday_any:
            return True
        if self._day_any:
            return in_weekdays
        if self._weekday_any:
            return in_days
        return in_days or in_weekdays

    def matches(self, moment: datetime) -> bool:
        return (
            moment.month in self._months
            and self._day_matches(moment)
            and moment.hour in self._hours
            and moment.minute in self._minutes
        )

    def next_after(self, moment: datetime) -> datetime:
        """Return the first fire time strictly after ``moment``."""
        candidate = moment.replace(second=0, microsecond=0) + timedelta(minutes=1)
        deadline = moment + _MAX_LOOKAHEAD
        while candidate <= deadline:
            if candidate.month not in self._months:
                year = candidate.year + (candidate.month == 12)
                month = candidate.month % 12 + 1
                candidate = candidate.replace(year=year, month=month, day=1, hour=0, minute=0)
                continue
            if not self._day_matches(candidate):
                candidate = (candidate + timedelta(days=1)).replace(hour=0, minute=0)
                continue
            if candidate.hour not in self._hours:
                candidate = (candidate + timedelta(hours=1)).replace(minute=0)
                continue
            if candidate.minute not in self._minutes:
                candidate += timedelta(minutes=1)
                continue
            return candidate
        raise ValueError(f"Cron expression never fires: {self.expression!r}")
