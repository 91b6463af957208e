# blueprints/classes/services.py
from __future__ import annotations
import logging
from typing import Any, List, Mapping, Sequence

from . import timecodec
from .errors import (
    EmptySchedule, InvalidField, InvalidFilter, InvalidTimeRange,
    MissingFilter, RegistrationFailed,
)
from .store import CLASS_FIELDS, TUTOR_FIELDS, ScheduleStore, SlotIn, TutorWithClass

log = logging.getLogger(__name__)

SEARCH_FILTERS = ("subject", "week_day", "time")

def _absent(value: Any) -> bool:
    return value is None or value == ""

def _parse_week_day(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidFilter(f"week_day must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidFilter(f"week_day must be an integer, got {value!r}") from None


class ClassSearchService:
    """Finds tutors whose class teaches `subject` at a weekday + time instant."""

    def __init__(self, store: ScheduleStore, *, strict: bool = False):
        self.store = store
        self.strict = strict

    def search(self, filters: Mapping[str, Any]) -> List[TutorWithClass]:
        missing = [name for name in SEARCH_FILTERS if _absent(filters.get(name))]
        if missing:
            raise MissingFilter(", ".join(missing))

        week_day = _parse_week_day(filters["week_day"])
        if self.strict and not 0 <= week_day <= 6:
            raise InvalidFilter(f"week_day out of range: {week_day}")
        if self.strict and not str(filters["subject"]).strip():
            raise InvalidFilter("subject is blank")
        minute_of_day = timecodec.encode(filters["time"])

        return self.store.find_matching_tutors(filters["subject"], week_day, minute_of_day)


class ClassRegistrationService:
    def __init__(self, store: ScheduleStore, *, strict: bool = False):
        self.store = store
        self.strict = strict

    def register(self, tutor_fields: Mapping[str, Any], class_fields: Mapping[str, Any],
                 schedule_items: Sequence[Mapping[str, Any]]) -> int:
        """Create tutor, class and weekly schedule in one transaction.

        Validation errors are raised before the store is touched. Anything
        that goes wrong inside the store is logged and reported as
        RegistrationFailed; nothing from the call is persisted in that case.
        """
        if not schedule_items:
            raise EmptySchedule("schedule must contain at least one slot")
        if self.strict:
            self._check_fields(tutor_fields, TUTOR_FIELDS)
            self._check_fields(class_fields, ("subject",))
            cost = class_fields.get("cost")
            if not isinstance(cost, (int, float)) or isinstance(cost, bool) or cost < 0:
                raise InvalidField("cost")

        slots = [self._to_slot(item) for item in schedule_items]

        try:
            class_id = self.store.create_tutor_with_class(tutor_fields, class_fields, slots)
        except Exception as ex:
            log.exception("class registration failed", extra={"event": "class_registration_failed"})
            raise RegistrationFailed("Unexpected error while creating new class") from ex

        log.info("class registered", extra={"event": "class_registered", "class_id": class_id})
        return class_id

    def _to_slot(self, item: Mapping[str, Any]) -> SlotIn:
        from_minute = timecodec.encode(item.get("from"))
        to_minute = timecodec.encode(item.get("to"))
        if from_minute >= to_minute:
            raise InvalidTimeRange(f"'from' must be earlier than 'to': {item.get('from')}-{item.get('to')}")
        week_day = item.get("week_day")
        if self.strict and (not isinstance(week_day, int) or isinstance(week_day, bool) or not 0 <= week_day <= 6):
            raise InvalidField("week_day")
        return SlotIn(week_day=week_day, from_minute=from_minute, to_minute=to_minute)

    @staticmethod
    def _check_fields(fields: Mapping[str, Any], names: Sequence[str]) -> None:
        for name in names:
            value = fields.get(name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidField(name)
