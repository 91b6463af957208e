from __future__ import annotations
import logging
import pytest

from app import create_app
from extensions import db
from blueprints.classes.errors import (
    EmptySchedule, InvalidField, InvalidFilter, InvalidTimeFormat,
    InvalidTimeRange, MissingFilter, RegistrationFailed,
)
from blueprints.classes.services import ClassRegistrationService, ClassSearchService
from blueprints.classes.store import InMemoryScheduleStore, SqlScheduleStore

ANA = {"name": "Ana", "avatar": "https://example.com/ana.png", "whatsapp": "5511999990001", "bio": "Math tutor"}
MATH = {"subject": "Math", "cost": 50}
MONDAY_8_10 = [{"week_day": 1, "from": "08:00", "to": "10:00"}]
EMPTY = {"tutors": 0, "classes": 0, "slots": 0}

class SpyStore(InMemoryScheduleStore):
    def __init__(self):
        super().__init__()
        self.reads = 0
        self.writes = 0

    def find_matching_tutors(self, *args):
        self.reads += 1
        return super().find_matching_tutors(*args)

    def create_tutor_with_class(self, *args):
        self.writes += 1
        return super().create_tutor_with_class(*args)

@pytest.fixture()
def store():
    return SpyStore()

@pytest.fixture()
def sql_store():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        yield SqlScheduleStore(db.session)
        db.session.remove()
        db.drop_all()

# ---------- search ----------
@pytest.mark.parametrize("missing", ["subject", "week_day", "time"])
def test_search_missing_filter_never_reads_store(store, missing):
    filters = {"subject": "Math", "week_day": "1", "time": "09:00"}
    filters.pop(missing)
    with pytest.raises(MissingFilter):
        ClassSearchService(store).search(filters)
    with pytest.raises(MissingFilter):
        ClassSearchService(store).search({**filters, missing: ""})
    assert store.reads == 0

def test_search_week_day_zero_is_not_missing(store):
    ClassRegistrationService(store).register(ANA, MATH, [{"week_day": 0, "from": "08:00", "to": "10:00"}])
    found = ClassSearchService(store).search({"subject": "Math", "week_day": "0", "time": "08:00"})
    assert len(found) == 1

def test_search_rejects_bad_week_day_and_time(store):
    svc = ClassSearchService(store)
    with pytest.raises(InvalidFilter):
        svc.search({"subject": "Math", "week_day": "monday", "time": "09:00"})
    with pytest.raises(InvalidTimeFormat):
        svc.search({"subject": "Math", "week_day": "1", "time": "9h"})
    assert store.reads == 0

def test_search_out_of_range_week_day(store):
    ClassRegistrationService(store).register(ANA, MATH, MONDAY_8_10)
    assert ClassSearchService(store).search({"subject": "Math", "week_day": 8, "time": "09:00"}) == []
    with pytest.raises(InvalidFilter):
        ClassSearchService(store, strict=True).search({"subject": "Math", "week_day": 8, "time": "09:00"})

@pytest.mark.parametrize("time,matches", [("08:00", True), ("09:59", True), ("10:00", False), ("10:01", False)])
def test_search_boundaries(store, time, matches):
    ClassRegistrationService(store).register(ANA, MATH, MONDAY_8_10)
    found = ClassSearchService(store).search({"subject": "Math", "week_day": 1, "time": time})
    assert bool(found) is matches

# ---------- registration ----------
def test_register_then_search_end_to_end(sql_store):
    class_id = ClassRegistrationService(sql_store).register(ANA, MATH, MONDAY_8_10)
    svc = ClassSearchService(sql_store)
    found = svc.search({"subject": "Math", "week_day": "1", "time": "09:00"})
    assert len(found) == 1
    assert found[0].tutor.name == "Ana"
    assert found[0].tutor_class.id == class_id
    assert svc.search({"subject": "Math", "week_day": "1", "time": "10:00"}) == []

def test_register_empty_schedule(store):
    with pytest.raises(EmptySchedule):
        ClassRegistrationService(store).register(ANA, MATH, [])
    assert store.writes == 0
    assert store.counts() == EMPTY

def test_register_bad_time_aborts_before_storage(store):
    items = MONDAY_8_10 + [{"week_day": 2, "from": "25:00", "to": "26:00"}]
    with pytest.raises(InvalidTimeFormat):
        ClassRegistrationService(store).register(ANA, MATH, items)
    with pytest.raises(InvalidTimeRange):
        ClassRegistrationService(store).register(ANA, MATH, [{"week_day": 2, "from": "10:00", "to": "10:00"}])
    assert store.writes == 0
    assert store.counts() == EMPTY

def test_register_slot_failure_rolls_back_sql(sql_store, monkeypatch, caplog):
    def boom(*args, **kwargs):
        raise RuntimeError("duplicate slot")
    monkeypatch.setattr(sql_store, "_insert_slots", boom)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(RegistrationFailed) as exc:
            ClassRegistrationService(sql_store).register(ANA, MATH, MONDAY_8_10)
    assert "duplicate slot" not in str(exc.value)
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert "class registration failed" in caplog.text
    assert sql_store.counts() == EMPTY

def test_register_slot_failure_rolls_back_memory(store, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("duplicate slot")
    monkeypatch.setattr(store, "_insert_slots", boom)
    with pytest.raises(RegistrationFailed):
        ClassRegistrationService(store).register(ANA, MATH, MONDAY_8_10)
    assert store.counts() == EMPTY

def test_register_missing_tutor_field_is_storage_failure(sql_store):
    with pytest.raises(RegistrationFailed):
        ClassRegistrationService(sql_store).register({"name": "Ana"}, MATH, MONDAY_8_10)
    assert sql_store.counts() == EMPTY

def test_register_permissive_by_default(store):
    ClassRegistrationService(store).register({**ANA, "bio": ""}, MATH, [{"week_day": 9, "from": "08:00", "to": "10:00"}])
    assert store.counts() == {"tutors": 1, "classes": 1, "slots": 1}

@pytest.mark.parametrize("tutor,klass,items", [
    ({**ANA, "name": "  "}, MATH, MONDAY_8_10),
    (ANA, {"subject": "", "cost": 50}, MONDAY_8_10),
    (ANA, {"subject": "Math", "cost": -1}, MONDAY_8_10),
    (ANA, MATH, [{"week_day": 7, "from": "08:00", "to": "10:00"}]),
])
def test_register_strict_validation(store, tutor, klass, items):
    with pytest.raises(InvalidField):
        ClassRegistrationService(store, strict=True).register(tutor, klass, items)
    assert store.writes == 0

def test_search_blank_subject_is_only_missing_when_empty(store):
    ClassRegistrationService(store).register(ANA, MATH, MONDAY_8_10)
    assert ClassSearchService(store).search({"subject": " ", "week_day": "1", "time": "09:00"}) == []
    with pytest.raises(InvalidFilter):
        ClassSearchService(store, strict=True).search({"subject": " ", "week_day": "1", "time": "09:00"})

@pytest.mark.parametrize("week_day", ["1.0", "1e0", "one"])
def test_search_week_day_must_be_integer_text(store, week_day):
    with pytest.raises(InvalidFilter):
        ClassSearchService(store).search({"subject": "Math", "week_day": week_day, "time": "09:00"})
    assert store.reads == 0
