# blueprints/classes/store.py
from __future__ import annotations
import threading
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models import ClassSchedule, Tutor, TutorClass
from .errors import EmptySchedule

TUTOR_FIELDS = ("name", "avatar", "whatsapp", "bio")
CLASS_FIELDS = ("subject", "cost")

# ===== DTO =====
@dataclass(frozen=True)
class TutorRecord:
    id: int
    name: str
    avatar: str
    whatsapp: str
    bio: str

@dataclass(frozen=True)
class ClassRecord:
    id: int
    subject: str
    cost: float
    tutor_id: int

@dataclass(frozen=True)
class SlotIn:
    week_day: int
    from_minute: int
    to_minute: int

@dataclass(frozen=True)
class SlotRecord:
    id: int
    class_id: int
    week_day: int
    from_minute: int
    to_minute: int

@dataclass(frozen=True)
class TutorWithClass:
    tutor: TutorRecord
    tutor_class: ClassRecord

    def as_dict(self) -> Dict[str, Any]:
        # tutor columns win on "id", class id is kept as class_id
        return {
            "id": self.tutor.id,
            "name": self.tutor.name,
            "avatar": self.tutor.avatar,
            "whatsapp": self.tutor.whatsapp,
            "bio": self.tutor.bio,
            "class_id": self.tutor_class.id,
            "subject": self.tutor_class.subject,
            "cost": self.tutor_class.cost,
            "tutor_id": self.tutor_class.tutor_id,
        }

@dataclass(frozen=True)
class ClassDetail:
    tutor: TutorRecord
    tutor_class: ClassRecord
    schedule: List[SlotRecord] = field(default_factory=list)


def slot_covers(slot: SlotRecord, week_day: int, minute_of_day: int) -> bool:
    """Half-open match: from <= t < to on the same weekday."""
    return slot.week_day == week_day and slot.from_minute <= minute_of_day < slot.to_minute


class ConstraintViolation(Exception):
    """Raised by InMemoryScheduleStore where a database would reject a row."""


class ScheduleStore(Protocol):
    """Results of find_matching_tutors are ordered by class id, ascending."""

    def find_matching_tutors(self, subject: str, week_day: int, minute_of_day: int) -> List[TutorWithClass]:
        ...

    def create_tutor_with_class(self, tutor_fields: Mapping[str, Any], class_fields: Mapping[str, Any],
                                slots: Sequence[SlotIn]) -> int:
        ...

    def get_class(self, class_id: int) -> Optional[ClassDetail]:
        ...

    def counts(self) -> Dict[str, int]:
        ...


# ===== SQLAlchemy =====
def _tutor_record(t: Tutor) -> TutorRecord:
    return TutorRecord(id=t.id, name=t.name, avatar=t.avatar, whatsapp=t.whatsapp, bio=t.bio)

def _class_record(c: TutorClass) -> ClassRecord:
    return ClassRecord(id=c.id, subject=c.subject, cost=c.cost, tutor_id=c.tutor_id)

def _slot_record(s: ClassSchedule) -> SlotRecord:
    return SlotRecord(id=s.id, class_id=s.class_id, week_day=s.week_day,
                      from_minute=s.from_minute, to_minute=s.to_minute)


class SqlScheduleStore:
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def find_matching_tutors(self, subject: str, week_day: int, minute_of_day: int) -> List[TutorWithClass]:
        slot_match = (
            select(ClassSchedule.id)
            .where(
                ClassSchedule.class_id == TutorClass.id,
                ClassSchedule.week_day == week_day,
                ClassSchedule.from_minute <= minute_of_day,
                ClassSchedule.to_minute > minute_of_day,
            )
            .exists()
        )
        rows = (
            self.session.query(Tutor, TutorClass)
            .join(TutorClass, TutorClass.tutor_id == Tutor.id)
            .filter(TutorClass.subject == subject, slot_match)
            .order_by(TutorClass.id.asc())
            .all()
        )
        return [TutorWithClass(_tutor_record(t), _class_record(c)) for t, c in rows]

    def create_tutor_with_class(self, tutor_fields: Mapping[str, Any], class_fields: Mapping[str, Any],
                                slots: Sequence[SlotIn]) -> int:
        if not slots:
            raise EmptySchedule("schedule must contain at least one slot")
        with self._transaction() as s:
            tutor = Tutor(**{k: tutor_fields.get(k) for k in TUTOR_FIELDS})
            s.add(tutor)
            s.flush()

            tutor_class = TutorClass(tutor_id=tutor.id, **{k: class_fields.get(k) for k in CLASS_FIELDS})
            s.add(tutor_class)
            s.flush()
            class_id = tutor_class.id

            self._insert_slots(class_id, slots)
        return class_id

    def _insert_slots(self, class_id: int, slots: Sequence[SlotIn]) -> None:
        self.session.add_all([
            ClassSchedule(class_id=class_id, week_day=sl.week_day,
                          from_minute=sl.from_minute, to_minute=sl.to_minute)
            for sl in slots
        ])
        self.session.flush()

    def get_class(self, class_id: int) -> Optional[ClassDetail]:
        c = self.session.get(TutorClass, class_id)
        if c is None:
            return None
        slots = (
            self.session.query(ClassSchedule)
            .filter(ClassSchedule.class_id == class_id)
            .order_by(ClassSchedule.week_day.asc(), ClassSchedule.from_minute.asc())
            .all()
        )
        return ClassDetail(_tutor_record(c.tutor), _class_record(c), [_slot_record(s) for s in slots])

    def counts(self) -> Dict[str, int]:
        q = self.session.query
        return {
            "tutors": q(func.count(Tutor.id)).scalar() or 0,
            "classes": q(func.count(TutorClass.id)).scalar() or 0,
            "slots": q(func.count(ClassSchedule.id)).scalar() or 0,
        }


# ===== in-memory =====
@dataclass
class _Tables:
    tutors: Dict[int, TutorRecord]
    classes: Dict[int, ClassRecord]
    slots: Dict[int, SlotRecord]
    ids: Dict[str, int]

    def next_id(self, table: str) -> int:
        self.ids[table] += 1
        return self.ids[table]


class InMemoryScheduleStore:
    """Dict-backed store. A write works on copies of the tables that replace
    the live ones only when the whole unit succeeds."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tables = _Tables({}, {}, {}, {"tutors": 0, "classes": 0, "slots": 0})

    @contextmanager
    def _transaction(self) -> Iterator[_Tables]:
        with self._lock:
            live = self._tables
            work = _Tables(dict(live.tutors), dict(live.classes), dict(live.slots), dict(live.ids))
            yield work
            self._tables = work

    def find_matching_tutors(self, subject: str, week_day: int, minute_of_day: int) -> List[TutorWithClass]:
        with self._lock:
            t = self._tables
            by_class: Dict[int, List[SlotRecord]] = defaultdict(list)
            for slot in t.slots.values():
                by_class[slot.class_id].append(slot)
            out = []
            for class_id in sorted(t.classes):
                c = t.classes[class_id]
                if c.subject != subject:
                    continue
                if any(slot_covers(sl, week_day, minute_of_day) for sl in by_class[class_id]):
                    out.append(TutorWithClass(t.tutors[c.tutor_id], c))
            return out

    def create_tutor_with_class(self, tutor_fields: Mapping[str, Any], class_fields: Mapping[str, Any],
                                slots: Sequence[SlotIn]) -> int:
        if not slots:
            raise EmptySchedule("schedule must contain at least one slot")
        with self._transaction() as work:
            _require(tutor_fields, TUTOR_FIELDS, "tutors")
            tutor = TutorRecord(id=work.next_id("tutors"), **{k: tutor_fields[k] for k in TUTOR_FIELDS})
            work.tutors[tutor.id] = tutor

            _require(class_fields, CLASS_FIELDS, "classes")
            tutor_class = ClassRecord(id=work.next_id("classes"), tutor_id=tutor.id,
                                      **{k: class_fields[k] for k in CLASS_FIELDS})
            work.classes[tutor_class.id] = tutor_class

            self._insert_slots(work, tutor_class.id, slots)
        return tutor_class.id

    def _insert_slots(self, work: _Tables, class_id: int, slots: Sequence[SlotIn]) -> None:
        for sl in slots:
            if sl.week_day is None or not 0 <= sl.from_minute < sl.to_minute <= 1439:
                raise ConstraintViolation(f"class_schedule: bad slot {sl!r}")
            rec = SlotRecord(id=work.next_id("slots"), class_id=class_id, week_day=sl.week_day,
                             from_minute=sl.from_minute, to_minute=sl.to_minute)
            work.slots[rec.id] = rec

    def get_class(self, class_id: int) -> Optional[ClassDetail]:
        with self._lock:
            t = self._tables
            c = t.classes.get(class_id)
            if c is None:
                return None
            slots = sorted((s for s in t.slots.values() if s.class_id == class_id),
                           key=lambda s: (s.week_day, s.from_minute))
            return ClassDetail(t.tutors[c.tutor_id], c, slots)

    def counts(self) -> Dict[str, int]:
        with self._lock:
            t = self._tables
            return {"tutors": len(t.tutors), "classes": len(t.classes), "slots": len(t.slots)}


def _require(fields: Mapping[str, Any], names: Sequence[str], table: str) -> None:
    for name in names:
        if fields.get(name) is None:
            raise ConstraintViolation(f"{table}.{name} may not be NULL")
