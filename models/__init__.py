from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Float, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column

from extensions import db


class Tutor(db.Model):
    __tablename__ = "tutors"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    avatar: Mapped[str] = mapped_column(db.String(512), nullable=False)
    whatsapp: Mapped[str] = mapped_column(db.String(64), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False)

    classes = relationship("TutorClass", back_populates="tutor", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Tutor {self.name}>"


class TutorClass(db.Model):
    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(primary_key=True)
    subject: Mapped[str] = mapped_column(db.String(255), nullable=False, index=True)
    cost: Mapped[float] = mapped_column(Float, nullable=False)
    tutor_id: Mapped[int] = mapped_column(ForeignKey("tutors.id", ondelete="CASCADE"), nullable=False, index=True)

    tutor = relationship("Tutor", back_populates="classes")
    schedule = relationship("ClassSchedule", back_populates="tutor_class", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<TutorClass {self.subject}>"


class ClassSchedule(db.Model):
    __tablename__ = "class_schedule"

    id: Mapped[int] = mapped_column(primary_key=True)
    class_id: Mapped[int] = mapped_column(ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    week_day: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Sun .. 6=Sat
    # minute-of-day, [from_minute, to_minute)
    from_minute: Mapped[int] = mapped_column("from", Integer, nullable=False)
    to_minute: Mapped[int] = mapped_column("to", Integer, nullable=False)

    tutor_class = relationship("TutorClass", back_populates="schedule")

    __table_args__ = (
        CheckConstraint('"from" >= 0 AND "from" < "to" AND "to" <= 1439', name="ck_class_schedule_range"),
        Index("ix_class_schedule_class_weekday", "class_id", "week_day"),
    )
