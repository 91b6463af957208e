# blueprints/classes/errors.py
from __future__ import annotations


class ClassesError(Exception):
    """Base for every error raised by the class search/registration core."""
    code = "CLASSES_ERROR"


class MissingFilter(ClassesError):
    code = "MISSING_FILTER"


class InvalidFilter(ClassesError):
    code = "INVALID_FILTER"


class InvalidTimeFormat(ClassesError, ValueError):
    code = "INVALID_TIME_FORMAT"


class OutOfRange(ClassesError, ValueError):
    code = "OUT_OF_RANGE"


class InvalidTimeRange(ClassesError, ValueError):
    code = "INVALID_TIME_RANGE"


class InvalidField(ClassesError, ValueError):
    code = "INVALID_FIELD"


class EmptySchedule(ClassesError, ValueError):
    code = "EMPTY_SCHEDULE"


class RegistrationFailed(ClassesError, RuntimeError):
    code = "REGISTRATION_FAILED"
