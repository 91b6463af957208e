# blueprints/classes/routes.py
from __future__ import annotations
import logging

from flask import current_app, jsonify, request
from pydantic import ValidationError

from . import bp
from . import timecodec
from .errors import ClassesError, MissingFilter
from .schemas import ClassDetailOut, ClassRegistrationIn
from .services import ClassRegistrationService, ClassSearchService
from .store import SqlScheduleStore
from extensions import db

log = logging.getLogger(__name__)

SEARCH_MISSING_MSG = "Missing filters to search classes"
SEARCH_INVALID_MSG = "Invalid filters to search classes"
CREATE_FAILED_MSG = "Unexpected error while creating new class"

def error(msg: str, status: int = 400, code: str | None = None):
    payload = {"error": msg}
    if code: payload["code"] = code
    return jsonify(payload), status

def _store() -> SqlScheduleStore:
    return SqlScheduleStore(db.session)

def _strict() -> bool:
    return bool(current_app.config.get("CLASSES_STRICT_VALIDATION", False))

@bp.get("/classes")
def classes_search():
    svc = ClassSearchService(_store(), strict=_strict())
    try:
        found = svc.search(request.args)
    except MissingFilter:
        return error(SEARCH_MISSING_MSG)
    except ClassesError as ex:
        return error(SEARCH_INVALID_MSG, code=ex.code)
    return jsonify([row.as_dict() for row in found])

@bp.post("/classes")
def classes_create():
    payload = request.get_json(silent=True) or {}
    try:
        data = ClassRegistrationIn.model_validate(payload)
    except ValidationError as ve:
        log.info("class registration rejected: %s", ve.error_count(), extra={"event": "validation_error"})
        return error(CREATE_FAILED_MSG, code="VALIDATION_ERROR")

    svc = ClassRegistrationService(_store(), strict=_strict())
    try:
        svc.register(data.tutor_fields(), data.class_fields(), data.schedule_items())
    except ClassesError as ex:
        # storage causes are logged by the service, never returned
        return error(CREATE_FAILED_MSG, code=ex.code)
    return "", 201

@bp.get("/classes/<int:class_id>")
def classes_get(class_id: int):
    detail = _store().get_class(class_id)
    if detail is None:
        return error("Class not found", status=404)
    out = ClassDetailOut.model_validate({
        "id": detail.tutor_class.id,
        "subject": detail.tutor_class.subject,
        "cost": detail.tutor_class.cost,
        "tutor": {
            "id": detail.tutor.id,
            "name": detail.tutor.name,
            "avatar": detail.tutor.avatar,
            "whatsapp": detail.tutor.whatsapp,
            "bio": detail.tutor.bio,
        },
        "schedule": [
            {"week_day": s.week_day, "from": timecodec.decode(s.from_minute), "to": timecodec.decode(s.to_minute)}
            for s in detail.schedule
        ],
    })
    return jsonify(out.model_dump(mode="json", by_alias=True))
