from flask import Blueprint

bp = Blueprint("core", __name__)
# routes must be imported for the handlers to be registered
from . import routes  # noqa: E402,F401
