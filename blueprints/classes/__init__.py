from flask import Blueprint

# Mounted without url_prefix: the public API lives at /classes
bp = Blueprint("classes", __name__)

from . import routes  # noqa: E402,F401
