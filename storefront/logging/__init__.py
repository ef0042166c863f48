"""Log console blueprint: an HTML view and a JSON feed of recent activity."""
from flask import Blueprint

bp = Blueprint("logging", __name__, template_folder="templates")

from . import routes  # noqa: E402,F401
