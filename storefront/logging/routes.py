"""Routes for browsing the structured activity log."""
from __future__ import annotations

from flask import jsonify, render_template, request

from ..logging_service import log_manager
from . import bp


def _log_filters() -> dict[str, object]:
    """Read the console/feed filters from the query string."""

    return {
        "level": request.args.get("level") or None,
        "component": request.args.get("component") or None,
        "action": request.args.get("action") or None,
        "search": request.args.get("search") or None,
        "limit": request.args.get("limit", type=int) or 50,
    }


@bp.route("/")
def console():
    """Render recent log entries, optionally filtered."""
    filters = _log_filters()
    logs = log_manager.fetch_logs(**filters)
    log_manager.record(
        component="Logging",
        action="view",
        title="Logging console accessed",
        user_summary="Log console opened for review.",
        technical_details=f"logging.console listed {len(logs)} entries.",
        context={key: value for key, value in filters.items() if value is not None},
    )
    return render_template(
        "logs/console.html",
        title="Storefront — Logs",
        logs=logs,
        filters=filters,
        active_nav="logs",
    )


@bp.route("/feed")
def feed():
    """Return filtered logs as JSON data."""
    return jsonify(
        {
            "logs": log_manager.fetch_logs(**_log_filters()),
            "latest": log_manager.latest_timestamp(),
        }
    )
