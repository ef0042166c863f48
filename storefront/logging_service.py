"""Structured activity log for Storefront.

Every entry is persisted in the ``system_log`` table together with a small
JSON ``context`` (for shop refreshes: the category and sort that were
requested and how many products were listed), so the console and the feed
can show exactly which selector state produced a warning.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timezone
from typing import Optional
from uuid import uuid4

from flask import current_app

from .extensions import db
from .models import SystemLog

LEVELS: tuple[str, ...] = ("info", "warn", "error")


@dataclass(frozen=True)
class LogRecord:
    """Structured representation of a log message."""

    component: str
    action: str
    level: str
    result: str
    title: str
    user_summary: str
    technical_details: str
    correlation_id: str
    environment: str
    context: dict[str, object] = field(default_factory=dict)


class LogManager:
    """Persist activity records and query them back for the log console."""

    def __init__(self) -> None:
        self.available_levels = list(LEVELS)
        self.available_components: list[str] = []

    def init_app(self, app) -> None:
        """Register the log manager on the Flask app."""
        app.extensions["log_manager"] = self

    def register_component(self, component: str) -> None:
        """Make a component selectable in the console before it has logged anything."""
        if component not in self.available_components:
            self.available_components.append(component)
            self.available_components.sort()

    def record(
        self,
        *,
        component: str,
        action: str,
        title: str,
        user_summary: str,
        technical_details: str,
        level: str = "info",
        result: str = "success",
        context: Optional[Mapping[str, object]] = None,
        correlation_id: Optional[str] = None,
    ) -> LogRecord:
        """Store one entry and drop the oldest ones beyond ``LOG_RETENTION``."""
        if level not in self.available_levels:
            raise ValueError(f"Unsupported level '{level}'")

        self.register_component(component)
        record = LogRecord(
            component=component,
            action=action,
            level=level,
            result=result,
            title=title,
            user_summary=user_summary,
            technical_details=technical_details,
            correlation_id=correlation_id or str(uuid4()),
            environment=current_app.config.get("ENVIRONMENT", "development"),
            context=dict(context or {}),
        )
        db.session.add(
            SystemLog(
                component=record.component,
                action=record.action,
                level=record.level,
                result=record.result,
                title=record.title,
                user_summary=record.user_summary,
                technical_details=record.technical_details,
                correlation_id=record.correlation_id,
                environment=record.environment,
                context=record.context,
            )
        )
        db.session.flush()
        self._trim_logs(current_app.config.get("LOG_RETENTION", 200))
        db.session.commit()
        return record

    def _trim_logs(self, retention: int) -> None:
        excess = SystemLog.query.count() - retention
        if excess <= 0:
            return
        stale = [
            entry.id
            for entry in SystemLog.query.order_by(SystemLog.timestamp, SystemLog.id).limit(excess)
        ]
        SystemLog.query.filter(SystemLog.id.in_(stale)).delete(synchronize_session=False)

    def _newest_first(self):
        return SystemLog.query.order_by(SystemLog.timestamp.desc(), SystemLog.id.desc())

    def fetch_logs(
        self,
        *,
        level: Optional[str] = None,
        component: Optional[str] = None,
        action: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
    ) -> list[dict[str, object]]:
        """Return the newest entries matching every filter that is given."""
        query = self._newest_first()
        if level in self.available_levels:
            query = query.filter_by(level=level)
        if component:
            query = query.filter_by(component=component)
        if action:
            query = query.filter_by(action=action)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                SystemLog.title.ilike(pattern)
                | SystemLog.user_summary.ilike(pattern)
                | SystemLog.technical_details.ilike(pattern)
                | SystemLog.correlation_id.ilike(pattern)
            )
        return [entry.serialize() for entry in query.limit(limit)]

    def latest_timestamp(self) -> Optional[str]:
        """Return the UTC timestamp of the newest entry, if any."""
        entry = self._newest_first().first()
        if entry is None:
            return None
        return entry.timestamp.replace(tzinfo=timezone.utc).isoformat(timespec="seconds")


log_manager = LogManager()
