"""Database models for Storefront."""
from __future__ import annotations

from datetime import datetime, timezone

from .extensions import db


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SystemLog(db.Model):
    """Model representing a single system log entry."""

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, default=_utcnow, index=True)
    component = db.Column(db.String(64), nullable=False, index=True)
    action = db.Column(db.String(64), nullable=False)
    level = db.Column(db.String(16), nullable=False, index=True)
    result = db.Column(db.String(32), nullable=False)
    title = db.Column(db.String(120), nullable=False)
    user_summary = db.Column(db.Text, nullable=False)
    technical_details = db.Column(db.Text, nullable=False)
    correlation_id = db.Column(db.String(36), index=True)
    environment = db.Column(db.String(20), default="development")
    context = db.Column(db.JSON, nullable=False, default=dict)

    def serialize(self) -> dict[str, str]:
        """Return a JSON-serializable representation of the log entry."""
        stamp = self.timestamp.replace(tzinfo=timezone.utc)
        return {
            "id": self.id,
            "timestamp": stamp.isoformat(timespec="seconds"),
            "component": self.component,
            "action": self.action,
            "level": self.level,
            "result": self.result,
            "title": self.title,
            "user_summary": self.user_summary,
            "technical_details": self.technical_details,
            "correlation_id": self.correlation_id,
            "environment": self.environment,
            "context": dict(self.context or {}),
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<SystemLog {self.level} {self.component} {self.action}>"
