"""
Per-request alert queue.

Alerts are kept in the order they were recorded and are not
de-duplicated. The response layer drains them once.
"""

from enum import Enum

from .models import Alert


class Severity(str, Enum):
    """Alert severities understood by the front end."""

    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class AlertSink:
    """Accumulates user-facing messages for one request."""

    def __init__(self) -> None:
        self._alerts: list[Alert] = []

    def record(self, severity: Severity, message: str) -> None:
        self._alerts.append(Alert(Severity(severity).value, message))

    def drain(self) -> list[Alert]:
        """Return every recorded alert and empty the sink."""
        alerts, self._alerts = self._alerts, []
        return alerts
