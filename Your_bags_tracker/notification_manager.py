# notification_manager.py
from typing import List
from loguru import logger

from Your_bags_tracker.models import Notice


class NotificationManager:
    """
    Collects transient notices for the display layer.

    Each notice is logged when raised and kept until the display layer drains it.
    """

    LEVELS = ("info", "success", "warning", "error")

    def __init__(self, max_pending: int = 20):
        self.max_pending = max_pending
        self._pending: List[Notice] = []

    def notify(self, level: str, message: str) -> Notice:
        if level not in self.LEVELS:
            level = "info"
        notice = Notice(level=level, message=message)

        log_method = {
            "info": logger.info,
            "success": logger.success,
            "warning": logger.warning,
            "error": logger.error,
        }[level]
        log_method(f"🔔 {message}")

        self._pending.append(notice)
        if len(self._pending) > self.max_pending:
            self._pending = self._pending[-self.max_pending :]
        return notice

    def info(self, message: str) -> Notice:
        return self.notify("info", message)

    def warning(self, message: str) -> Notice:
        return self.notify("warning", message)

    def error(self, message: str) -> Notice:
        return self.notify("error", message)

    @property
    def pending(self) -> List[Notice]:
        return list(self._pending)

    def drain(self) -> List[Notice]:
        notices, self._pending = self._pending, []
        return notices
