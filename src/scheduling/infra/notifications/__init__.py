"""Notificadores concretos."""

from scheduling.infra.notifications.logging_notifier import LoggingNotifier

__all__ = ["LoggingNotifier"]
