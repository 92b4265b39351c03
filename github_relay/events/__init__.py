"""
Event Handlers Package

One NotificationHandler per GitHub event type. ``default_handlers`` builds
the static list registered at startup.
"""

from typing import List

from github_relay.config import Settings
from github_relay.events.base import NotificationHandler, Notifier
from github_relay.events.issues import IssuesHandler
from github_relay.events.push import PushHandler
from github_relay.events.workflow_job import WorkflowJobHandler
from github_relay.events.workflow_run import WorkflowRunHandler


def default_handlers(settings: Settings, notifier: Notifier) -> List[NotificationHandler]:
    """Build the handlers registered when the service starts."""
    return [
        PushHandler(settings, notifier),
        IssuesHandler(settings, notifier),
        WorkflowRunHandler(settings, notifier),
        WorkflowJobHandler(settings, notifier),
    ]


__all__ = [
    "NotificationHandler",
    "Notifier",
    "PushHandler",
    "IssuesHandler",
    "WorkflowRunHandler",
    "WorkflowJobHandler",
    "default_handlers",
]
