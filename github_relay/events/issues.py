"""
Issues Event Handler
"""

from typing import Any, Dict, List

from github_relay.events.base import NotificationHandler
from github_relay.events.formatting import COLOR_CANCELLED, COLOR_SUCCESS, embed_defaults, repo_link, truncate
from github_relay.logging_config import get_logger
from github_relay.models import Embed, EmbedField, EventType, IssuesPayload

logger = get_logger(__name__)

HANDLED_ACTIONS = {
    "opened", "closed", "reopened", "edited",
    "labeled", "unlabeled", "assigned", "unassigned",
}

BODY_LIMIT = 300


class IssuesHandler(NotificationHandler):
    name = "IssuesEvent"
    events = (EventType.ISSUES.value,)

    async def execute(self, payload: Dict[str, Any]) -> None:
        if not self.is_enabled(EventType.ISSUES.value):
            return

        event = IssuesPayload.model_validate(payload)

        if event.action not in HANDLED_ACTIONS:
            logger.debug("Ignoring issues action", action=event.action)
            return

        await self.notifier.send(self.build_embed(event))

    def build_embed(self, event: IssuesPayload) -> Embed:
        config = self.settings.events_config.issues
        issue = event.issue

        description = [
            f">>> Issue **#{issue.number}** {event.action} by **{event.sender.login}** "
            f"in {repo_link(event.repository)}"
        ]
        if issue.body and event.action == "opened":
            description.append("")
            description.append(truncate(issue.body, BODY_LIMIT))

        fields: List[EmbedField] = []
        if config.show_labels and issue.labels:
            fields.append(EmbedField(
                name="Labels",
                value=truncate(", ".join(f"`{label.name}`" for label in issue.labels), 1024),
                inline=True,
            ))
        if config.show_assignees and issue.assignees:
            fields.append(EmbedField(
                name="Assignees",
                value=truncate(", ".join(user.login for user in issue.assignees), 1024),
                inline=True,
            ))

        color = config.embed_color
        if event.action in ("opened", "reopened"):
            color = COLOR_SUCCESS
        elif event.action == "closed":
            color = COLOR_CANCELLED

        return Embed(
            title=truncate(f"Issue {event.action}: #{issue.number} {issue.title}", 256),
            url=issue.html_url,
            description="\n".join(description),
            color=color,
            fields=fields,
            **embed_defaults(event.sender, event.repository),
        )
