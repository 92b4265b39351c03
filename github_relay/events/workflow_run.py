"""
Workflow Run Event Handler

Only completed runs are reported.
"""

from typing import Any, Dict, List

from github_relay.events.base import NotificationHandler
from github_relay.events.formatting import (
    code_block,
    conclusion_color,
    conclusion_label,
    diff_summary_line,
    embed_defaults,
    format_duration,
    repo_link,
    status_text,
    truncate,
)
from github_relay.logging_config import get_logger
from github_relay.models import Embed, EmbedField, EventType, WorkflowRunPayload

logger = get_logger(__name__)


class WorkflowRunHandler(NotificationHandler):
    name = "WorkflowRunEvent"
    events = (EventType.WORKFLOW_RUN.value,)

    async def execute(self, payload: Dict[str, Any]) -> None:
        if not self.is_enabled(EventType.WORKFLOW_RUN.value):
            return

        event = WorkflowRunPayload.model_validate(payload)

        if event.action != "completed":
            logger.debug("Ignoring workflow run action", action=event.action)
            return

        await self.notifier.send(self.build_embed(event))

    def build_embed(self, event: WorkflowRunPayload) -> Embed:
        config = self.settings.events_config.workflow_run
        run = event.workflow_run
        name = run.name or "workflow"
        status = status_text(run.conclusion)

        summary = [diff_summary_line(run.conclusion, "Workflow")]
        duration = None
        if run.run_started_at and run.updated_at:
            duration = format_duration(run.run_started_at, run.updated_at)

        fields: List[EmbedField] = []
        if config.show_conclusion and run.conclusion:
            fields.append(EmbedField(name="Result", value=conclusion_label(run.conclusion), inline=True))
        if config.show_duration and duration:
            summary.append(f"! Duration: {duration}")
            fields.append(EmbedField(name="Duration", value=duration, inline=True))
        fields.append(EmbedField(name="Run ID", value=f"#{run.id}", inline=True))

        return Embed(
            title=truncate(f"Workflow {name} ({event.repository.full_name})", 256),
            url=run.html_url,
            description="\n".join([
                f">>> Workflow **{name}** {status} in {repo_link(event.repository)}",
                code_block("\n".join(summary), "diff"),
            ]),
            color=conclusion_color(run.conclusion, config.embed_color),
            fields=fields,
            **embed_defaults(event.sender, event.repository),
        )
