"""
Workflow Job Event Handler

Only completed jobs are reported.
"""

from typing import Any, Dict, List

from github_relay.events.base import NotificationHandler
from github_relay.events.formatting import (
    STATUS_ICONS,
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
from github_relay.models import Embed, EmbedField, EventType, WorkflowJob, WorkflowJobPayload

logger = get_logger(__name__)


class WorkflowJobHandler(NotificationHandler):
    name = "WorkflowJobEvent"
    events = (EventType.WORKFLOW_JOB.value,)

    async def execute(self, payload: Dict[str, Any]) -> None:
        if not self.is_enabled(EventType.WORKFLOW_JOB.value):
            return

        event = WorkflowJobPayload.model_validate(payload)

        if event.action != "completed":
            logger.debug("Ignoring workflow job action", action=event.action)
            return

        await self.notifier.send(self.build_embed(event))

    def build_embed(self, event: WorkflowJobPayload) -> Embed:
        config = self.settings.events_config.workflow_job
        job = event.workflow_job
        status = status_text(job.conclusion)

        summary = [diff_summary_line(job.conclusion, "Job")]
        duration = None
        if job.started_at and job.completed_at:
            duration = format_duration(job.started_at, job.completed_at)
            summary.append(f"! Duration: {duration}")

        fields: List[EmbedField] = []
        if job.conclusion:
            fields.append(EmbedField(name="Result", value=conclusion_label(job.conclusion), inline=True))
        if duration:
            fields.append(EmbedField(name="Duration", value=duration, inline=True))
        if config.show_runner and job.runner_name:
            fields.append(EmbedField(name="Runner", value=job.runner_name, inline=True))
        fields.append(EmbedField(name="Job ID", value=f"#{job.id}", inline=True))
        if config.show_steps and job.steps:
            fields.append(EmbedField(name="Steps", value=self._steps(job), inline=False))

        return Embed(
            title=truncate(f"Workflow Job {job.name} ({event.repository.full_name})", 256),
            url=job.html_url,
            description="\n".join([
                f">>> Workflow job **{job.name}** {status} in {repo_link(event.repository)}",
                code_block("\n".join(summary), "diff"),
            ]),
            color=conclusion_color(job.conclusion, config.embed_color),
            fields=fields,
            **embed_defaults(event.sender, event.repository),
        )

    @staticmethod
    def _steps(job: WorkflowJob) -> str:
        lines = []
        for step in job.steps:
            icon = STATUS_ICONS.get(step.conclusion or "", "•")
            lines.append(f"{icon} {step.name}")
        return truncate("\n".join(lines), 1024)
