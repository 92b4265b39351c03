"""
Push Event Handler

Posts one embed per push: a summary of files added, deleted and modified,
followed by one field per commit (up to ``max_commits_shown``).
"""

from typing import Any, Dict, List

from github_relay.events.base import NotificationHandler
from github_relay.events.formatting import code_block, embed_defaults, plural, repo_link, truncate
from github_relay.logging_config import get_logger
from github_relay.models import Embed, EmbedField, EventType, PushPayload

logger = get_logger(__name__)

COMMIT_MESSAGE_LIMIT = 100

# Discord allows 25 fields per embed; one is kept for "More commits"
MAX_COMMIT_FIELDS = 24


class PushHandler(NotificationHandler):
    name = "PushEvent"
    events = (EventType.PUSH.value,)

    async def execute(self, payload: Dict[str, Any]) -> None:
        if not self.is_enabled(EventType.PUSH.value):
            return

        push = PushPayload.model_validate(payload)

        # Branch deletions and tag pushes carry no commits
        if not push.commits:
            logger.debug("Skipping push without commits", ref=push.ref, repo=push.repository.full_name)
            return

        await self.notifier.send(self.build_embed(push))

    def build_embed(self, push: PushPayload) -> Embed:
        config = self.settings.events_config.push
        commits = push.commits
        repo = push.repository

        description = [
            f">>> There's been **{len(commits)}** {'commit' if len(commits) == 1 else 'commits'} "
            f"to {repo_link(repo)}"
        ]

        if config.show_file_changes:
            summary = self._file_summary(push)
            if summary:
                description.append(code_block("\n".join(summary), "diff"))

        fields: List[EmbedField] = []
        if config.show_commit_details:
            shown = commits[:min(config.max_commits_shown, MAX_COMMIT_FIELDS)]
            for commit in shown:
                fields.append(EmbedField(
                    name=f"`{commit.id[:7]}` by {truncate(commit.author.name, 200)}",
                    value=code_block(truncate(commit.message, COMMIT_MESSAGE_LIMIT)),
                    inline=False,
                ))

            hidden = len(commits) - len(shown)
            if hidden > 0:
                fields.append(EmbedField(
                    name="More commits",
                    value=f"... and {hidden} more {'commit' if hidden == 1 else 'commits'}",
                    inline=False,
                ))

        return Embed(
            title=truncate(f"Commit to {repo.full_name} ({push.branch})", 256),
            url=push.compare,
            description="\n".join(description),
            color=config.embed_color,
            fields=fields,
            **embed_defaults(push.sender, repo),
        )

    @staticmethod
    def _file_summary(push: PushPayload) -> List[str]:
        added = sum(len(c.added) for c in push.commits)
        removed = sum(len(c.removed) for c in push.commits)
        modified = sum(len(c.modified) for c in push.commits)

        lines = []
        if added:
            lines.append(f"+ Added {plural(added, 'file')}")
        if removed:
            lines.append(f"- Deleted {plural(removed, 'file')}")
        if modified:
            lines.append(f"! Modified {plural(modified, 'file')}")
        return lines
