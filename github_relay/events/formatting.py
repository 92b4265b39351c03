"""
Formatting helpers shared by the event handlers.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from github_relay.models import Conclusion, EmbedAuthor, EmbedFooter, GitHubRepository, GitHubUser

COLOR_SUCCESS = 0x28A745
COLOR_FAILURE = 0xDC3545
COLOR_CANCELLED = 0x6C757D

STATUS_TEXT = {
    Conclusion.SUCCESS: "succeeded",
    Conclusion.FAILURE: "failed",
    Conclusion.CANCELLED: "was cancelled",
    Conclusion.SKIPPED: "was skipped",
    Conclusion.TIMED_OUT: "timed out",
}

STATUS_ICONS = {
    Conclusion.SUCCESS: "✅",
    Conclusion.FAILURE: "❌",
    Conclusion.CANCELLED: "⏹️",
    Conclusion.SKIPPED: "⏭️",
    Conclusion.TIMED_OUT: "⏱️",
}

CONCLUSION_COLORS = {
    Conclusion.SUCCESS: COLOR_SUCCESS,
    Conclusion.FAILURE: COLOR_FAILURE,
    Conclusion.CANCELLED: COLOR_CANCELLED,
}


def truncate(text: Optional[str], limit: int) -> str:
    """Cut text to at most ``limit`` characters, ending with "..." if cut."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:max(limit - 3, 0)] + "..."


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def status_text(conclusion: Optional[str]) -> str:
    """Past-tense phrase for a workflow conclusion."""
    return STATUS_TEXT.get(conclusion or "", "completed")


def conclusion_label(conclusion: Optional[str]) -> str:
    """Conclusion with an icon, for the Result field."""
    if not conclusion:
        return "Unknown"
    icon = STATUS_ICONS.get(conclusion, "ℹ️")
    return f"{icon} {conclusion.replace('_', ' ').title()}"


def conclusion_color(conclusion: Optional[str], default: int) -> int:
    return CONCLUSION_COLORS.get(conclusion or "", default)


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_duration(started_at: str, finished_at: str) -> str:
    """
    Human readable duration between two GitHub timestamps, e.g. "1h 2m 3s".

    Returns "unknown" when either timestamp cannot be parsed.
    """
    try:
        seconds = int((parse_timestamp(finished_at) - parse_timestamp(started_at)).total_seconds())
    except (TypeError, ValueError):
        return "unknown"

    seconds = max(seconds, 0)
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def code_block(text: str, language: str = "") -> str:
    return f"```{language}\n{text}\n```"


def repo_link(repository: GitHubRepository) -> str:
    return f"[`{repository.full_name}`]({repository.url})"


def embed_defaults(sender: GitHubUser, repository: GitHubRepository) -> Dict[str, object]:
    """
    Author, footer and timestamp shared by every embed.

    Returns:
        Keyword arguments for Embed
    """
    return {
        "author": EmbedAuthor(
            name=sender.login,
            url=sender.html_url or f"https://github.com/{sender.login}",
            icon_url=sender.avatar_url,
        ),
        "footer": EmbedFooter(text=repository.full_name),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def diff_summary_line(conclusion: Optional[str], noun: str) -> str:
    """First line of the ```diff summary block; the prefix picks the colour."""
    if conclusion == Conclusion.SUCCESS:
        return f"+ {noun} completed successfully"
    if conclusion == Conclusion.FAILURE:
        return f"- {noun} failed"
    return f"! {noun} {conclusion or 'completed'}"
