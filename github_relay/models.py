"""
Data Models Module

This module defines the Pydantic models used throughout the application.

Design Decisions:
- Delivery and payload models are frozen; they live for one request
- GitHub payload models only declare the fields the formatters read and
  ignore everything else, so new GitHub fields never break parsing
- Discord models mirror the webhook "execute" body and serialise with
  exclude_none
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================

class EventType(str, Enum):
    """GitHub event types that have a notification handler."""
    PUSH = "push"
    ISSUES = "issues"
    WORKFLOW_RUN = "workflow_run"
    WORKFLOW_JOB = "workflow_job"


class Conclusion(str, Enum):
    """Workflow run/job conclusions reported by GitHub."""
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    NEUTRAL = "neutral"
    TIMED_OUT = "timed_out"
    ACTION_REQUIRED = "action_required"


# =============================================================================
# Delivery Models
# =============================================================================

class RawDelivery(BaseModel):
    """
    One inbound webhook request as received by the transport.

    Attributes:
        event_type: Value of the X-GitHub-Event header
        raw_body: Request body exactly as received (signature input)
        signature_header: Value of X-Hub-Signature-256, if sent
        content_type: Declared Content-Type header
        delivery_id: Value of X-GitHub-Delivery, used for logging only
    """
    model_config = ConfigDict(frozen=True)

    event_type: Optional[str] = None
    raw_body: bytes = b""
    signature_header: Optional[str] = None
    content_type: Optional[str] = None
    delivery_id: Optional[str] = None


class VerifiedPayload(BaseModel):
    """A delivery whose signature has been checked and body decoded."""
    model_config = ConfigDict(frozen=True)

    event_type: str
    payload: Dict[str, Any]
    delivery_id: Optional[str] = None


class HandlerResult(BaseModel):
    """Outcome of running one handler for one delivery."""
    name: str
    succeeded: bool
    error: Optional[str] = None


class DispatchResult(BaseModel):
    """Outcome of dispatching one delivery to its handlers."""
    event_type: str
    delivery_id: Optional[str] = None
    handlers: List[HandlerResult] = []

    @property
    def failed(self) -> List[HandlerResult]:
        return [h for h in self.handlers if not h.succeeded]


# =============================================================================
# GitHub Webhook Models
# =============================================================================

class GitHubUser(BaseModel):
    """GitHub user information."""
    login: str
    id: Optional[int] = None
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None


class GitHubRepository(BaseModel):
    """GitHub repository information."""
    name: str
    full_name: str
    html_url: Optional[str] = None

    @property
    def url(self) -> str:
        return self.html_url or f"https://github.com/{self.full_name}"


class CommitAuthor(BaseModel):
    name: str
    email: Optional[str] = None
    username: Optional[str] = None


class Commit(BaseModel):
    """A commit as listed in a push payload."""
    id: str
    message: str
    url: Optional[str] = None
    author: CommitAuthor
    added: List[str] = []
    removed: List[str] = []
    modified: List[str] = []


class PushPayload(BaseModel):
    """Payload of a push event."""
    ref: str
    before: Optional[str] = None
    after: Optional[str] = None
    compare: Optional[str] = None
    commits: List[Commit] = []
    repository: GitHubRepository
    sender: GitHubUser

    @property
    def branch(self) -> str:
        return self.ref.replace("refs/heads/", "", 1)


class Label(BaseModel):
    name: str
    color: Optional[str] = None


class Issue(BaseModel):
    number: int
    title: str
    body: Optional[str] = None
    state: Optional[str] = None
    html_url: str
    user: GitHubUser
    labels: List[Label] = []
    assignees: List[GitHubUser] = []


class IssuesPayload(BaseModel):
    """Payload of an issues event."""
    action: str
    issue: Issue
    repository: GitHubRepository
    sender: GitHubUser


class WorkflowRun(BaseModel):
    id: int
    name: Optional[str] = None
    status: Optional[str] = None
    conclusion: Optional[str] = None
    html_url: Optional[str] = None
    head_branch: Optional[str] = None
    run_number: Optional[int] = None
    run_started_at: Optional[str] = None
    updated_at: Optional[str] = None


class WorkflowRunPayload(BaseModel):
    """Payload of a workflow_run event."""
    action: str
    workflow_run: WorkflowRun
    repository: GitHubRepository
    sender: GitHubUser


class WorkflowStep(BaseModel):
    name: str
    status: Optional[str] = None
    conclusion: Optional[str] = None
    number: Optional[int] = None


class WorkflowJob(BaseModel):
    id: int
    name: str
    status: Optional[str] = None
    conclusion: Optional[str] = None
    html_url: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    runner_name: Optional[str] = None
    workflow_name: Optional[str] = None
    steps: List[WorkflowStep] = []


class WorkflowJobPayload(BaseModel):
    """Payload of a workflow_job event."""
    action: str
    workflow_job: WorkflowJob
    repository: GitHubRepository
    sender: GitHubUser


# =============================================================================
# Discord Models
# =============================================================================

class EmbedField(BaseModel):
    name: str = Field(max_length=256)
    value: str = Field(max_length=1024)
    inline: bool = False


class EmbedAuthor(BaseModel):
    name: str
    url: Optional[str] = None
    icon_url: Optional[str] = None


class EmbedFooter(BaseModel):
    text: str
    icon_url: Optional[str] = None


class Embed(BaseModel):
    """
    A Discord embed.

    Length limits follow Discord's documented maximums; Discord rejects the
    whole message when one is exceeded.
    """
    title: str = Field(max_length=256)
    description: Optional[str] = Field(default=None, max_length=4096)
    url: Optional[str] = None
    color: Optional[int] = None
    fields: List[EmbedField] = Field(default=[], max_length=25)
    author: Optional[EmbedAuthor] = None
    footer: Optional[EmbedFooter] = None
    timestamp: Optional[str] = None


class DiscordMessage(BaseModel):
    """Body posted to a Discord webhook."""
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    content: Optional[str] = None
    embeds: List[Embed] = []
