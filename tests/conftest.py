"""
Test Configuration

Pytest configuration and fixtures for the test suite.
"""

import json
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient

from github_relay.config import Settings
from github_relay.events.base import NotificationHandler
from github_relay.main import create_app
from github_relay.models import RawDelivery
from github_relay.webhook.dispatcher import DispatchEngine
from github_relay.webhook.registry import EventRegistry
from github_relay.webhook.security import compute_signature

from helpers import RecordingNotifier


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings from section dicts, e.g. make(github={"secret": "x"})."""
    def make(**sections: Any) -> Settings:
        return Settings(**sections)
    return make


@pytest.fixture
def settings(settings_factory) -> Settings:
    return settings_factory()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def call_log() -> List[str]:
    return []


@pytest.fixture
def make_engine() -> Callable[..., DispatchEngine]:
    def make(handlers: Iterable[NotificationHandler], secret: str = "", debug_store=None) -> DispatchEngine:
        registry = EventRegistry()
        registry.register(handlers)
        return DispatchEngine(registry, secret=secret, debug_store=debug_store)
    return make


@pytest.fixture
def make_delivery() -> Callable[..., RawDelivery]:
    def make(
        payload: Any = None,
        event_type: Optional[str] = "push",
        content_type: Optional[str] = "application/json",
        secret: Optional[str] = None,
        signature: Optional[str] = None,
        raw_body: Optional[bytes] = None
    ) -> RawDelivery:
        body = raw_body if raw_body is not None else json.dumps(payload or {"zen": "hi"}).encode()
        if secret is not None and signature is None:
            signature = compute_signature(body, secret)
        return RawDelivery(
            event_type=event_type,
            raw_body=body,
            signature_header=signature,
            content_type=content_type,
            delivery_id="delivery-1",
        )
    return make


@pytest.fixture
def make_client(settings_factory) -> Generator[Callable[..., TestClient], None, None]:
    """Create test clients around apps with injected settings and handlers."""
    clients: List[TestClient] = []

    def make(handlers: Iterable[NotificationHandler], secret: str = "", **sections: Any) -> TestClient:
        settings = settings_factory(github={"secret": secret}, **sections)
        client = TestClient(create_app(settings=settings, handlers=handlers))
        client.__enter__()
        clients.append(client)
        return client

    yield make

    for client in clients:
        client.__exit__(None, None, None)


# =============================================================================
# Sample GitHub payloads
# =============================================================================

@pytest.fixture
def sender() -> Dict[str, Any]:
    return {
        "login": "octocat",
        "id": 1,
        "avatar_url": "https://avatars.githubusercontent.com/u/1",
        "html_url": "https://github.com/octocat",
    }


@pytest.fixture
def repository() -> Dict[str, Any]:
    return {
        "id": 111,
        "name": "repo",
        "full_name": "owner/repo",
        "html_url": "https://github.com/owner/repo",
    }


@pytest.fixture
def push_payload(sender, repository) -> Dict[str, Any]:
    return {
        "ref": "refs/heads/main",
        "before": "0" * 40,
        "after": "b" * 40,
        "compare": "https://github.com/owner/repo/compare/000000...bbbbbb",
        "commits": [
            {
                "id": "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678",
                "message": "Fix the flux capacitor",
                "author": {"name": "Octo Cat", "email": "octo@example.com"},
                "added": ["new.py"],
                "removed": [],
                "modified": ["main.py", "README.md"],
            },
            {
                "id": "ffeeddccbbaa99887766554433221100ffeeddcc",
                "message": "Add tests",
                "author": {"name": "Hubot"},
                "added": ["tests/test_new.py"],
                "removed": ["old.py"],
                "modified": [],
            },
        ],
        "repository": repository,
        "sender": sender,
    }


@pytest.fixture
def issues_payload(sender, repository) -> Dict[str, Any]:
    return {
        "action": "opened",
        "issue": {
            "number": 42,
            "title": "Something is broken",
            "body": "Steps to reproduce...",
            "state": "open",
            "html_url": "https://github.com/owner/repo/issues/42",
            "user": sender,
            "labels": [{"name": "bug"}, {"name": "help wanted"}],
            "assignees": [{"login": "hubot"}],
        },
        "repository": repository,
        "sender": sender,
    }


@pytest.fixture
def workflow_run_payload(sender, repository) -> Dict[str, Any]:
    return {
        "action": "completed",
        "workflow_run": {
            "id": 30433642,
            "name": "CI",
            "status": "completed",
            "conclusion": "success",
            "html_url": "https://github.com/owner/repo/actions/runs/30433642",
            "head_branch": "main",
            "run_started_at": "2024-01-15T10:00:00Z",
            "updated_at": "2024-01-15T10:03:25Z",
        },
        "repository": repository,
        "sender": sender,
    }


@pytest.fixture
def workflow_job_payload(sender, repository) -> Dict[str, Any]:
    return {
        "action": "completed",
        "workflow_job": {
            "id": 2832853555,
            "name": "test",
            "status": "completed",
            "conclusion": "failure",
            "html_url": "https://github.com/owner/repo/actions/runs/1/job/2832853555",
            "started_at": "2024-01-15T10:00:00Z",
            "completed_at": "2024-01-15T10:00:42Z",
            "runner_name": "GitHub Actions 2",
            "steps": [
                {"name": "Set up job", "status": "completed", "conclusion": "success", "number": 1},
                {"name": "Run tests", "status": "completed", "conclusion": "failure", "number": 2},
            ],
        },
        "repository": repository,
        "sender": sender,
    }
