"""Shared fixtures: sample API nodes and a fake injected client."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest


def make_issue(**overrides):
    node = {
        "id": "issue-1",
        "identifier": "ENG-1",
        "labelIds": ["label-1"],
        "number": 1,
        "priority": 2,
        "priorityLabel": "High",
        "slaType": None,
        "title": "Fix bug",
        "description": "Steps to reproduce",
        "branchName": "eng-1-fix-bug",
        "url": "https://linear.app/acme/issue/ENG-1",
        "projectMilestone": None,
        "creator": {"id": "user-1"},
        "cycle": None,
        "parent": None,
        "state": {"id": "state-1"},
        "team": {"id": "team-1"},
        "assignee": {"id": "user-2"},
        "project": None,
    }
    node.update(overrides)
    return node


def make_project(**overrides):
    node = {
        "id": "project-1",
        "name": "Launch",
        "description": None,
        "state": "planned",
        "slugId": "launch-1a2b",
        "startDate": "2026-01-05",
        "targetDate": None,
        "leadId": "user-1",
        "memberIds": ["user-1", "user-2"],
        "teamIds": ["team-1"],
        "color": "#6e6ebd",
    }
    node.update(overrides)
    return node


def payload_of(content):
    """Decode the single text block a tool returns."""
    assert len(content) == 1
    assert content[0].type == "text"
    return json.loads(content[0].text)


@pytest.fixture
def client():
    """Fake injected client exposing the same coroutines as LinearClient."""
    fake = MagicMock()
    fake.issue = AsyncMock(return_value=make_issue())
    fake.issues = AsyncMock(return_value={"nodes": [make_issue()]})
    fake.search_issues = AsyncMock(return_value={"nodes": [make_issue()]})
    fake.create_issue = AsyncMock(return_value={"success": True, "issue": make_issue()})
    fake.update_issue = AsyncMock(return_value={"success": True})
    fake.project = AsyncMock(return_value=make_project())
    fake.projects = AsyncMock(return_value={"nodes": [make_project()]})
    fake.search_projects = AsyncMock(return_value={"nodes": [make_project()]})
    fake.create_project = AsyncMock(return_value={"success": True, "project": make_project()})
    fake.update_project = AsyncMock(return_value={"success": True})
    return fake
