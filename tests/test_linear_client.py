import json

import httpx
import pytest

from conftest import make_issue
from linear_mcp.core.errors import ConfigError, LinearAPIError, NotFoundError
from linear_mcp.core.linear_client import LinearClient, flatten_project

API_URL = "https://api.linear.test/graphql"


def make_client(handler):
    return LinearClient(api_key="lin_api_test", api_url=API_URL, transport=httpx.MockTransport(handler))


def graphql_node():
    return {
        "id": "project-1",
        "name": "Launch",
        "description": None,
        "state": "planned",
        "slugId": "launch-1a2b",
        "startDate": None,
        "targetDate": None,
        "color": "#6e6ebd",
        "lead": {"id": "user-1"},
        "members": {"nodes": [{"id": "user-1"}, {"id": "user-2"}]},
        "teams": {"nodes": [{"id": "team-1"}]},
    }


def test_flatten_project():
    project = flatten_project(graphql_node())
    assert project["leadId"] == "user-1"
    assert project["memberIds"] == ["user-1", "user-2"]
    assert project["teamIds"] == ["team-1"]
    assert "lead" not in project and "members" not in project and "teams" not in project


def test_flatten_project_without_lead():
    node = graphql_node()
    node["lead"] = None
    assert flatten_project(node)["leadId"] is None


def test_from_config_requires_api_key():
    with pytest.raises(ConfigError):
        LinearClient.from_config({"linear_api_url": API_URL, "linear_api_key": None})


@pytest.mark.asyncio
async def test_issues_sends_filter_and_auth_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"issues": {"nodes": [make_issue()]}}})

    result = await make_client(handler).issues(filter={"priority": {"eq": 2}})

    assert seen["auth"] == "lin_api_test"
    assert seen["body"]["variables"] == {"filter": {"priority": {"eq": 2}}}
    assert "issues(filter: $filter)" in seen["body"]["query"]
    assert result["nodes"][0]["id"] == "issue-1"


@pytest.mark.asyncio
async def test_issue_not_found_error():
    def handler(request):
        return httpx.Response(
            200,
            json={
                "data": None,
                "errors": [{"message": "Entity not found: Issue", "extensions": {"code": "INVALID_INPUT"}}],
            },
        )

    with pytest.raises(NotFoundError) as excinfo:
        await make_client(handler).issue("missing")
    assert excinfo.value.errors[0]["extensions"]["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_null_entity_is_not_found():
    def handler(request):
        return httpx.Response(200, json={"data": {"project": None}})

    with pytest.raises(NotFoundError):
        await make_client(handler).project("missing")


@pytest.mark.asyncio
async def test_graphql_error_raises_api_error():
    def handler(request):
        return httpx.Response(400, json={"errors": [{"message": "Argument Validation Error"}]})

    with pytest.raises(LinearAPIError) as excinfo:
        await make_client(handler).create_issue({"title": "x"})
    assert not isinstance(excinfo.value, NotFoundError)
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_http_error_without_graphql_body_propagates():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(httpx.HTTPStatusError):
        await make_client(handler).search_issues("crash")


@pytest.mark.asyncio
async def test_projects_are_flattened():
    def handler(request):
        return httpx.Response(200, json={"data": {"searchProjects": {"nodes": [graphql_node()]}}})

    result = await make_client(handler).search_projects("launch")
    assert result["nodes"][0]["teamIds"] == ["team-1"]


@pytest.mark.asyncio
async def test_create_project_flattens_payload_project():
    def handler(request):
        body = json.loads(request.content)
        assert body["variables"] == {"input": {"name": "Launch", "teamIds": ["team-1"]}}
        return httpx.Response(
            200, json={"data": {"projectCreate": {"success": True, "project": graphql_node()}}}
        )

    result = await make_client(handler).create_project({"name": "Launch", "teamIds": ["team-1"]})
    assert result["success"] is True
    assert result["project"]["memberIds"] == ["user-1", "user-2"]


@pytest.mark.asyncio
async def test_update_issue_sends_id_and_input():
    def handler(request):
        body = json.loads(request.content)
        assert body["variables"] == {"id": "issue-1", "input": {"stateId": "state-2"}}
        return httpx.Response(200, json={"data": {"issueUpdate": {"success": True}}})

    assert await make_client(handler).update_issue("issue-1", {"stateId": "state-2"}) == {"success": True}
