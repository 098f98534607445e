"""Async adapter over the Linear GraphQL API.

Exposes one coroutine per operation the tools call. Responses are returned as
plain dicts shaped the way the tools expect them: ``{"nodes": [...]}`` for
list/search, the raw mutation payload for create/update. Project relations
are flattened to ``leadId``/``memberIds``/``teamIds``.

Retries, pagination and rate limiting are not handled here.
"""
from typing import Any, Dict, Optional
import logging

import httpx

from linear_mcp.core.config import get_api_key, get_config
from linear_mcp.core.errors import LinearAPIError, NotFoundError
from linear_mcp.utils.response_utils import robust_parse_text

logger = logging.getLogger(__name__)

ISSUE_FIELDS = """
    id
    identifier
    labelIds
    number
    priority
    priorityLabel
    slaType
    title
    description
    branchName
    url
    projectMilestone { id }
    creator { id }
    cycle { id }
    parent { id }
    state { id }
    team { id }
    assignee { id }
    project { id }
"""

PROJECT_FIELDS = """
    id
    name
    description
    state
    slugId
    startDate
    targetDate
    color
    lead { id }
    members { nodes { id } }
    teams { nodes { id } }
"""

ISSUE_QUERY = "query Issue($id: String!) { issue(id: $id) { %s } }" % ISSUE_FIELDS
ISSUES_QUERY = "query Issues($filter: IssueFilter) { issues(filter: $filter) { nodes { %s } } }" % ISSUE_FIELDS
SEARCH_ISSUES_QUERY = "query SearchIssues($term: String!) { searchIssues(term: $term) { nodes { %s } } }" % ISSUE_FIELDS
CREATE_ISSUE_MUTATION = (
    "mutation IssueCreate($input: IssueCreateInput!) { issueCreate(input: $input) { success issue { %s } } }"
    % ISSUE_FIELDS
)
UPDATE_ISSUE_MUTATION = (
    "mutation IssueUpdate($id: String!, $input: IssueUpdateInput!) { issueUpdate(id: $id, input: $input) { success } }"
)

PROJECT_QUERY = "query Project($id: String!) { project(id: $id) { %s } }" % PROJECT_FIELDS
PROJECTS_QUERY = (
    "query Projects($filter: ProjectFilter) { projects(filter: $filter) { nodes { %s } } }" % PROJECT_FIELDS
)
SEARCH_PROJECTS_QUERY = (
    "query SearchProjects($term: String!) { searchProjects(term: $term) { nodes { %s } } }" % PROJECT_FIELDS
)
CREATE_PROJECT_MUTATION = (
    "mutation ProjectCreate($input: ProjectCreateInput!) { projectCreate(input: $input) { success project { %s } } }"
    % PROJECT_FIELDS
)
UPDATE_PROJECT_MUTATION = (
    "mutation ProjectUpdate($id: String!, $input: ProjectUpdateInput!) "
    "{ projectUpdate(id: $id, input: $input) { success } }"
)


def _is_not_found(error: Dict[str, Any]) -> bool:
    message = str(error.get("message", ""))
    return message.lower().startswith("entity not found")


def flatten_project(node: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Replace the nested lead/members/teams selections with identifier fields."""
    if node is None:
        return None
    project = {k: v for k, v in node.items() if k not in ("lead", "members", "teams")}
    lead = node.get("lead")
    project["leadId"] = lead.get("id") if lead else None
    project["memberIds"] = [m["id"] for m in (node.get("members") or {}).get("nodes", [])]
    project["teamIds"] = [t["id"] for t in (node.get("teams") or {}).get("nodes", [])]
    return project


class LinearClient:
    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.linear.app/graphql",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "LinearClient":
        cfg = config if config is not None else get_config()
        return cls(
            api_key=get_api_key(cfg),
            api_url=cfg.get("linear_api_url") or "https://api.linear.app/graphql",
            timeout=float(cfg.get("request_timeout") or 30.0),
        )

    async def _execute(self, query: str, variables: Dict[str, Any], root: str) -> Any:
        """POST one GraphQL document and return ``data[root]``.

        Raises NotFoundError / LinearAPIError on GraphQL errors; HTTP errors without
        a GraphQL body propagate as httpx.HTTPStatusError.
        """
        headers = {"Authorization": self.api_key, "Content-Type": "application/json"}
        payload = {"query": query, "variables": variables}
        logger.debug("Linear request %s variables=%s", root, variables)
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.post(self.api_url, json=payload, headers=headers)
        body = robust_parse_text(response.text)
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            message = "; ".join(str(e.get("message", e)) for e in errors)
            logger.warning("Linear %s failed (%s): %s", root, response.status_code, message)
            if any(_is_not_found(e) for e in errors):
                raise NotFoundError(message, errors=errors, status_code=response.status_code)
            raise LinearAPIError(message, errors=errors, status_code=response.status_code)
        response.raise_for_status()
        if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
            raise LinearAPIError(f"Unexpected response for {root}: {body!r}", status_code=response.status_code)
        return body["data"].get(root)

    async def _fetch_one(self, query: str, root: str, id: str) -> Dict[str, Any]:
        node = await self._execute(query, {"id": id}, root)
        if node is None:
            raise NotFoundError(f"{root} {id} not found")
        return node

    # Issues

    async def issue(self, id: str) -> Dict[str, Any]:
        return await self._fetch_one(ISSUE_QUERY, "issue", id)

    async def issues(self, filter: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._execute(ISSUES_QUERY, {"filter": filter or {}}, "issues")

    async def search_issues(self, query: str) -> Dict[str, Any]:
        return await self._execute(SEARCH_ISSUES_QUERY, {"term": query}, "searchIssues")

    async def create_issue(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._execute(CREATE_ISSUE_MUTATION, {"input": payload}, "issueCreate")

    async def update_issue(self, id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._execute(UPDATE_ISSUE_MUTATION, {"id": id, "input": payload}, "issueUpdate")

    # Projects

    async def project(self, id: str) -> Dict[str, Any]:
        return flatten_project(await self._fetch_one(PROJECT_QUERY, "project", id))

    async def projects(self, filter: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        result = await self._execute(PROJECTS_QUERY, {"filter": filter or {}}, "projects")
        return {"nodes": [flatten_project(n) for n in result.get("nodes", [])]}

    async def search_projects(self, query: str) -> Dict[str, Any]:
        result = await self._execute(SEARCH_PROJECTS_QUERY, {"term": query}, "searchProjects")
        return {"nodes": [flatten_project(n) for n in result.get("nodes", [])]}

    async def create_project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._execute(CREATE_PROJECT_MUTATION, {"input": payload}, "projectCreate")
        return {**result, "project": flatten_project(result.get("project"))}

    async def update_project(self, id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._execute(UPDATE_PROJECT_MUTATION, {"id": id, "input": payload}, "projectUpdate")
