from typing import Any, List, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from linear_mcp.core.comparators import (
    DateComparator,
    IdComparator,
    Number,
    NumberComparator,
    StringComparator,
    comparator_value,
)
from linear_mcp.core.tool import Tool, tool
from linear_mcp.utils.response_utils import text_content


class Reference(BaseModel):
    id: str


class Issue(BaseModel):
    """An issue as returned by the Linear API, reduced to the fields below."""

    model_config = ConfigDict(extra="ignore")

    id: str
    identifier: str
    labelIds: Optional[List[str]] = None
    number: Optional[Number] = None
    priority: Optional[Number] = None
    priorityLabel: Optional[str] = None
    slaType: Optional[str] = None
    title: str
    description: Optional[str] = None
    branchName: Optional[str] = None
    url: Optional[str] = None
    projectMilestone: Optional[Reference] = Field(None, description="The project milestone of the issue")
    creator: Optional[Reference] = Field(None, description="The creator of the issue")
    cycle: Optional[Reference] = Field(None, description="The cycle of the issue")
    parent: Optional[Reference] = Field(None, description="The parent of the issue")
    state: Optional[Reference] = Field(None, description="The workflow state of the issue")
    team: Reference = Field(..., description="The team of the issue")
    assignee: Optional[Reference] = Field(None, description="The assignee of the issue")
    project: Optional[Reference] = Field(None, description="The project of the issue")


IssueList = TypeAdapter(List[Issue])


class GetIssueParams(BaseModel):
    id: str = Field(..., description="The ID or identifier (e.g. ENG-123) of the issue.")


class SearchIssueParams(BaseModel):
    query: str = Field(..., description="The search query string.")


class ListIssuesParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    assigneeId: Optional[IdComparator] = Field(None, description="Filter by assignee ID")
    stateId: Optional[IdComparator] = Field(None, description="Filter by workflow state ID")
    dueDate: Optional[DateComparator] = Field(None, description="Filter by due date")
    creatorId: Optional[IdComparator] = Field(None, description="Filter by creator ID")
    cycleId: Optional[IdComparator] = Field(None, description="Filter by cycle ID")
    parentId: Optional[IdComparator] = Field(None, description="Filter by parent issue ID")
    projectId: Optional[IdComparator] = Field(None, description="Filter by project ID")
    teamId: Optional[IdComparator] = Field(None, description="Filter by team ID")
    labelId: Optional[IdComparator] = Field(None, description="Filter by label ID(s)")
    priority: Optional[NumberComparator] = Field(
        None, description="Filter by priority number (0 = none, 1 = urgent ... 4 = low)"
    )
    createdAt: Optional[DateComparator] = Field(None, description="Filter by creation date")
    updatedAt: Optional[DateComparator] = Field(None, description="Filter by last update date")
    title: Optional[StringComparator] = Field(None, description="Filter by issue title")
    identifier: Optional[StringComparator] = Field(None, description='Filter by issue identifier (e.g., "ENG-123")')
    number: Optional[NumberComparator] = Field(None, description="Filter by issue number")
    branchName: Optional[StringComparator] = Field(None, description="Filter by branch name")


class IssueCreateParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., description="The title of the issue.")
    description: Optional[str] = Field(None, description="The issue description in markdown.")
    teamId: str = Field(..., description="The ID of the team the issue belongs to.")
    assigneeId: Optional[str] = Field(None, description="The ID of the user to assign the issue to.")
    cycleId: Optional[str] = Field(None, description="The ID of the cycle to add the issue to.")
    parentId: Optional[str] = Field(None, description="The ID of the parent issue.")
    projectMilestoneId: Optional[str] = Field(None, description="The ID of the project milestone.")
    stateId: Optional[str] = Field(None, description="The ID of the workflow state.")
    projectId: Optional[str] = Field(None, description="The ID of the project to add the issue to.")


class IssueUpdateParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="The ID of the issue to update.")
    title: Optional[str] = Field(None, description="The title of the issue.")
    description: Optional[str] = Field(None, description="The issue description in markdown.")
    teamId: Optional[str] = Field(None, description="The ID of the team to move the issue to.")
    assigneeId: Optional[str] = Field(None, description="The ID of the user to assign the issue to.")
    cycleId: Optional[str] = Field(None, description="The ID of the cycle to add the issue to.")
    parentId: Optional[str] = Field(None, description="The ID of the parent issue.")
    projectMilestoneId: Optional[str] = Field(None, description="The ID of the project milestone.")
    stateId: Optional[str] = Field(None, description="The ID of the workflow state.")
    projectId: Optional[str] = Field(None, description="The ID of the project to add the issue to.")


class IssueFilter(TypedDict, total=False):
    assigneeId: dict
    stateId: dict
    dueDate: dict
    creatorId: dict
    cycleId: dict
    parentId: dict
    projectId: dict
    teamId: dict
    labels: dict
    priority: dict
    createdAt: dict
    updatedAt: dict
    title: dict
    identifier: dict
    number: dict
    branchName: dict


def build_issue_filter(params: ListIssuesParams) -> IssueFilter:
    """Build the `issues` filter from the comparators the caller supplied.

    A comparator is forwarded when present, whatever its values (so `priority: {eq: 0}`
    is kept). `labelId` is the one relation: labels are a to-many association, so it is
    sent as `{"labels": {"id": <comparator>}}`. Every other field keeps its own key.
    """
    issue_filter: IssueFilter = {}
    for name in ListIssuesParams.model_fields:
        comparator = getattr(params, name)
        if comparator is None:
            continue
        if name == "labelId":
            issue_filter["labels"] = {"id": comparator_value(comparator)}
        else:
            issue_filter[name] = comparator_value(comparator)
    return issue_filter


async def get_issue_by_id(client: Any, params: GetIssueParams):
    issue = await client.issue(params.id)
    return text_content(Issue.model_validate(issue))


async def list_issues(client: Any, params: ListIssuesParams):
    issues = await client.issues(filter=build_issue_filter(params))
    return text_content(IssueList.validate_python(issues["nodes"]))


async def search_issue(client: Any, params: SearchIssueParams):
    issues = await client.search_issues(params.query)
    return text_content(IssueList.validate_python(issues["nodes"]))


async def create_issue(client: Any, params: IssueCreateParams):
    result = await client.create_issue(params.model_dump(exclude_none=True))
    return text_content(Issue.model_validate(result["issue"]))


async def update_issue(client: Any, params: IssueUpdateParams):
    changes = params.model_dump(exclude={"id"}, exclude_unset=True, exclude_none=True)
    result = await client.update_issue(params.id, changes)
    return text_content(result["success"])


ISSUE_TOOLS: List[Tool] = [
    tool(
        name="get_issue_by_id",
        title="Get issue",
        description="Get an issue by its ID",
        params=GetIssueParams,
        execute=get_issue_by_id,
    ),
    tool(
        name="list_issues",
        title="List issues",
        description="List all issues with optional filters",
        params=ListIssuesParams,
        execute=list_issues,
    ),
    tool(
        name="search_issue",
        title="Search issues",
        description="Search issues given a query string",
        params=SearchIssueParams,
        execute=search_issue,
    ),
    tool(
        name="create_issue",
        title="Create issue",
        description="Create an issue. Requires a title and a team ID.",
        params=IssueCreateParams,
        execute=create_issue,
    ),
    tool(
        name="update_issue",
        title="Update issue",
        description="Update an issue. Only the supplied fields are changed; returns whether the update succeeded.",
        params=IssueUpdateParams,
        execute=update_issue,
    ),
]


def get_tools() -> dict[str, Tool]:
    return {t.name: t for t in ISSUE_TOOLS}
