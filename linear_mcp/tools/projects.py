from typing import Any, List, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from linear_mcp.core.comparators import DateComparator, IdComparator, StringComparator, comparator_value
from linear_mcp.core.tool import Tool, tool
from linear_mcp.utils.response_utils import text_content

_STATES = '"planned", "started", "paused", "completed", "canceled"'


class Project(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: Optional[str] = None
    state: Optional[str] = None
    slugId: str
    startDate: Optional[str] = None
    targetDate: Optional[str] = None
    leadId: Optional[str] = None
    memberIds: List[str]
    teamIds: List[str]
    color: Optional[str] = None


ProjectList = TypeAdapter(List[Project])


class GetProjectParams(BaseModel):
    id: str = Field(..., description="The UUID of the project to retrieve.")


class SearchProjectsParams(BaseModel):
    query: str = Field(..., description="The search query string.")


class ListProjectsParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[StringComparator] = Field(None, description="Filter projects by their name.")
    state: Optional[StringComparator] = Field(None, description=f"Filter projects by their state (e.g., {_STATES}).")
    startDate: Optional[DateComparator] = Field(None, description="Filter projects by their start date.")
    targetDate: Optional[DateComparator] = Field(None, description="Filter projects by their target date.")
    leadId: Optional[IdComparator] = Field(
        None, description="Filter projects by the ID of their lead user. Use list_users if needed."
    )
    memberId: Optional[IdComparator] = Field(
        None, description="Filter projects by the ID of a member user. Use list_users if needed."
    )
    teamId: Optional[IdComparator] = Field(
        None, description="Filter projects by an associated team ID. Use list_teams if needed."
    )


class ProjectCreateParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="The name of the project.")
    description: Optional[str] = Field(None, description="Optional description for the project.")
    state: Optional[str] = Field(None, description=f"The state of the project (e.g., {_STATES}).")
    leadId: Optional[str] = Field(
        None, description="Optional ID of the user who leads the project. Use list_users if needed."
    )
    memberIds: Optional[List[str]] = Field(None, description="Optional list of user IDs to assign as members.")
    teamIds: List[str] = Field(
        ..., description="List of team IDs required to associate with the project. Use list_teams if needed."
    )
    startDate: Optional[str] = Field(None, description="Optional start date in YYYY-MM-DD format.")
    targetDate: Optional[str] = Field(None, description="Optional target completion date in YYYY-MM-DD format.")
    color: Optional[str] = Field(None, description='Optional project color in hex format (e.g., "#6e6ebd").')


class ProjectUpdateParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="The UUID of the project to update.")
    name: Optional[str] = Field(None, description="The name of the project.")
    description: Optional[str] = Field(None, description="Description for the project.")
    state: Optional[str] = Field(None, description=f"The state of the project (e.g., {_STATES}).")
    leadId: Optional[str] = Field(None, description="ID of the user who leads the project.")
    memberIds: Optional[List[str]] = Field(None, description="User IDs to assign as members.")
    teamIds: Optional[List[str]] = Field(None, description="Team IDs to associate with the project.")
    startDate: Optional[str] = Field(None, description="Start date in YYYY-MM-DD format.")
    targetDate: Optional[str] = Field(None, description="Target completion date in YYYY-MM-DD format.")
    color: Optional[str] = Field(None, description="Project color in hex format.")


class ProjectFilter(TypedDict, total=False):
    name: dict
    state: dict
    startDate: dict
    targetDate: dict
    leadId: dict
    members: dict
    teams: dict


# flat parameter -> to-many relation key in ProjectFilter
_RELATIONS = {"memberId": "members", "teamId": "teams"}


def build_project_filter(params: ListProjectsParams) -> ProjectFilter:
    """Build the `projects` filter from the supplied comparators.

    Members and teams are to-many relations, so `memberId` / `teamId` are nested
    as `{"members": {"id": ...}}` / `{"teams": {"id": ...}}`. `leadId` stays scalar.
    """
    project_filter: ProjectFilter = {}
    for name in ListProjectsParams.model_fields:
        comparator = getattr(params, name)
        if comparator is None:
            continue
        if name in _RELATIONS:
            project_filter[_RELATIONS[name]] = {"id": comparator_value(comparator)}
        else:
            project_filter[name] = comparator_value(comparator)
    return project_filter


async def get_project_by_id(client: Any, params: GetProjectParams):
    project = await client.project(params.id)
    return text_content(Project.model_validate(project))


async def list_projects(client: Any, params: ListProjectsParams):
    projects = await client.projects(filter=build_project_filter(params))
    return text_content(ProjectList.validate_python(projects["nodes"]))


async def search_projects(client: Any, params: SearchProjectsParams):
    projects = await client.search_projects(params.query)
    return text_content(ProjectList.validate_python(projects["nodes"]))


async def create_project(client: Any, params: ProjectCreateParams):
    result = await client.create_project(params.model_dump(exclude_none=True))
    return text_content(Project.model_validate(result["project"]))


async def update_project(client: Any, params: ProjectUpdateParams):
    """Apply the supplied fields, then return the project as re-fetched by ID."""
    changes = params.model_dump(exclude={"id"}, exclude_unset=True, exclude_none=True)
    await client.update_project(params.id, changes)
    updated = await client.project(params.id)
    return text_content(Project.model_validate(updated))


PROJECT_TOOLS: List[Tool] = [
    tool(
        name="get_project_by_id",
        title="Get project",
        description="Get a single project by its unique ID.",
        params=GetProjectParams,
        execute=get_project_by_id,
    ),
    tool(
        name="list_projects",
        title="List projects",
        description="List all accessible projects, with optional filters.",
        params=ListProjectsParams,
        execute=list_projects,
    ),
    tool(
        name="search_projects",
        title="Search projects",
        description="Search projects using a query string against name, description, and identifier.",
        params=SearchProjectsParams,
        execute=search_projects,
    ),
    tool(
        name="create_project",
        title="Create project",
        description="Create a new project.",
        params=ProjectCreateParams,
        execute=create_project,
    ),
    tool(
        name="update_project",
        title="Update project",
        description="Update an existing project by its ID and return the updated project.",
        params=ProjectUpdateParams,
        execute=update_project,
    ),
]


def get_tools() -> dict[str, Tool]:
    return {t.name: t for t in PROJECT_TOOLS}
