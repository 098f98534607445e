"""Tool definition shared by every module in ``linear_mcp.tools``.

A tool pairs a pydantic parameter model with an async ``execute(client, params)``
function. The client is whatever object the server injects; tools only rely on
the coroutine names they call on it.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp.types import TextContent
from pydantic import BaseModel

Execute = Callable[[Any, Any], Awaitable[List[TextContent]]]


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    params: Type[BaseModel]
    execute: Execute
    title: Optional[str] = None

    async def run(self, client: Any, arguments: Dict[str, Any]) -> List[TextContent]:
        """Validate raw arguments against ``params`` and execute.

        Raises ``pydantic.ValidationError`` listing every invalid field.
        """
        params = self.params.model_validate(arguments)
        return await self.execute(client, params)


def tool(
    name: str,
    description: str,
    params: Type[BaseModel],
    execute: Execute,
    title: Optional[str] = None,
) -> Tool:
    return Tool(
        name=name,
        description=description,
        params=params,
        execute=execute,
        title=title or name.replace("_", " ").capitalize(),
    )
