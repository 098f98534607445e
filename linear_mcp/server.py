from importlib import import_module
import inspect
import pkgutil
import sys
from typing import Annotated, Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, Field

from linear_mcp.core.config import get_config
from linear_mcp.core.linear_client import LinearClient
from linear_mcp.core.logging_config import get_logger, setup_logging
from linear_mcp.core.tool import Tool
import linear_mcp.tools as tools_package

logger = get_logger(__name__)

TOOLS_PACKAGE = tools_package.__name__

###################################################### Tool discovery ######################################################


def discover_tools() -> Dict[str, Tool]:
    """Import every public module in the tools package and collect its `get_tools()` mapping."""
    discovered: Dict[str, Tool] = {}
    for _finder, name, _ispkg in pkgutil.iter_modules(tools_package.__path__):
        if name.startswith("_"):
            continue
        module_name = f"{TOOLS_PACKAGE}.{name}"
        mod = import_module(module_name)
        if not hasattr(mod, "get_tools"):
            logger.warning(f"Module {module_name} has no get_tools(); skipping")
            continue
        logger.info(f"Imported tools module: {module_name}")
        for tool_name, tool in mod.get_tools().items():
            if tool_name in discovered:
                logger.warning(f"Duplicate tool name {tool_name} in {module_name}; skipping")
                continue
            discovered[tool_name] = tool
    return discovered


def _signature_for(params: type[BaseModel]) -> inspect.Signature:
    """Keyword-only signature mirroring the parameter model, so FastMCP advertises the same schema."""
    parameters = []
    for name, info in params.model_fields.items():
        annotation = Annotated[info.annotation, Field(description=info.description)]
        default = inspect.Parameter.empty if info.is_required() else None
        parameters.append(
            inspect.Parameter(name, inspect.Parameter.KEYWORD_ONLY, default=default, annotation=annotation)
        )
    return inspect.Signature(parameters=parameters)


def make_wrapper(tool: Tool, client: Any):
    async def _wrapped(**call_kwargs):
        # FastMCP passes every declared parameter; unset ones arrive as None
        arguments = {k: v for k, v in call_kwargs.items() if v is not None}
        try:
            return await tool.run(client, arguments)
        except Exception:
            logger.exception(f"Tool {tool.name} failed")
            raise

    _wrapped.__signature__ = _signature_for(tool.params)
    _wrapped.__name__ = tool.name
    _wrapped.__doc__ = tool.description
    return _wrapped


###################################################### Server ######################################################


def build_server(client: Any = None, config: Optional[Dict[str, Any]] = None) -> FastMCP:
    cfg = config if config is not None else get_config()
    if client is None:
        client = LinearClient.from_config(cfg)

    mcp = FastMCP(cfg.get("server_name") or "linear")
    logger.info("MCP server instance created: %s", cfg.get("server_name"))

    registered_tool_names: list[str] = []
    for tool_name, tool in discover_tools().items():
        mcp.add_tool(
            make_wrapper(tool, client),
            name=tool_name,
            title=tool.title,
            description=tool.description,
            structured_output=False,
        )
        registered_tool_names.append(tool_name)
        logger.info(f"Added tool: {tool_name} (title={tool.title})")
    logger.info(f"Total tools registered: {len(registered_tool_names)} , tool names: {registered_tool_names}")
    return mcp


def main() -> None:
    cfg = get_config()
    setup_logging(cfg.get("log_dir"), level=cfg.get("log_level", "INFO"))
    logger.info("MCP server bootstrap starting.")
    mcp = build_server(config=cfg)
    logger.info("Starting MCP server...")
    try:
        mcp.run(transport="stdio")
        logger.info("MCP server shut down.")
    except Exception:
        logger.exception("Unhandled exception running MCP server")
        print("Unhandled exception occurred. See the server log for details.", file=sys.stderr)
        sys.exit(-1)


if __name__ == "__main__":
    main()
