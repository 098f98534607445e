# tools package for MCP server tools
# Modules in this package should expose a `get_tools() -> dict[str, Tool]` (see linear_mcp.core.tool).
# Server will dynamically import modules from this directory and register returned tools with FastMCP.
__all__ = []
