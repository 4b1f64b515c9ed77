"""MCP tool definitions for folder tag operations.

This module imports all tool submodules to register them with the MCP server.
Each tool module uses the @mcp.tool() decorator to auto-register its tools.
"""

# Import all tool modules to register their @mcp.tool() decorated functions
from folder_tags.tools import vault_tools
from folder_tags.tools import folder_tools
from folder_tags.tools import note_tag_tools
from folder_tags.tools import content_tools

__all__ = [
    "vault_tools",
    "folder_tools",
    "note_tag_tools",
    "content_tools",
]
