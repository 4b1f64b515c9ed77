"""Folder Tags MCP Server

Folder-scoped tag propagation for Obsidian vaults via Model Context Protocol.
"""

from folder_tags.config import get_vault_configuration
from folder_tags.data_models import FolderTagSettings, InheritanceMode, VaultMetadata, VaultConfiguration
from folder_tags.session import resolve_vault, set_active_vault, get_active_vault, get_tag_service
from folder_tags.server import mcp, run_server

# Import tools to register them with the MCP server
from folder_tags import tools  # noqa: F401

__version__ = "1.0.0"
__all__ = [
    "get_vault_configuration",
    "FolderTagSettings",
    "InheritanceMode",
    "VaultMetadata",
    "VaultConfiguration",
    "resolve_vault",
    "set_active_vault",
    "get_active_vault",
    "get_tag_service",
    "mcp",
    "run_server",
]
