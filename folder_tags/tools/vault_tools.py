"""MCP tools for vault management and folder tag settings."""

import logging
from typing import Any
from mcp.server.fastmcp import Context

from folder_tags.server import mcp
from folder_tags.models import (
    ListVaultsInput,
    SetActiveVaultInput,
    GetTagSettingsInput,
    UpdateTagSettingsInput,
)
from folder_tags.config import get_vault_configuration
from folder_tags.session import (
    set_active_vault as set_active_vault_session,
    get_active_vault,
    get_session_key,
    get_tag_service,
    resolve_vault,
)

logger = logging.getLogger(__name__)


@mcp.tool()
async def list_vaults(
    input: ListVaultsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List configured Obsidian vaults and current session state.

    Returns:
        {
            "default": str,    # System default vault name
            "active": str,     # Currently active vault (or None)
            "vaults": [
                {
                    "name": str,
                    "path": str,
                    "description": str,
                    "exists": bool
                }
            ]
        }

    Error Handling:
        - Config file missing → Error with expected config path
        - Invalid config format → Error describing expected YAML structure
    """
    configuration = get_vault_configuration()
    active = None
    if ctx is not None:
        try:
            active = get_active_vault(ctx).name
        except ValueError:
            active = None

    payload = configuration.as_payload()
    payload["active"] = active
    return payload


@mcp.tool()
async def set_active_vault(
    input: SetActiveVaultInput,
    ctx: Context,
) -> dict[str, Any]:
    """Set the active vault for this conversation session.

    All subsequent tool calls that omit the vault parameter will use the
    active vault.

    Returns:
        {"vault": str, "path": str, "status": "active"}

    Error Handling:
        - Unknown vault → Error listing available vaults, suggest list_vaults()
    """
    metadata = set_active_vault_session(ctx, input.vault)
    logger.info("Active vault for session %s set to '%s'", get_session_key(ctx), metadata.name)
    return {
        "vault": metadata.name,
        "path": str(metadata.path),
        "status": "active",
    }


@mcp.tool()
async def get_tag_settings(
    input: GetTagSettingsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Get the folder tag settings of a vault.

    Returns:
        {
            "vault": str,
            "settings": {
                "inheritance_mode": "none" | "immediate" | "all",
                "excluded_folders": list[str],
                "auto_apply_tags": bool,
                "use_front_matter": bool,
                "show_new_folder_modal": bool,
                "debug_mode": bool
            }
        }
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return {"vault": metadata.name, "settings": service.get_settings()}


@mcp.tool()
async def update_tag_settings(
    input: UpdateTagSettingsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Change folder tag settings; omitted fields keep their value.

    Changes are saved to the vault's ``.folder-tags.yaml`` right away.

    Returns:
        {"vault": str, "settings": {...}, "status": "updated" | "unchanged"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    changes = input.changes()
    if not changes:
        return {"vault": metadata.name, "settings": service.get_settings(), "status": "unchanged"}
    return service.update_settings(**changes)
