"""Session state management for active vault selection and tag services."""

import asyncio
import logging
from typing import Dict, Optional
from mcp.server.fastmcp import Context

from folder_tags.config import get_vault_configuration
from folder_tags.core.tag_operations import FolderTagService
from folder_tags.data_models import VaultMetadata

logger = logging.getLogger(__name__)

# Session state storage
_ACTIVE_VAULTS: Dict[int, str] = {}

# One tag service per vault, shared by every session
_TAG_SERVICES: Dict[str, FolderTagService] = {}


def get_session_key(ctx: Context) -> int:
    """Produce a stable per-session key for active vault tracking.

    Args:
        ctx: The request context supplied by FastMCP.

    Returns:
        An integer derived from the underlying session object identity.
    """
    return id(ctx.session)


def set_active_vault(ctx: Context, vault_name: str) -> VaultMetadata:
    """Set the active vault for a client session.

    Args:
        ctx: The request context supplied by FastMCP.
        vault_name: Friendly vault name as defined in ``vaults.yaml``.

    Returns:
        The :class:`VaultMetadata` associated with ``vault_name``.

    Raises:
        ValueError: If ``vault_name`` is not present in the configuration.
    """
    metadata = get_vault_configuration().get(vault_name)
    _ACTIVE_VAULTS[get_session_key(ctx)] = metadata.name
    return metadata


def get_active_vault(ctx: Context) -> VaultMetadata:
    """Retrieve the active vault for a session, falling back to the default."""
    configuration = get_vault_configuration()
    vault_name = _ACTIVE_VAULTS.get(get_session_key(ctx), configuration.default_vault)
    return configuration.get(vault_name)


def resolve_vault(vault: Optional[str], ctx: Optional[Context] = None) -> VaultMetadata:
    """Resolve which vault metadata should be used for an operation.

    Args:
        vault: Optional friendly vault name provided directly by the caller.
        ctx: Optional FastMCP context used to infer the active vault when ``vault``
            is not supplied.

    Returns:
        The resolved :class:`VaultMetadata`.

    Raises:
        ValueError: If the supplied ``vault`` name is not recognized.
    """
    configuration = get_vault_configuration()
    if vault:
        return configuration.get(vault)

    if ctx is not None:
        return get_active_vault(ctx)

    return configuration.get(configuration.default_vault)


def get_tag_service(vault: VaultMetadata) -> FolderTagService:
    """Return the tag service of ``vault``, creating it on first use.

    A new service starts its new-folder drain when called from a running
    event loop (always the case inside a tool call).
    """
    service = _TAG_SERVICES.get(vault.name)
    if service is not None:
        return service

    service = FolderTagService(vault)
    _TAG_SERVICES[vault.name] = service
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop; tag service for '%s' not started", vault.name)
    else:
        service.start()
    return service


def reset_tag_services() -> None:
    """Stop and forget every tag service."""
    for service in _TAG_SERVICES.values():
        service.stop()
    _TAG_SERVICES.clear()
