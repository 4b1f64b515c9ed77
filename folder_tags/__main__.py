"""Run the Folder Tags MCP server with ``python -m folder_tags``."""

from folder_tags import run_server

run_server()
