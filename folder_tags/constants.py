"""Module-level constants for the folder tags MCP server."""

import os
from pathlib import Path

# Configuration
CONFIG_ENV_VAR = "FOLDER_TAGS_CONFIG"
CONFIG_PATH = Path(os.environ.get(CONFIG_ENV_VAR, Path(__file__).parent.parent / "vaults.yaml"))

# Persisted plugin data (settings + folder tag map), stored at the vault root
DATA_FILE_NAME = ".folder-tags.yaml"
DATA_VERSION = "1.0.0"

# Tag block
FRONTMATTER_DELIMITER = "---"
TAG_KEY = "tags"
NOTE_SUFFIX = ".md"

# Timing (seconds)
MOVE_DEBOUNCE_SECONDS = 0.3
NEW_FOLDER_DRAIN_INTERVAL = 2.0
STARTUP_GRACE_SECONDS = 2.0

# Limits
NEW_FOLDER_QUEUE_LIMIT = 256
INLINE_CONVERSION_LINES = 3

# Logging
LOG_LEVEL = "INFO"
