from __future__ import annotations

"""
Configuration Domain Management.

Provides the default option set shared by every engine entry point and
read-only loading of JSON override files. Options are plain dictionaries
so they can travel unchanged between the CLI, config files and callers.
"""

import json
import logging
import os
from typing import Any, Dict

from contexter.domain.constants import (
    BINARY_CONTROL_RATIO,
    DEFAULT_MAX_FILE_SIZE,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default option set.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Metadata filtering
        "text_only": True,
        "max_file_size": DEFAULT_MAX_FILE_SIZE,
        "include_patterns": [],
        "exclude_patterns": [],

        # Tree processing
        "hide_empty_folders": True,
        "show_token_count": True,
        "collision_policy": "last",

        # Markdown assembly
        "include_path_headers": True,

        # Text heuristic
        "binary_control_ratio": BINARY_CONTROL_RATIO,
    }


# -----------------------------------------------------------------------------
# File Loading
# -----------------------------------------------------------------------------
def load_config_file(path: str) -> Dict[str, Any]:
    """
    Read option overrides from a JSON file.

    Args:
        path: Path to a JSON document containing an object.

    Returns:
        Dict[str, Any]: The overrides, or an empty dict if the file is
                        missing, unreadable or not a JSON object.
    """
    if not path or not os.path.exists(path):
        logger.debug(f"Config file not found: {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config '{path}': {e}. Using defaults.")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Config file '{path}' does not contain an object. Ignoring it.")
        return {}

    return data
