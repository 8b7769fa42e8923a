from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper for every engine entry point: merges caller options over the
defaults, coerces loosely typed values coming from the CLI or JSON files
and reports what it had to correct.
"""

import logging
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from contexter.domain.config import get_default_config
from contexter.domain.constants import COLLISION_POLICIES

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize an options dictionary.

    Args:
        config: Raw options (usually a partial dictionary, or None).
        strict: If True, raise on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized options and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if config is None:
        return defaults, warnings

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    bool_fields = [
        "text_only", "hide_empty_folders", "show_token_count", "include_path_headers",
    ]
    list_fields = ["include_patterns", "exclude_patterns"]

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in list_fields:
        merged[field] = _as_list_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["max_file_size"] = _as_size_limit(
        merged.get("max_file_size"), defaults["max_file_size"], warnings, strict
    )
    merged["binary_control_ratio"] = _as_ratio(
        merged.get("binary_control_ratio"), defaults["binary_control_ratio"],
        "binary_control_ratio", warnings, strict
    )
    merged["collision_policy"] = _as_choice(
        merged.get("collision_policy"), defaults["collision_policy"],
        COLLISION_POLICIES, "collision_policy", warnings, strict
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of non-empty strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_size_limit(value: Any, fallback: int, warnings: List[str], strict: bool) -> Optional[int]:
    """Accept a non-negative byte count; 0 or None disables the limit."""
    field = "max_file_size"
    if value is None:
        return None

    if isinstance(value, str) and not strict:
        try:
            coerced = int(value.strip())
        except ValueError:
            coerced = None
        if coerced is not None:
            warnings.append(f"Field '{field}' converted from '{value}' to {coerced}.")
            value = coerced

    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            msg = f"Invalid field '{field}': negative size {value}."
            if strict:
                raise ValueError(msg)
            warnings.append(f"{msg} Using fallback.")
            return fallback
        return value or None

    msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_ratio(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    """Accept a float within [0, 1]."""
    if value is None:
        return fallback

    if isinstance(value, str) and not strict:
        try:
            value = float(value.strip())
        except ValueError:
            pass

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if 0.0 <= float(value) <= 1.0:
            return float(value)
        msg = f"Invalid field '{field}': {value} is outside [0, 1]."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    msg = f"Invalid field '{field}': expected float, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_choice(
        value: Any,
        fallback: str,
        choices: FrozenSet[str],
        field: str,
        warnings: List[str],
        strict: bool,
) -> str:
    """Accept one of a fixed set of lowercase keywords."""
    if value is None:
        return fallback
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()

    msg = f"Invalid field '{field}': {value!r} is not one of {sorted(choices)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
