"""Configuration for the settings policy.

``extra_blocked`` may be written as a TOML list or as one comma-separated
string; both add subcategories to the built-in deny-list.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

import rebracer.config

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@rebracer.config.configurable("policy")
@dataclasses.dataclass
class PolicyConfig:
    extra_blocked: Any = dataclasses.field(default_factory=list)
    log_level: str = "WARNING"


def split_names(raw: Any) -> list[str]:
    """Normalize an ``extra_blocked`` value to a list of subcategory names.

    Raises ``ValueError`` for anything but a string or a list of strings.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = list(raw)
        bad = [item for item in items if not isinstance(item, str)]
        if bad:
            raise ValueError(
                f"policy.extra_blocked entries must be strings, got {bad[0]!r}"
            )
    else:
        raise ValueError(
            "policy.extra_blocked must be a list of names or a comma-separated "
            f"string, got {type(raw).__name__}"
        )
    return [name.strip() for name in items if name.strip()]


def log_level(raw: Any) -> int:
    name = str(raw).strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(
            f"policy.log_level must be one of {', '.join(LOG_LEVELS)}, got {raw!r}"
        )
    return logging.getLevelName(name)


def parse_value(key: str, text: str) -> Any:
    """Turn command-line *text* into the value stored for ``policy.key``."""
    if key == "extra_blocked":
        return split_names(text)
    if key == "log_level":
        log_level(text)
        return text.strip().upper()
    raise KeyError(f"Unknown key: policy.{key}")
