"""Configuration for Newick parsing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool) -> bool:
    return os.environ.get(name, "1" if default else "0") == "1"


@dataclass(frozen=True)
class ParserConfig:
    """Parser settings."""

    # Newick munging: unquoted "_" stands for a blank
    underscore_to_space: bool = True
    # Feed every token to newicktree.logger.parse_logger
    trace: bool = False

    @classmethod
    def from_env(cls) -> ParserConfig:
        return cls(
            underscore_to_space=_env_flag("NEWICK_UNDERSCORE_TO_SPACE", True),
            trace=_env_flag("NEWICK_TRACE", False),
        )


DEFAULT_CONFIG = ParserConfig()


def configure_logging(level: str | None = None) -> None:
    """Set the level of the ``newicktree`` logger hierarchy (LOG_LEVEL, default WARNING)."""
    level = level or os.environ.get("LOG_LEVEL", "WARNING")
    logging.getLogger("newicktree").setLevel(level.upper())
