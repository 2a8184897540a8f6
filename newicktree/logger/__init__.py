"""Logging package for newicktree."""

from newicktree.logger.base_logger import ParseLogger

# Shared trace logger for the parse state machine
parse_logger = ParseLogger("newicktree.trace")
parse_logger.disabled = True

__all__ = [
    "ParseLogger",
    "parse_logger",
]
