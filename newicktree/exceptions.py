"""
Custom exceptions for Newick parsing and tree lookups.
"""

from __future__ import annotations
from typing import NoReturn, Optional


class NewickError(Exception):
    """Base exception for all newicktree errors."""

    pass


class NumberFormatError(NewickError, ValueError):
    """Raised when the text after a ':' is not a valid branch length."""

    pass


class NotFoundError(NewickError, KeyError):
    """Raised when a label lookup finds no matching node."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class MalformedTreeError(NewickError, ValueError):
    """Raised when the separators of a Newick string do not form a valid tree."""

    def __init__(self, message: str, position: Optional[int] = None):
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
        self.position = position

    @staticmethod
    def raise_unexpected(char: str, position: int, reason: str) -> NoReturn:
        """
        Raise a MalformedTreeError for a separator that is not valid in the current state.

        Args:
            char: The offending separator character
            position: Character offset of the separator in the input
            reason: Short description of the parser state

        Raises:
            MalformedTreeError: Always
        """
        raise MalformedTreeError(f"Unexpected {char!r}: {reason}", position)
