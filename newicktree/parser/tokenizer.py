"""
Split a Newick string into separator runs and value runs.
"""

from itertools import groupby
from typing import FrozenSet, Iterator, NamedTuple

SEPARATORS: FrozenSet[str] = frozenset("(),:;'[]")


class Token(NamedTuple):
    text: str
    is_separator: bool
    offset: int


def tokenize(text: str, separators: FrozenSet[str] = SEPARATORS) -> Iterator[Token]:
    """
    Lazily yield the tokens of ``text``.

    A token is either a maximal run of separator characters (e.g. ``"),("``),
    which the consumer is expected to walk character by character, or a
    maximal run of anything else: labels, comment text, branch lengths and
    incidental whitespace. Nothing is interpreted here, so this never fails.

    Args:
        text: Raw Newick string
        separators: Characters with structural meaning

    Yields:
        Token(text, is_separator, offset) in input order
    """
    offset = 0
    for is_separator, run in groupby(text, key=separators.__contains__):
        chunk = "".join(run)
        yield Token(chunk, is_separator, offset)
        offset += len(chunk)
