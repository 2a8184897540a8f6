"""
Newick format parser module for phylogenetic trees.

This module turns Newick strings into Tree objects by running a token
stream through an explicit-stack state machine.
"""

from .tokenizer import SEPARATORS, Token, tokenize
from .newick_parser import (
    ParseState,
    parse_newick,
    parse_length,
    consume_separators,
    consume_value,
    dispatch_separator,
    create_new_node,
    close_node,
    finish,
)

__all__ = [
    "SEPARATORS",
    "Token",
    "tokenize",
    "ParseState",
    "parse_newick",
    "parse_length",
    "consume_separators",
    "consume_value",
    "dispatch_separator",
    "create_new_node",
    "close_node",
    "finish",
]
