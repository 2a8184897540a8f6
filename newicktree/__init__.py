"""Newick phylogenetic tree parsing, traversal and rendering."""

from newicktree.exceptions import (
    NewickError,
    NumberFormatError,
    NotFoundError,
    MalformedTreeError,
)
from newicktree.config import ParserConfig
from newicktree.tree import Node, Tree, render
from newicktree.traversal import traverse_bf, traverse_df
from newicktree.parser import parse_newick, tokenize

parse = parse_newick

__all__ = [
    "NewickError",
    "NumberFormatError",
    "NotFoundError",
    "MalformedTreeError",
    "ParserConfig",
    "Node",
    "Tree",
    "render",
    "traverse_bf",
    "traverse_df",
    "parse_newick",
    "parse",
    "tokenize",
]
