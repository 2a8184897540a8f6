"""
Lazy breadth-first and depth-first walks over a node and its descendants.

Both functions only rely on ``children``, so they accept any Node, not just
a root, and never touch the weak ``parent`` links.
"""

from __future__ import annotations
from collections import deque
from typing import TYPE_CHECKING, Deque, Iterator

if TYPE_CHECKING:
    from newicktree.tree import Node


def traverse_bf(start: Node) -> Iterator[Node]:
    """
    Yield ``start`` and its descendants level by level.

    Children are visited in declaration order, e.g. for
    ``((A1,A2)B,(C,D)E)F;`` starting at F: F, B, E, A1, A2, C, D.
    """
    queue: Deque[Node] = deque([start])
    while queue:
        node = queue.popleft()
        yield node
        queue.extend(node.children)


def traverse_df(start: Node) -> Iterator[Node]:
    """
    Yield ``start`` and its descendants depth first.

    The deque is used as a stack from the front and children are pushed in
    declaration order, so sibling subtrees come out last child first:
    for ``((A1,A2)B,(C,D)E)F;`` starting at F: F, E, D, C, B, A2, A1.
    """
    stack: Deque[Node] = deque([start])
    while stack:
        node = stack.popleft()
        yield node
        stack.extendleft(node.children)
