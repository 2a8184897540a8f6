from __future__ import annotations
import json
import weakref
from typing import Any, Dict, Iterator, List, Optional, Union

try:
    from typing import Self
except ImportError:
    from typing_extensions import Self

from newicktree.exceptions import NotFoundError


class Node:
    """
    Tree node with a compact memory layout using __slots__.

    ``parent`` is a weak back-reference: a node is kept alive by its parent's
    ``children`` list (and by the owning Tree), never by its children.
    """

    __slots__ = (
        "children",
        "label",
        "comment",
        "length",
        "_parent_ref",
        "__weakref__",
    )

    children: List[Self]
    label: str
    comment: str
    length: Optional[float]

    def __init__(
        self,
        label: str = "",
        length: Optional[float] = None,
        comment: str = "",
        children: Optional[List[Self]] = None,
        parent: Optional[Self] = None,
    ):
        self.label = label
        self.length = length
        self.comment = comment
        self._parent_ref: Optional[weakref.ReferenceType[Self]] = None
        self.children = []
        for child in children or ():
            self.append_child(child)
        if parent is not None:
            parent.append_child(self)

    @property
    def parent(self) -> Optional[Self]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, node: Optional[Self]) -> None:
        self._parent_ref = weakref.ref(node) if node is not None else None

    def __repr__(self) -> str:
        return f"Node('{self.label}')"

    def __str__(self) -> str:
        return self.to_newick()

    def append_child(self, node: Self) -> None:
        """Append ``node`` as the last child and point its parent back here."""
        self.children.append(node)
        node.parent = self

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def is_internal(self) -> bool:
        return bool(self.children)

    def get_root(self) -> Self:
        cur = self
        while cur.parent is not None:
            cur = cur.parent
        return cur

    @property
    def leaves(self) -> List[Self]:
        """
        Get all leaf nodes in the subtree rooted at this node, left to right.

        Returns:
            List[Node]: List of all leaf nodes in this subtree.
        """
        leaves: List[Self] = []
        stack: List[Self] = [self]
        while stack:
            current = stack.pop()
            if not current.children:
                leaves.append(current)
            # Reverse so the leftmost child is popped first
            stack.extend(reversed(current.children))
        return leaves

    # ------------------------------------------------------------------------
    # traversal
    # ------------------------------------------------------------------------

    def traverse_bf(self) -> Iterator[Self]:
        from newicktree.traversal import traverse_bf

        return traverse_bf(self)

    def traverse_df(self) -> Iterator[Self]:
        from newicktree.traversal import traverse_df

        return traverse_df(self)

    # ------------------------------------------------------------------------
    # ancestry
    # ------------------------------------------------------------------------

    def find_lowest_common_ancestor(self, other: Self) -> Optional[Self]:
        """
        Find the lowest common ancestor (LCA) of this node and another node.

        Args:
            other: The other node to find LCA with

        Returns:
            Node representing the LCA, or None if the nodes are in different trees
        """
        if self is other:
            return self

        self_ancestors: set[int] = set()
        current: Optional[Self] = self
        while current is not None:
            self_ancestors.add(id(current))
            current = current.parent

        current = other
        while current is not None:
            if id(current) in self_ancestors:
                return current
            current = current.parent

        return None

    def path_to_ancestor(self, ancestor: Self) -> List[Self]:
        """
        Get the path from this node up to (but excluding) the specified ancestor.

        Args:
            ancestor: The target ancestor node

        Returns:
            List[Node] from self up to (excluding) ancestor, empty if ancestor not found
        """
        path: List[Self] = []
        current: Optional[Self] = self

        while current is not None and current is not ancestor:
            path.append(current)
            current = current.parent

        return path if current is ancestor else []

    # ------------------------------------------------------------------------
    # serialization
    # ------------------------------------------------------------------------

    def to_newick(self) -> str:
        """
        Render the subtree rooted at this node as Newick text, without the trailing ';'.

        Leaves render as ``label[:length]``, internal nodes as
        ``(child,child,...)label[:length]``. Works with an explicit stack so
        arbitrarily deep trees do not hit the recursion limit.
        """
        rendered: Dict[int, str] = {}
        stack: List[tuple[Node, bool]] = [(self, False)]

        while stack:
            node, expanded = stack.pop()
            if node.children and not expanded:
                stack.append((node, True))
                for child in reversed(node.children):
                    stack.append((child, False))
                continue

            text = node.label
            if node.children:
                joined = ",".join(rendered.pop(id(ch)) for ch in node.children)
                text = f"({joined}){text}"
            if node.length is not None:
                text = f"{text}:{node.length}"
            rendered[id(node)] = text

        return rendered[id(self)]

    def to_dict(self) -> Dict[str, Any]:
        """Nested dict of the subtree, built iteratively."""

        def _fields(node: Node) -> Dict[str, Any]:
            return {
                "label": node.label,
                "length": node.length,
                "comment": node.comment,
                "children": [],
            }

        root = _fields(self)
        stack = [(self, root)]
        while stack:
            node, serialized = stack.pop()
            for child in node.children:
                child_serialized = _fields(child)
                serialized["children"].append(child_serialized)
                stack.append((child, child_serialized))
        return root

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)


class Tree:
    """
    All nodes of one parsed Newick tree, in closure order.

    A node is appended the moment its own subtree is complete, so leaves come
    before their ancestors and ``nodes[-1]`` is the root.
    """

    def __init__(self, nodes: Optional[List[Node]] = None):
        self.nodes: List[Node] = list(nodes) if nodes is not None else []

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __getitem__(self, label: str) -> Node:
        """Return the first node (in closure order) whose label is ``label``."""
        for node in self.nodes:
            if node.label == label:
                return node
        raise NotFoundError(f"No node labelled {label!r} in tree")

    def __contains__(self, label: object) -> bool:
        return any(node.label == label for node in self.nodes)

    def __repr__(self) -> str:
        return f"Tree({len(self.nodes)} nodes)"

    def __str__(self) -> str:
        return self.to_newick()

    @property
    def root(self) -> Optional[Node]:
        return self.nodes[-1] if self.nodes else None

    @property
    def leaves(self) -> List[Node]:
        return self.root.leaves if self.root is not None else []

    @property
    def labels(self) -> List[str]:
        return [node.label for node in self.nodes]

    def to_newick(self) -> str:
        if not self.nodes:
            return ""
        return self.nodes[-1].to_newick() + ";"

    def to_dict(self) -> Dict[str, Any]:
        return self.root.to_dict() if self.root is not None else {}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4)


def render(item: Union[Node, Tree]) -> str:
    """Newick text for a node (no ';') or a whole tree (with ';', '' when empty)."""
    return item.to_newick()
