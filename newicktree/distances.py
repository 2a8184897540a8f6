from typing import List

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from newicktree.tree import Node, Tree


def _branch_sum(path: List[Node], default_length: float) -> float:
    return sum(
        node.length if node.length is not None else default_length for node in path
    )


def patristic_distance(a: Node, b: Node, default_length: float = 0.0) -> float:
    """
    Sum of branch lengths on the path between two nodes of the same tree.

    Args:
        a: First node
        b: Second node
        default_length: Length used for nodes without an explicit branch length

    Returns:
        float: The patristic distance, 0.0 when ``a is b``

    Raises:
        ValueError: If the nodes do not share an ancestor
    """
    lca = a.find_lowest_common_ancestor(b)
    if lca is None:
        raise ValueError(f"{a!r} and {b!r} are not in the same tree")

    # Each node's length is the branch to its parent, so the LCA's own
    # length is never on the path
    return _branch_sum(a.path_to_ancestor(lca), default_length) + _branch_sum(
        b.path_to_ancestor(lca), default_length
    )


def leaf_distance_matrix(tree: Tree, default_length: float = 0.0) -> pd.DataFrame:
    """
    Pairwise patristic distances between all leaves of ``tree``.

    Returns:
        pd.DataFrame: Symmetric matrix indexed by leaf label on both axes
    """
    leaves = tree.leaves
    n = len(leaves)
    matrix: NDArray[np.float64] = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(i + 1, n):
            d = patristic_distance(leaves[i], leaves[j], default_length)
            matrix[i, j] = d
            matrix[j, i] = d

    labels = [leaf.label for leaf in leaves]
    return pd.DataFrame(matrix, index=labels, columns=labels)
