import numpy as np
import pandas as pd
import pytest

from newicktree.distances import leaf_distance_matrix, patristic_distance
from newicktree.parser.newick_parser import parse_newick

TREE = "((A:1,B:2)AB:1,C:4)root;"


def test_patristic_distance_between_leaves():
    tree = parse_newick(TREE)
    assert patristic_distance(tree["A"], tree["B"]) == 3.0
    assert patristic_distance(tree["A"], tree["C"]) == 6.0
    assert patristic_distance(tree["C"], tree["B"]) == 7.0


def test_patristic_distance_to_ancestor_and_self():
    tree = parse_newick(TREE)
    assert patristic_distance(tree["A"], tree["root"]) == 2.0
    assert patristic_distance(tree["A"], tree["A"]) == 0.0


def test_missing_lengths_use_default():
    tree = parse_newick("((A,B:2)AB,C)root;")
    assert patristic_distance(tree["A"], tree["C"]) == 0.0
    assert patristic_distance(tree["A"], tree["C"], default_length=1.0) == 3.0
    assert patristic_distance(tree["B"], tree["C"], default_length=1.0) == 4.0


def test_nodes_from_different_trees():
    first = parse_newick(TREE)
    second = parse_newick(TREE)
    with pytest.raises(ValueError):
        patristic_distance(first["A"], second["A"])


def test_leaf_distance_matrix():
    tree = parse_newick(TREE)
    df = leaf_distance_matrix(tree)

    assert isinstance(df, pd.DataFrame)
    assert list(df.index) == ["A", "B", "C"]
    assert list(df.columns) == ["A", "B", "C"]
    expected = np.array(
        [
            [0.0, 3.0, 6.0],
            [3.0, 0.0, 7.0],
            [6.0, 7.0, 0.0],
        ]
    )
    np.testing.assert_allclose(df.to_numpy(), expected)
    assert df.loc["B", "C"] == 7.0


def test_leaf_distance_matrix_of_empty_tree():
    df = leaf_distance_matrix(parse_newick(""))
    assert df.shape == (0, 0)
