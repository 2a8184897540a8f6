import io
import json
import logging
import os

import pytest

from newicktree.exceptions import MalformedTreeError, NumberFormatError
from newicktree.io import (
    dump_json,
    iter_trees,
    parse_stream,
    read_trees,
    split_trees,
)
from newicktree.parser.newick_parser import parse_newick

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")


def open_data(name):
    return open(os.path.join(DATA_DIR, name))


def test_parse_a_file_stream():
    with open_data("mammals.nwk") as f:
        first = next(iter_trees(f))

    labels = [node.label for node in first.nodes]
    comments = [node.comment for node in first.nodes]

    assert len(first) == 8
    # This label is broken by a newline
    assert "Rangifer tarandus" in labels
    # This is a label-like text inside a comment
    assert "Equus ferus caballus" not in labels
    assert "Equus caballus" in labels
    assert "Bos taurus" in labels
    assert "brown bear" in comments
    assert "wild horse; also 'Equus ferus caballus'" in comments
    assert first.root.label == "Mammalia"


def test_read_all_trees_from_file():
    with open_data("mammals.nwk") as f:
        trees = read_trees(f)
    assert [len(tree) for tree in trees] == [8, 5]
    assert trees[1].to_newick() == "((A:1.0,B:2.0)AB:1.0,C:4.0)root;"


def test_parse_stream_reads_everything_first():
    tree = parse_stream(io.StringIO("((A,B)\nC,\nD);\n"))
    assert [node.label for node in tree.nodes] == ["A", "B", "C", "D", ""]


def test_split_trees_respects_quotes_and_comments():
    text = "(A,'B;C');\n(D[x;y],E);\n(F,G)"
    assert list(split_trees(text)) == ["(A,'B;C');", "\n(D[x;y],E);", "\n(F,G)"]


def test_split_trees_handles_escaped_quotes():
    text = "('it''s;fine',B);(C,D);"
    assert list(split_trees(text)) == ["('it''s;fine',B);", "(C,D);"]


def test_split_trees_skips_blank_tail():
    assert list(split_trees("(A,B);\n\n")) == ["(A,B);"]
    assert list(split_trees("")) == []


def test_iter_trees_raises_by_default():
    text = "(A,B);(C,D));(E,F);"
    trees = iter_trees(text)
    assert next(trees).to_newick() == "(A,B);"
    with pytest.raises(MalformedTreeError):
        next(trees)


def test_iter_trees_skip_isolates_failures(caplog):
    text = "(A,B);(C:x,D);(E,F));(G,H);"
    with caplog.at_level(logging.WARNING, logger="newicktree.io"):
        trees = read_trees(text, errors="skip")

    assert [tree.to_newick() for tree in trees] == ["(A,B);", "(G,H);"]
    messages = [record.getMessage() for record in caplog.records]
    assert any("#1" in m for m in messages)
    assert any("#2" in m for m in messages)


def test_iter_trees_number_format_error_propagates():
    with pytest.raises(NumberFormatError):
        read_trees("(A:x,B);")


def test_iter_trees_rejects_unknown_error_mode():
    with pytest.raises(ValueError):
        list(iter_trees("(A,B);", errors="ignore"))


def test_dump_json_tree_and_node():
    tree = parse_newick("(A:0.5,B)C;")

    buffer = io.StringIO()
    dump_json(tree, buffer)
    data = json.loads(buffer.getvalue())
    assert data["label"] == "C"
    assert [child["label"] for child in data["children"]] == ["A", "B"]
    assert data["children"][0]["length"] == 0.5

    buffer = io.StringIO()
    dump_json(tree["A"], buffer)
    assert json.loads(buffer.getvalue())["label"] == "A"


def test_json_export_to_file(tmp_path):
    tree = parse_newick("((A,B)C,D)E;")
    out_path = tmp_path / "tree.json"
    with open(out_path, "w") as f:
        dump_json(tree, f)
    with open(out_path) as f:
        loaded = json.load(f)
    assert loaded == tree.to_dict()
