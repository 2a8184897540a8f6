import json
import logging
from typing import IO, Any, Iterator, List, Optional, Union

from newicktree.config import ParserConfig
from newicktree.exceptions import NewickError
from newicktree.parser.newick_parser import parse_newick
from newicktree.parser.tokenizer import tokenize
from newicktree.tree import Node, Tree

logger = logging.getLogger(__name__)


class TreeEncoder(json.JSONEncoder):
    def default(self, o: Any):
        if isinstance(o, Tree):
            return o.to_dict()
        if isinstance(o, Node):
            return o.to_dict()
        return super().default(o)


def dump_json(tree: Union[Tree, Node], f: IO[str]):
    json.dump(tree, f, cls=TreeEncoder)


def parse_stream(stream: IO[str], config: Optional[ParserConfig] = None) -> Tree:
    """Read the whole text stream, then parse it as one tree."""
    return parse_newick(stream.read(), config=config)


def split_trees(text: str) -> Iterator[str]:
    """
    Yield the source text of each tree in ``text``.

    A tree ends at a ';' that is neither inside a quoted label nor inside a
    comment. Text after the last ';' is yielded as a final tree unless it is
    blank.
    """
    quoted = False
    comment = False
    start = 0

    for token in tokenize(text):
        if not token.is_separator:
            continue
        seps = token.text
        index = 0
        while index < len(seps):
            char = seps[index]
            if comment:
                comment = char != "]"
            elif quoted:
                if char == "'":
                    if seps[index + 1 : index + 2] == "'":
                        index += 1
                    else:
                        quoted = False
            elif char == "'":
                quoted = True
            elif char == "[":
                comment = True
            elif char == ";":
                end = token.offset + index + 1
                chunk = text[start:end]
                start = end
                yield chunk
            index += 1

    rest = text[start:]
    if rest.strip():
        yield rest


def iter_trees(
    source: Union[str, IO[str]],
    errors: str = "raise",
    config: Optional[ParserConfig] = None,
) -> Iterator[Tree]:
    """
    Parse every tree in a string or text stream, one at a time.

    Each tree is parsed independently, so a malformed tree never changes the
    trees yielded before it.

    Args:
        source: Newick text or a text stream holding one or more trees
        errors: "raise" to propagate the first parse error, "skip" to log it
            and continue with the next tree
        config: Parser settings

    Yields:
        One Tree per ';'-terminated tree
    """
    if errors not in ("raise", "skip"):
        raise ValueError(f"errors must be 'raise' or 'skip', got {errors!r}")

    text = source if isinstance(source, str) else source.read()
    for index, chunk in enumerate(split_trees(text)):
        try:
            tree = parse_newick(chunk, config=config)
        except NewickError as e:
            if errors == "raise":
                raise
            logger.warning("Skipping malformed tree #%d: %s", index, e)
            continue
        if len(tree):
            yield tree


def read_trees(
    source: Union[str, IO[str]],
    errors: str = "raise",
    config: Optional[ParserConfig] = None,
) -> List[Tree]:
    return list(iter_trees(source, errors=errors, config=config))
