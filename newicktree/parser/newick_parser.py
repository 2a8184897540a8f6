import logging
from dataclasses import dataclass, field
from typing import List, Optional

from newicktree.config import DEFAULT_CONFIG, ParserConfig
from newicktree.exceptions import MalformedTreeError, NumberFormatError
from newicktree.logger import parse_logger
from newicktree.parser.tokenizer import Token, tokenize
from newicktree.tree import Node, Tree

logger = logging.getLogger(__name__)

_NEWLINES = str.maketrans("", "", "\r\n")


# ===================================================================
# 1. PARSER STATE
# ===================================================================


@dataclass
class ParseState:
    """
    Everything the state machine carries between tokens.

    ``stack`` holds the open frames, innermost last. Each frame's node is
    linked into its parent's children as soon as it is pushed, so the frame
    below the top is always the parent of the top.
    """

    config: ParserConfig = DEFAULT_CONFIG
    tree: Tree = field(default_factory=Tree)
    stack: List[Node] = field(default_factory=list)
    quoted: bool = False
    comment: bool = False
    length_pending: bool = False
    finished: bool = False
    # Root created by a top-level ',' (as in "(A,B),C"), closed automatically
    implicit_root: Optional[Node] = None
    position: int = 0

    @property
    def top(self) -> Node:
        return self.stack[-1]


# ===================================================================
# 2. NODE STACK MANAGEMENT FUNCTIONS
# ===================================================================


def ensure_root(state: ParseState, position: int) -> None:
    """Open the top-level frame on the first meaningful token."""
    if state.finished:
        raise MalformedTreeError("Content after the terminating ';'", position)
    if not state.stack:
        state.stack.append(Node())


def create_new_node(state: ParseState, parent: Optional[Node]) -> Node:
    """Push a new frame, linked into ``parent``'s children."""
    node = Node(parent=parent)
    state.stack.append(node)
    return node


def close_node(state: ParseState) -> Node:
    """Pop the innermost frame and append it to the tree in closure order."""
    node = state.stack.pop()
    state.tree.nodes.append(node)
    if not parse_logger.disabled:
        parse_logger.debug(f"closed {node!r} ({len(state.tree)} nodes)")
    return node


def _only_root_open(state: ParseState) -> bool:
    if len(state.stack) == 1:
        return True
    return len(state.stack) == 2 and state.stack[0] is state.implicit_root


def close_tree(state: ParseState) -> None:
    """Close the last open frame, plus the implicit root if there is one."""
    while state.stack:
        close_node(state)
    state.finished = True


# ===================================================================
# 3. SEPARATOR DISPATCH
# ===================================================================


def _require_no_pending_length(state: ParseState, char: str, position: int) -> None:
    if state.length_pending:
        MalformedTreeError.raise_unexpected(
            char, position, "branch length expected after ':'"
        )


def dispatch_separator(state: ParseState, char: str, position: int) -> None:
    """Apply the structural meaning of one separator outside quotes and comments."""
    ensure_root(state, position)
    top = state.top

    if char == "(":
        _require_no_pending_length(state, char, position)
        if top.label or top.length is not None or top.children:
            MalformedTreeError.raise_unexpected(
                char, position, "a node's children must come before its label"
            )
        create_new_node(state, parent=top)

    elif char == ")":
        _require_no_pending_length(state, char, position)
        if len(state.stack) < 2 or state.stack[-2] is state.implicit_root:
            MalformedTreeError.raise_unexpected(char, position, "no matching '('")
        close_node(state)

    elif char == ",":
        _require_no_pending_length(state, char, position)
        closed = close_node(state)
        parent = closed.parent
        if parent is None:
            # Top-level comma: wrap everything so far in a new root
            parent = Node()
            parent.append_child(closed)
            state.stack.append(parent)
            state.implicit_root = parent
        create_new_node(state, parent=parent)

    elif char == ";":
        _require_no_pending_length(state, char, position)
        if not _only_root_open(state):
            MalformedTreeError.raise_unexpected(char, position, "unclosed '('")
        close_tree(state)

    elif char == ":":
        _require_no_pending_length(state, char, position)
        if top.length is not None:
            MalformedTreeError.raise_unexpected(
                char, position, "node already has a branch length"
            )
        state.length_pending = True

    elif char == "'":
        _require_no_pending_length(state, char, position)
        if top.length is not None:
            MalformedTreeError.raise_unexpected(
                char, position, "label after branch length"
            )
        state.quoted = True

    elif char == "[":
        state.comment = True

    elif char == "]":
        MalformedTreeError.raise_unexpected(char, position, "no matching '['")


def consume_separators(state: ParseState, token: Token) -> None:
    """
    Walk a separator run character by character.

    Priority: an open comment swallows everything but ']', an open quoted
    label swallows everything but "'", and only then do separators keep
    their structural meaning.
    """
    seps = token.text
    index = 0
    while index < len(seps):
        char = seps[index]
        position = token.offset + index

        if state.comment and char != "]":
            state.top.comment += char
        elif state.quoted and char != "'":
            state.top.label += char
        elif state.quoted:
            if seps[index + 1 : index + 2] == "'":
                # '' inside a quoted label is a literal quote
                state.top.label += "'"
                index += 1
            else:
                state.quoted = False
        elif state.comment:
            state.comment = False
        else:
            dispatch_separator(state, char, position)
        index += 1


# ===================================================================
# 4. VALUE PROCESSING
# ===================================================================


def parse_length(text: str, position: int) -> float:
    """
    Parse a branch length.

    Raises:
        NumberFormatError: If ``text`` is not a valid float
    """
    # float() would accept digit separators such as "1_0"
    if "_" not in text:
        try:
            return float(text)
        except ValueError:
            pass
    logger.debug("Invalid branch length %r at %d", text, position)
    raise NumberFormatError(f"Invalid branch length {text!r} (at position {position})")


def consume_value(state: ParseState, token: Token) -> None:
    """Route a value run to the current node's comment, length or label."""
    if state.comment:
        state.top.comment += token.text.translate(_NEWLINES)
        return
    if state.quoted:
        state.top.label += token.text.translate(_NEWLINES)
        return

    value = "".join(c for c in token.text if not c.isspace())
    if not value:
        return
    ensure_root(state, token.offset)

    if state.length_pending:
        state.top.length = parse_length(value, token.offset)
        state.length_pending = False
        return

    if state.top.length is not None:
        raise MalformedTreeError(
            f"Label text {value!r} after branch length", token.offset
        )
    if state.config.underscore_to_space:
        value = value.replace("_", " ")
    state.top.label += value


# ===================================================================
# 5. CORE PARSING FUNCTIONS
# ===================================================================


def finish(state: ParseState) -> Tree:
    """Validate the state at end of input and close a single unterminated root."""
    if state.quoted:
        raise MalformedTreeError("Unterminated quoted label", state.position)
    if state.comment:
        raise MalformedTreeError("Unterminated comment", state.position)
    if state.length_pending:
        raise MalformedTreeError("Missing branch length after ':'", state.position)

    if state.stack:
        if not _only_root_open(state):
            raise MalformedTreeError("Unclosed '('", state.position)
        close_tree(state)
    return state.tree


def _parse_newick(text: str, config: ParserConfig) -> Tree:
    state = ParseState(config=config)

    for token in tokenize(text):
        if not parse_logger.disabled:
            parse_logger.debug(
                f"{token.offset}: {'sep' if token.is_separator else 'value'} "
                f"{token.text!r} (open frames: {len(state.stack)})"
            )
        if token.is_separator:
            consume_separators(state, token)
        else:
            consume_value(state, token)
        state.position = token.offset + len(token.text)

    return finish(state)


# ===================================================================
# 6. PUBLIC API FUNCTIONS
# ===================================================================


def parse_newick(text: str, config: Optional[ParserConfig] = None) -> Tree:
    """
    Parse a single Newick tree.

    The trailing ';' is optional. Empty or blank input gives an empty Tree.

    Args:
        text: Newick format string
        config: Parser settings, defaults to ParserConfig()

    Returns:
        Tree with every node in closure order (root last)

    Raises:
        NumberFormatError: If a branch length is not a valid float
        MalformedTreeError: If the separators do not form a single tree
    """
    config = config or DEFAULT_CONFIG

    was_disabled = parse_logger.disabled
    if config.trace:
        parse_logger.disabled = False
        parse_logger.section("parse_newick")
    try:
        tree = _parse_newick(text, config)
    except MalformedTreeError as e:
        logger.debug("Malformed Newick input: %s", e)
        raise
    finally:
        # Restore previous behavior to avoid leaking state across calls
        parse_logger.disabled = was_disabled

    logger.debug("Parsed tree with %d nodes", len(tree))
    return tree
