#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/ast/utils.py
"""Utility functions for working with AST nodes.

This module provides the descendant locator used by the spacing transform to
find the leaves touching a boundary between two siblings, plus small helpers for
leaf iteration and text extraction.

Functions
---------
first_leaf : Leaf reached by descending into first children
last_leaf : Leaf reached by descending into last children
iter_leaves : Iterate over all leaves in document order
count_leaves : Count leaves below a node
extract_text : Extract plain text from a node or list of nodes

Examples
--------
Locate the leaves around a markup boundary:

    >>> from cjkfmt.ast import Paragraph, Strong, Text
    >>> from cjkfmt.ast.utils import first_leaf, last_leaf
    >>>
    >>> strong = Strong(content=[Text(content="AB"), Text(content="CD")])
    >>> last_leaf(strong).content
    'CD'
    >>> first_leaf(Paragraph(content=[strong])).content
    'AB'

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Union

from cjkfmt.ast.nodes import Text, get_node_children, is_container
from cjkfmt.exceptions import EmptyContainerError

if TYPE_CHECKING:
    from cjkfmt.ast.nodes import Node


def first_leaf(node: Node) -> Node:
    """Return the first leaf reached by repeatedly descending into first children.

    Parameters
    ----------
    node : Node
        Starting node. A leaf is returned unchanged.

    Returns
    -------
    Node
        The leftmost leaf below ``node``

    Raises
    ------
    EmptyContainerError
        If a container with no children lies on the descent path

    """
    current = node
    while is_container(current):
        children = get_node_children(current)
        if not children:
            raise EmptyContainerError(type(current).__name__, direction="first")
        current = children[0]
    return current


def last_leaf(node: Node) -> Node:
    """Return the last leaf reached by repeatedly descending into last children.

    See Also
    --------
    first_leaf : The mirror-image descent

    """
    current = node
    while is_container(current):
        children = get_node_children(current)
        if not children:
            raise EmptyContainerError(type(current).__name__, direction="last")
        current = children[-1]
    return current


def iter_leaves(node: Node) -> Iterator[Node]:
    """Yield every leaf below ``node`` in document order.

    Empty containers contribute nothing.

    """
    if not is_container(node):
        yield node
        return
    for child in get_node_children(node):
        yield from iter_leaves(child)


def count_leaves(node: Node) -> int:
    """Count the leaves below ``node``."""
    return sum(1 for _ in iter_leaves(node))


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "") -> str:
    """Extract plain text from a node or list of nodes.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = ""
        String placed between text parts. The default keeps the exact text of
        adjacent runs, which is what spacing checks need.

    Returns
    -------
    str
        Concatenated content of all Text nodes

    Examples
    --------
        >>> from cjkfmt.ast import Paragraph, Strong, Text
        >>> para = Paragraph(content=[Strong(content=[Text(content="AB")]), Text(content=" 你好")])
        >>> extract_text(para)
        'AB 你好'

    """
    if isinstance(node_or_nodes, list):
        text_parts = []
        for node in node_or_nodes:
            extracted = extract_text(node, joiner=joiner)
            if extracted:
                text_parts.append(extracted)
        return joiner.join(text_parts)

    node = node_or_nodes
    if isinstance(node, Text):
        return node.content

    text_parts = []
    for child in get_node_children(node):
        extracted = extract_text(child, joiner=joiner)
        if extracted:
            text_parts.append(extracted)

    return joiner.join(text_parts)


__all__ = [
    "count_leaves",
    "extract_text",
    "first_leaf",
    "iter_leaves",
    "last_leaf",
]
