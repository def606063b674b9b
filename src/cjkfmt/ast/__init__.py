#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/ast/__init__.py
"""Abstract Syntax Tree (AST) module for document representation.

The markdown parser produces a tree of these nodes, the spacing transform
rewrites it in place, and the markdown renderer serializes it back.

- nodes: AST node classes and node family tuples
- visitors: Visitor base class with one abstract method per node class
- utils: Descendant locator and leaf helpers

Examples
--------
    >>> from cjkfmt.ast import Document, Paragraph, Text
    >>> from cjkfmt.renderers.markdown import MarkdownRenderer
    >>>
    >>> doc = Document(children=[Paragraph(content=[Text(content="Hello world")])])
    >>> MarkdownRenderer().render_to_string(doc)
    'Hello world\\n'

"""

from __future__ import annotations

from cjkfmt.ast.nodes import (
    CONTAINER_TYPES,
    INLINE_CONTAINER_TYPES,
    MATH_TYPES,
    OPAQUE_TYPES,
    STRUCTURAL_CONTAINER_TYPES,
    TOKEN_TYPES,
    Alignment,
    BlockQuote,
    Code,
    CodeBlock,
    Definition,
    Document,
    Emphasis,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    ImageReference,
    LineBreak,
    Link,
    LinkReference,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Node,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    get_node_children,
    is_container,
)
from cjkfmt.ast.utils import count_leaves, extract_text, first_leaf, iter_leaves, last_leaf
from cjkfmt.ast.visitors import NodeVisitor

__all__ = [
    # Node families
    "CONTAINER_TYPES",
    "INLINE_CONTAINER_TYPES",
    "MATH_TYPES",
    "OPAQUE_TYPES",
    "STRUCTURAL_CONTAINER_TYPES",
    "TOKEN_TYPES",
    # Nodes
    "Alignment",
    "BlockQuote",
    "Code",
    "CodeBlock",
    "Definition",
    "Document",
    "Emphasis",
    "FootnoteDefinition",
    "FootnoteReference",
    "Heading",
    "HTMLBlock",
    "HTMLInline",
    "Image",
    "ImageReference",
    "LineBreak",
    "Link",
    "LinkReference",
    "List",
    "ListItem",
    "MathBlock",
    "MathInline",
    "Node",
    "Paragraph",
    "Strikethrough",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "ThematicBreak",
    # Helpers
    "count_leaves",
    "extract_text",
    "first_leaf",
    "get_node_children",
    "is_container",
    "iter_leaves",
    "last_leaf",
    # Visitors
    "NodeVisitor",
]
