#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/ast/nodes.py
"""AST node classes for document representation.

This module defines the node hierarchy the spacing formatter operates on. Each
node represents a structural or inline element of a markdown document, and every
node supports the visitor pattern through ``accept``.

Node Families
-------------
The set of node classes is closed; every visitor must handle all of them.

Structural containers (children are only recursed into):
    - Document, BlockQuote, List, Table, TableRow

Inline-bearing containers (consecutive children form spacing boundaries):
    - Heading, Paragraph, ListItem, TableCell
    - Emphasis, Strong, Strikethrough, Link, LinkReference

Leaves:
    - Text (rewritable text run)
    - MathInline, MathBlock (rewritable math source)
    - Code (inline code, never rewritten)
    - Opaque leaves: LineBreak, ThematicBreak, Image, ImageReference, HTMLBlock,
      HTMLInline, CodeBlock, Definition, FootnoteDefinition, FootnoteReference

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

Alignment = Literal["left", "center", "right"]
ReferenceType = Literal["full", "collapsed", "shortcut"]


class Node(ABC):
    """Base class for all AST nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal, transformation and rendering.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node

    """

    metadata: dict[str, Any]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Structural containers
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata. The markdown parser stores the raw frontmatter
        block under ``"frontmatter"`` and its parsed mapping under
        ``"frontmatter_data"``.

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing block-level children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes inside the quote
    metadata : dict, default = empty dict
        Block quote metadata

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """Ordered or unordered list.

    Parameters
    ----------
    items : list of ListItem, default = empty list
        The list items
    ordered : bool, default = False
        Whether the list is numbered
    start : int, default = 1
        First number of an ordered list
    tight : bool, default = True
        Whether items are separated by single newlines (no blank lines)
    bullet : str or None, default = None
        Bullet or delimiter character used in the source, when known
    metadata : dict, default = empty dict
        List metadata

    """

    items: list[ListItem] = field(default_factory=list)
    ordered: bool = False
    start: int = 1
    tight: bool = True
    bullet: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class Table(Node):
    """Table with optional header row.

    Parameters
    ----------
    header : TableRow or None, default = None
        Header row
    rows : list of TableRow, default = empty list
        Body rows
    alignments : list, default = empty list
        Column alignments ("left", "center", "right" or None)
    metadata : dict, default = empty dict
        Table metadata

    """

    header: Optional[TableRow] = None
    rows: list[TableRow] = field(default_factory=list)
    alignments: list[Optional[Alignment]] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row holding cells.

    Parameters
    ----------
    cells : list of TableCell, default = empty list
        Cells of the row
    is_header : bool, default = False
        Whether this row is the header row
    metadata : dict, default = empty dict
        Row metadata

    """

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table row."""
        return visitor.visit_table_row(self)


# ============================================================================
# Inline-bearing containers
# ============================================================================


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    content : list of Node, default = empty list
        Inline nodes representing heading text
    metadata : dict, default = empty dict
        Heading metadata

    """

    level: int
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes representing paragraph content
    metadata : dict, default = empty dict
        Paragraph metadata

    """

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class ListItem(Node):
    """List item holding block-level children.

    List items are inline-bearing for spacing purposes: the boundary between
    two consecutive children is resolved like any inline boundary.

    Parameters
    ----------
    children : list of Node, default = empty list
        Content of the item (usually paragraphs and nested lists)
    task_status : {"checked", "unchecked"} or None, default = None
        Checkbox state for task list items
    metadata : dict, default = empty dict
        List item metadata

    """

    children: list[Node] = field(default_factory=list)
    task_status: Optional[Literal["checked", "unchecked"]] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass
class TableCell(Node):
    """Table cell with inline content.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes in the cell
    alignment : {"left", "center", "right"} or None, default = None
        Cell alignment
    metadata : dict, default = empty dict
        Cell metadata

    """

    content: list[Node] = field(default_factory=list)
    alignment: Optional[Alignment] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table cell."""
        return visitor.visit_table_cell(self)


@dataclass
class Emphasis(Node):
    """Emphasis (italic) node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong emphasis."""
        return visitor.visit_strong(self)


@dataclass
class Strikethrough(Node):
    """Strikethrough (deleted text) node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strikethrough."""
        return visitor.visit_strikethrough(self)


@dataclass
class Link(Node):
    """Inline hyperlink.

    Parameters
    ----------
    url : str
        Link destination
    content : list of Node, default = empty list
        Inline nodes forming the link text
    title : str or None, default = None
        Optional link title
    metadata : dict, default = empty dict
        Link metadata

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class LinkReference(Node):
    """Reference-style link (``[text][label]``).

    Parameters
    ----------
    identifier : str
        Normalized reference label
    content : list of Node, default = empty list
        Inline nodes forming the link text
    label : str or None, default = None
        Label as written in the source; defaults to ``identifier`` when rendering
    reference_type : {"full", "collapsed", "shortcut"}, default = "full"
        How the reference was written
    metadata : dict, default = empty dict
        Link metadata

    """

    identifier: str
    content: list[Node] = field(default_factory=list)
    label: Optional[str] = None
    reference_type: ReferenceType = "full"
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link reference."""
        return visitor.visit_link_reference(self)


# ============================================================================
# Rewritable leaves
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node.

    Parameters
    ----------
    content : str
        Text content
    metadata : dict, default = empty dict
        Text metadata

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass
class MathInline(Node):
    """Inline math node.

    Parameters
    ----------
    content : str
        LaTeX math source (without ``$`` delimiters)
    metadata : dict, default = empty dict
        Math metadata

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline math."""
        return visitor.visit_math_inline(self)


@dataclass
class MathBlock(Node):
    """Display math block.

    Parameters
    ----------
    content : str
        LaTeX math source (without ``$$`` delimiters)
    metadata : dict, default = empty dict
        Math metadata

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this math block."""
        return visitor.visit_math_block(self)


@dataclass
class Code(Node):
    """Inline code node.

    Code takes part in boundary spacing as a single token; its content is never
    rewritten.

    Parameters
    ----------
    content : str
        Code content
    metadata : dict, default = empty dict
        Code metadata

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline code."""
        return visitor.visit_code(self)


# ============================================================================
# Opaque leaves
# ============================================================================


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    content : str
        Code content
    language : str or None, default = None
        Language identifier from the info string
    metadata : dict, default = empty dict
        Code block metadata (the full info string is kept under ``"info_string"``)

    """

    content: str
    language: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block, kept verbatim."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self)


@dataclass
class HTMLInline(Node):
    """Raw inline HTML, kept verbatim."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self)


@dataclass
class LineBreak(Node):
    """Line break.

    Parameters
    ----------
    soft : bool, default = False
        True for a soft break (source newline), False for a hard break
    metadata : dict, default = empty dict
        Line break metadata

    """

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


@dataclass
class Image(Node):
    """Inline image.

    Parameters
    ----------
    url : str
        Image source
    alt_text : str, default = ""
        Alternative text
    title : str or None, default = None
        Optional title
    metadata : dict, default = empty dict
        Image metadata

    """

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class ImageReference(Node):
    """Reference-style image (``![alt][label]``)."""

    identifier: str
    alt_text: str = ""
    label: Optional[str] = None
    reference_type: ReferenceType = "full"
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image reference."""
        return visitor.visit_image_reference(self)


@dataclass
class Definition(Node):
    """Link reference definition (``[label]: url "title"``).

    Parameters
    ----------
    identifier : str
        Normalized reference label
    url : str
        Destination
    title : str or None, default = None
        Optional title
    label : str or None, default = None
        Label as written in the source
    metadata : dict, default = empty dict
        Definition metadata

    """

    identifier: str
    url: str
    title: Optional[str] = None
    label: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this definition."""
        return visitor.visit_definition(self)


@dataclass
class FootnoteReference(Node):
    """Footnote reference (``[^id]``)."""

    identifier: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this footnote reference."""
        return visitor.visit_footnote_reference(self)


@dataclass
class FootnoteDefinition(Node):
    """Footnote definition.

    The body is kept as block content for rendering, but the definition as a
    whole is opaque to spacing.

    Parameters
    ----------
    identifier : str
        Footnote identifier
    content : list of Node, default = empty list
        Block-level content of the footnote
    metadata : dict, default = empty dict
        Footnote metadata

    """

    identifier: str
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this footnote definition."""
        return visitor.visit_footnote_definition(self)


# ============================================================================
# Node families
# ============================================================================

STRUCTURAL_CONTAINER_TYPES: tuple[type[Node], ...] = (Document, BlockQuote, List, Table, TableRow)

INLINE_CONTAINER_TYPES: tuple[type[Node], ...] = (
    Emphasis,
    Strikethrough,
    Heading,
    Link,
    LinkReference,
    ListItem,
    Paragraph,
    Strong,
    TableCell,
)

CONTAINER_TYPES: tuple[type[Node], ...] = STRUCTURAL_CONTAINER_TYPES + INLINE_CONTAINER_TYPES

MATH_TYPES: tuple[type[Node], ...] = (MathInline, MathBlock)

# Leaves that take part in boundary spacing as a single opaque token
TOKEN_TYPES: tuple[type[Node], ...] = (MathInline, MathBlock, Code)

OPAQUE_TYPES: tuple[type[Node], ...] = (
    LineBreak,
    ThematicBreak,
    Image,
    ImageReference,
    HTMLBlock,
    HTMLInline,
    CodeBlock,
    Definition,
    FootnoteDefinition,
    FootnoteReference,
)

InlineContainer = Union[
    Emphasis, Strikethrough, Heading, Link, LinkReference, ListItem, Paragraph, Strong, TableCell
]


def is_container(node: Node) -> bool:
    """Return True if ``node`` is a container whose children take part in traversal.

    ``FootnoteDefinition`` holds content but is an opaque leaf for spacing, so it
    is not a container here.

    """
    return isinstance(node, CONTAINER_TYPES)


def get_node_children(node: Node) -> list[Node]:
    """Get the ordered child nodes of a container.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Child nodes in document order (empty list for leaves)

    Examples
    --------
    >>> heading = Heading(level=1, content=[Text("Hello"), Strong(content=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, (Document, BlockQuote, ListItem)):
        return list(node.children)

    if isinstance(node, (Heading, Paragraph, Emphasis, Strong, Strikethrough, Link, LinkReference, TableCell)):
        return list(node.content)

    if isinstance(node, List):
        return list(node.items)

    if isinstance(node, Table):
        children: list[Node] = []
        if node.header:
            children.append(node.header)
        children.extend(node.rows)
        return children

    if isinstance(node, TableRow):
        return list(node.cells)

    return []


def set_inline_children(node: InlineContainer, children: list[Node]) -> None:
    """Replace the children of an inline-bearing container in place."""
    if isinstance(node, ListItem):
        node.children = children
    else:
        node.content = children
