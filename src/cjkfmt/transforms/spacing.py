#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/transforms/spacing.py
"""Spacing transform for mixed CJK and Latin documents.

The transform walks a document depth-first and fixes the whitespace at every
boundary between two consecutive children of an inline-bearing container
(paragraphs, headings, emphasis, links, list items, table cells ...). The
leaves that actually touch a boundary are found with ``last_leaf`` and
``first_leaf``, so a bold Latin word next to CJK text is handled the same way
as two plain text runs.

Boundary handling
-----------------
- Text / Text: both runs are trimmed at the boundary and, when a space belongs
  there, a standalone ``Text(" ")`` sibling is inserted between the two
  children. The space therefore never ends up inside a markup scope that closes
  or opens at the boundary.
- Text / inline code or math: the text run keeps or gains exactly one space
  next to the token, or loses it.
- Anything else (code next to math, images, line breaks, raw HTML ...): nothing
  changes and the state carried along the container is dropped.

Examples
--------
    >>> from cjkfmt.ast import Paragraph, Strong, Text
    >>> para = Paragraph(content=[Strong(content=[Text(content="AB")]), Text(content="你好")])
    >>> _ = SpacingTransform().transform(para)
    >>> [type(child).__name__ for child in para.content]
    ['Strong', 'Text', 'Text']

"""

from __future__ import annotations

import logging
from typing import Any, Optional

from cjkfmt.ast.nodes import (
    TOKEN_TYPES,
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
    InlineContainer,
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
    set_inline_children,
)
from cjkfmt.ast.utils import first_leaf, last_leaf
from cjkfmt.ast.visitors import NodeVisitor
from cjkfmt.constants import INLINE_WHITESPACE, TOKEN_SENTINEL
from cjkfmt.exceptions import CollaboratorError, InvalidOptionsError
from cjkfmt.options.spacing import SpacingOptions
from cjkfmt.spacing.rules import DEFAULT_RULES, SpacingRules, TextBoundary

logger = logging.getLogger(__name__)


class SpacingTransform(NodeVisitor):
    """Visitor that normalizes CJK spacing in place.

    Parameters
    ----------
    options : SpacingOptions or None, default = None
        Transform options; defaults are used when omitted
    rules : SpacingRules or None, default = None
        Character-level spacing rules; the default CJK table when omitted

    Attributes
    ----------
    inserted_spaces : int
        Number of standalone space nodes inserted by the last ``transform`` call

    """

    def __init__(self, options: Optional[SpacingOptions] = None, rules: Optional[SpacingRules] = None):
        """Initialize the transform with options and rules."""
        if options is None:
            options = SpacingOptions()
        elif not isinstance(options, SpacingOptions):
            raise InvalidOptionsError("SpacingTransform", SpacingOptions, type(options))

        self.options = options
        self.rules = rules if rules is not None else DEFAULT_RULES
        self.inserted_spaces = 0

    def transform(self, node: Node) -> Node:
        """Format ``node`` and everything below it in place.

        Parameters
        ----------
        node : Node
            Root of the (sub)tree to format

        Returns
        -------
        Node
            The same node, mutated

        Raises
        ------
        EmptyContainerError
            If a boundary lookup runs into a container without children
        CollaboratorError
            If the spacing rules return values of the wrong type

        """
        self.inserted_spaces = 0
        node.accept(self)
        return node

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _visit_children(self, node: Node) -> None:
        for child in get_node_children(node):
            child.accept(self)

    def _format_inline_container(self, node: InlineContainer) -> None:
        children = get_node_children(node)
        if not children:
            return

        formatted: list[Node] = []
        pending = False
        previous = ""
        for index, child in enumerate(children):
            # The previous child is already formatted; format this one before
            # reading it as the right side of the boundary.
            child.accept(self)
            if index > 0:
                insert_space, pending, previous = self._resolve_boundary(
                    children[index - 1], child, pending, previous
                )
                if insert_space:
                    formatted.append(Text(content=" "))
                    self.inserted_spaces += 1
                    logger.debug(
                        f"Inserted space in {type(node).__name__} between "
                        f"{type(children[index - 1]).__name__} and {type(child).__name__}"
                    )
            formatted.append(child)

        if pending:
            # Whitespace still owed at the end of the container goes back on the
            # run it was trimmed from, where the enclosing boundary can see it.
            trailing = first_leaf(children[-1])
            if isinstance(trailing, Text) and not trailing.content:
                trailing.content = " "

        set_inline_children(node, formatted)

    # ------------------------------------------------------------------
    # Boundary resolution
    # ------------------------------------------------------------------

    def _resolve_boundary(
        self, left_node: Node, right_node: Node, pending: bool, previous: str
    ) -> tuple[bool, bool, str]:
        """Fix the boundary between two siblings.

        ``previous`` is the last visible text run seen along the current chain
        of text boundaries. Returns whether a space node goes between the
        siblings, the carried state for the next boundary and the updated
        ``previous``.
        """
        left = last_leaf(left_node)
        right = first_leaf(right_node)

        if isinstance(left, Text) and isinstance(right, Text):
            result = self.rules.resolve_text_boundary(left.content, right.content, pending)
            _check_boundary(result)
            left_value = result.left
            visible_left = left_value.strip(INLINE_WHITESPACE)
            if left_value and not visible_left and result.right and previous and isinstance(left_node, Text):
                # A whitespace-only sibling re-emits carried whitespace; the
                # characters on either side of it still decide.
                if not self._should_add_space(previous, result.right, True):
                    left_value = ""
            left.content = left_value
            right.content = result.right
            if visible_left:
                previous = left_value
            elif not isinstance(left_node, Text):
                previous = ""
            return result.insert_space, result.pending, previous

        if isinstance(left, Text) and isinstance(right, TOKEN_TYPES):
            left.content = self._space_before_token(left.content)
        elif isinstance(left, TOKEN_TYPES) and isinstance(right, Text):
            right.content = self._space_after_token(right.content)

        return False, False, ""

    def _space_before_token(self, value: str) -> str:
        trimmed = value.rstrip(INLINE_WHITESPACE)
        anchor = trimmed if trimmed else TOKEN_SENTINEL
        if self._should_add_space(anchor, TOKEN_SENTINEL, trimmed != value):
            return trimmed + " "
        return trimmed

    def _space_after_token(self, value: str) -> str:
        trimmed = value.lstrip(INLINE_WHITESPACE)
        anchor = trimmed if trimmed else TOKEN_SENTINEL
        if self._should_add_space(TOKEN_SENTINEL, anchor, trimmed != value):
            return " " + trimmed
        return trimmed

    def _should_add_space(self, left: str, right: str, had_space: bool) -> bool:
        decision = self.rules.should_add_space(left, right, had_space)
        if not isinstance(decision, bool):
            raise CollaboratorError(
                f"should_add_space returned {type(decision).__name__}, expected bool", "should_add_space"
            )
        return decision

    def _normalized(self, value: str, collaborator: str) -> str:
        result = getattr(self.rules, collaborator)(value)
        if not isinstance(result, str):
            raise CollaboratorError(f"{collaborator} returned {type(result).__name__}, expected str", collaborator)
        return result

    # ------------------------------------------------------------------
    # Structural containers: recurse only
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Format every block of the document."""
        self._visit_children(node)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Format every block of the quote."""
        self._visit_children(node)

    def visit_list(self, node: List) -> None:
        """Format every item independently; no spacing between items."""
        self._visit_children(node)

    def visit_table(self, node: Table) -> None:
        """Format header and body rows."""
        self._visit_children(node)

    def visit_table_row(self, node: TableRow) -> None:
        """Format each cell independently."""
        self._visit_children(node)

    # ------------------------------------------------------------------
    # Inline-bearing containers
    # ------------------------------------------------------------------

    def visit_heading(self, node: Heading) -> None:
        """Format heading content and its boundaries."""
        self._format_inline_container(node)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Format paragraph content and its boundaries."""
        self._format_inline_container(node)

    def visit_list_item(self, node: ListItem) -> None:
        """Format list item content and its boundaries."""
        self._format_inline_container(node)

    def visit_table_cell(self, node: TableCell) -> None:
        """Format cell content and its boundaries."""
        self._format_inline_container(node)

    def visit_emphasis(self, node: Emphasis) -> None:
        """Format emphasized content and its boundaries."""
        self._format_inline_container(node)

    def visit_strong(self, node: Strong) -> None:
        """Format strong content and its boundaries."""
        self._format_inline_container(node)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Format struck-through content and its boundaries."""
        self._format_inline_container(node)

    def visit_link(self, node: Link) -> None:
        """Format link text and its boundaries."""
        self._format_inline_container(node)

    def visit_link_reference(self, node: LinkReference) -> None:
        """Format reference link text and its boundaries."""
        self._format_inline_container(node)

    # ------------------------------------------------------------------
    # Rewritable leaves
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Normalize the spacing inside a text run."""
        if self.options.normalize_text:
            node.content = self._normalized(node.content, "normalize_text")

    def visit_math_inline(self, node: MathInline) -> None:
        """Normalize inline math source."""
        if self.options.normalize_math:
            node.content = self._normalized(node.content, "normalize_math")

    def visit_math_block(self, node: MathBlock) -> None:
        """Normalize block math source."""
        if self.options.normalize_math:
            node.content = self._normalized(node.content, "normalize_math")

    def visit_code(self, node: Code) -> None:
        """Leave inline code untouched."""
        pass

    # ------------------------------------------------------------------
    # Opaque leaves
    # ------------------------------------------------------------------

    def visit_code_block(self, node: CodeBlock) -> None:
        pass

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        pass

    def visit_html_block(self, node: HTMLBlock) -> None:
        pass

    def visit_html_inline(self, node: HTMLInline) -> None:
        pass

    def visit_line_break(self, node: LineBreak) -> None:
        pass

    def visit_image(self, node: Image) -> None:
        pass

    def visit_image_reference(self, node: ImageReference) -> None:
        pass

    def visit_definition(self, node: Definition) -> None:
        pass

    def visit_footnote_reference(self, node: FootnoteReference) -> None:
        pass

    def visit_footnote_definition(self, node: FootnoteDefinition) -> None:
        pass


def _check_boundary(result: Any) -> None:
    if not isinstance(result, TextBoundary):
        raise CollaboratorError(
            f"resolve_text_boundary returned {type(result).__name__}, expected TextBoundary", "resolve_text_boundary"
        )
    if not isinstance(result.left, str) or not isinstance(result.right, str):
        raise CollaboratorError("resolve_text_boundary returned non-string text values", "resolve_text_boundary")
    if not isinstance(result.insert_space, bool) or not isinstance(result.pending, bool):
        raise CollaboratorError("resolve_text_boundary returned non-boolean flags", "resolve_text_boundary")


def format_document(
    document: Node, options: Optional[SpacingOptions] = None, rules: Optional[SpacingRules] = None
) -> Node:
    """Normalize CJK spacing throughout ``document`` in place.

    Parameters
    ----------
    document : Node
        Tree root, usually a ``Document``
    options : SpacingOptions or None, default = None
        Transform options
    rules : SpacingRules or None, default = None
        Character-level spacing rules

    Returns
    -------
    Node
        The mutated ``document``

    """
    return SpacingTransform(options=options, rules=rules).transform(document)
