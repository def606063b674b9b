#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_ast_utils.py
"""Tests for AST node families and utility functions."""

import pytest

from cjkfmt.ast import (
    BlockQuote,
    Code,
    Document,
    Emphasis,
    FootnoteDefinition,
    Heading,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    MathInline,
    Paragraph,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    count_leaves,
    extract_text,
    first_leaf,
    get_node_children,
    is_container,
    iter_leaves,
    last_leaf,
)
from cjkfmt.ast.nodes import set_inline_children
from cjkfmt.exceptions import EmptyContainerError, MalformedTreeError, TransformError


@pytest.mark.unit
class TestNodeFamilies:
    """Tests for container detection and child access."""

    def test_inline_containers_are_containers(self):
        """Test that every inline-bearing node kind is a container."""
        for node in (
            Paragraph(),
            Heading(level=1),
            Emphasis(),
            Strong(),
            Link(url="http://example.com"),
            ListItem(),
            TableCell(),
        ):
            assert is_container(node)

    def test_structural_containers_are_containers(self):
        """Test that structural nodes are containers."""
        for node in (Document(), BlockQuote(), List(), Table(), TableRow()):
            assert is_container(node)

    def test_leaves_are_not_containers(self):
        """Test that leaves, including footnote definitions, are not containers."""
        for node in (
            Text(content="a"),
            Code(content="x"),
            MathInline(content="x"),
            LineBreak(),
            Image(url="a.png"),
            FootnoteDefinition(identifier="1", content=[Paragraph(content=[Text(content="note")])]),
        ):
            assert not is_container(node)

    def test_table_children_include_header(self):
        """Test that the header row comes before body rows."""
        header = TableRow(cells=[TableCell(content=[Text(content="h")])], is_header=True)
        row = TableRow(cells=[TableCell(content=[Text(content="r")])])
        table = Table(header=header, rows=[row])

        assert get_node_children(table) == [header, row]

    def test_get_node_children_returns_copy(self):
        """Test that mutating the returned list leaves the node untouched."""
        para = Paragraph(content=[Text(content="a")])
        children = get_node_children(para)
        children.append(Text(content="b"))

        assert len(para.content) == 1

    def test_set_inline_children_on_list_item(self):
        """Test that list items receive new children in ``children``."""
        item = ListItem(children=[Paragraph()])
        new_children = [Paragraph(), Text(content=" ")]
        set_inline_children(item, new_children)

        assert item.children == new_children


@pytest.mark.unit
class TestLeafLocator:
    """Tests for first_leaf and last_leaf."""

    def test_leaf_returns_itself(self):
        """Test that a leaf is its own first and last leaf."""
        text = Text(content="中文")
        assert first_leaf(text) is text
        assert last_leaf(text) is text

    def test_descends_through_nested_markup(self):
        """Test descent through several container levels."""
        inner_first = Text(content="A")
        inner_last = Text(content="B")
        para = Paragraph(
            content=[
                Strong(content=[Emphasis(content=[inner_first]), Text(content="mid")]),
                Link(url="/", content=[Text(content="x"), Emphasis(content=[inner_last])]),
            ]
        )

        assert first_leaf(para) is inner_first
        assert last_leaf(para) is inner_last

    def test_token_leaf_is_returned(self):
        """Test that code and math leaves end the descent."""
        code = Code(content="x")
        math = MathInline(content="y")
        para = Paragraph(content=[code, Text(content="中"), math])

        assert first_leaf(para) is code
        assert last_leaf(para) is math

    def test_empty_container_is_rejected(self):
        """Test that an empty container raises instead of failing on an index."""
        with pytest.raises(EmptyContainerError) as exc_info:
            first_leaf(Strong(content=[]))

        assert exc_info.value.node_type == "Strong"
        assert exc_info.value.direction == "first"

    def test_nested_empty_container_is_rejected(self):
        """Test that an empty container deeper on the descent path is rejected."""
        para = Paragraph(content=[Text(content="a"), Emphasis(content=[])])

        with pytest.raises(EmptyContainerError) as exc_info:
            last_leaf(para)

        assert exc_info.value.direction == "last"

    def test_empty_container_error_hierarchy(self):
        """Test that the error belongs to the transform error family."""
        assert issubclass(EmptyContainerError, MalformedTreeError)
        assert issubclass(EmptyContainerError, TransformError)


@pytest.mark.unit
class TestLeafIteration:
    """Tests for iter_leaves and count_leaves."""

    def test_iter_leaves_in_document_order(self):
        """Test leaves are yielded left to right."""
        doc = Document(
            children=[
                Paragraph(content=[Text(content="a"), Strong(content=[Text(content="b")])]),
                List(items=[ListItem(children=[Paragraph(content=[Code(content="c")])])]),
            ]
        )

        leaves = list(iter_leaves(doc))
        assert [leaf.content for leaf in leaves] == ["a", "b", "c"]

    def test_empty_containers_have_no_leaves(self):
        """Test that empty containers contribute nothing."""
        doc = Document(children=[Paragraph(content=[]), Paragraph(content=[Strong(content=[])])])
        assert count_leaves(doc) == 0

    def test_opaque_leaves_are_counted(self):
        """Test that opaque leaves count as single leaves."""
        para = Paragraph(content=[Image(url="a.png"), LineBreak(), Text(content="x")])
        assert count_leaves(para) == 3


@pytest.mark.unit
class TestExtractText:
    """Tests for extract_text utility function."""

    def test_extract_from_single_text_node(self):
        """Test extracting text from a single Text node."""
        assert extract_text(Text(content="你好")) == "你好"

    def test_default_joiner_keeps_runs_adjacent(self):
        """Test that runs are concatenated exactly by default."""
        para = Paragraph(content=[Text(content="中文"), Strong(content=[Text(content="English")])])
        assert extract_text(para) == "中文English"

    def test_extract_with_custom_joiner(self):
        """Test extracting text with custom joiner."""
        nodes = [Text(content="Hello"), Text(content="World")]
        assert extract_text(nodes, joiner=", ") == "Hello, World"

    def test_non_text_leaves_are_ignored(self):
        """Test that code and math contribute no text."""
        para = Paragraph(content=[Text(content="a"), Code(content="b"), MathInline(content="c")])
        assert extract_text(para) == "a"
