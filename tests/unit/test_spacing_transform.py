#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_spacing_transform.py
"""Unit tests for the spacing transform.

The boundary cases below build trees by hand so that each one exercises a
single kind of sibling boundary. Property tests at the end run random inline
trees through the transform.
"""

import copy

import pytest
from hypothesis import given
from hypothesis import strategies as st

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
    MathBlock,
    MathInline,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    count_leaves,
    extract_text,
)
from cjkfmt.exceptions import CollaboratorError, EmptyContainerError, InvalidOptionsError
from cjkfmt.options import MarkdownRendererOptions, SpacingOptions
from cjkfmt.spacing import SpacingRules, normalize_text
from cjkfmt.transforms import SpacingTransform, format_document


def _types(nodes):
    return [type(node).__name__ for node in nodes]


@pytest.mark.unit
class TestTokenBoundaries:
    """Tests for text next to inline code and math."""

    def test_text_before_code_gains_space(self):
        """Test that CJK text before inline code gets a trailing space."""
        para = Paragraph(content=[Text(content="你好"), Code(content="x")])
        SpacingTransform().transform(para)

        assert para.content[0].content == "你好 "
        assert _types(para.content) == ["Text", "Code"]

    def test_math_before_text_gains_space(self):
        """Test that CJK text after inline math gets a leading space."""
        para = Paragraph(content=[MathInline(content="x"), Text(content="你好")])
        SpacingTransform().transform(para)

        assert para.content[1].content == " 你好"

    def test_space_before_wide_punctuation_is_removed(self):
        """Test that punctuation after a token is pulled close."""
        para = Paragraph(content=[Code(content="x"), Text(content=" ，然后")])
        SpacingTransform().transform(para)

        assert para.content[1].content == "，然后"

    def test_extra_whitespace_collapses(self):
        """Test that several spaces before a token become one."""
        para = Paragraph(content=[Text(content="使用  "), Code(content="pip")])
        SpacingTransform().transform(para)

        assert para.content[0].content == "使用 "

    def test_written_space_between_latin_and_token_is_kept(self):
        """Test that Latin prose keeps its spacing around code."""
        para = Paragraph(content=[Text(content="run "), Code(content="ls"), Text(content="now")])
        SpacingTransform().transform(para)

        assert para.content[0].content == "run "
        assert para.content[2].content == "now"

    def test_code_content_is_never_rewritten(self):
        """Test that inline code keeps its exact content."""
        para = Paragraph(content=[Code(content="中文English  x")])
        SpacingTransform().transform(para)

        assert para.content[0].content == "中文English  x"

    def test_token_inside_markup_sees_outer_text(self):
        """Test that the space lands on the text leaf touching the token."""
        strong = Strong(content=[Text(content="粗体")])
        para = Paragraph(content=[strong, Code(content="x")])
        SpacingTransform().transform(para)

        assert strong.content[0].content == "粗体 "

    def test_display_math_inside_paragraph_is_a_token(self):
        """Test that display math written inline is spaced like inline math."""
        para = Paragraph(content=[Text(content="公式"), MathBlock(content="x", metadata={"inline": True})])
        SpacingTransform().transform(para)

        assert para.content[0].content == "公式 "

    def test_token_next_to_token_is_untouched(self):
        """Test that two adjacent tokens are left alone."""
        para = Paragraph(content=[Code(content="a"), MathInline(content="b")])
        SpacingTransform().transform(para)

        assert _types(para.content) == ["Code", "MathInline"]


@pytest.mark.unit
class TestTextBoundaries:
    """Tests for text runs meeting across markup."""

    def test_space_is_inserted_outside_markup(self):
        """Test that a standalone space goes between strong text and CJK text."""
        strong = Strong(content=[Text(content="AB")])
        para = Paragraph(content=[strong, Text(content="你好")])
        transform = SpacingTransform()
        transform.transform(para)

        assert _types(para.content) == ["Strong", "Text", "Text"]
        assert para.content[1].content == " "
        assert strong.content[0].content == "AB"
        assert para.content[2].content == "你好"
        assert transform.inserted_spaces == 1

    def test_written_space_inside_markup_moves_out(self):
        """Test that a space written inside the markup ends up outside it."""
        strong = Strong(content=[Text(content="Hello ")])
        para = Paragraph(content=[strong, Text(content="世界")])
        SpacingTransform().transform(para)

        assert strong.content[0].content == "Hello"
        assert para.content[1].content == " "

    def test_space_around_emphasis_on_both_sides(self):
        """Test that spaces are inserted before and after emphasized Latin text."""
        para = Paragraph(content=[Text(content="中文"), Emphasis(content=[Text(content="English")]), Text(content="中文")])
        transform = SpacingTransform()
        transform.transform(para)

        assert _types(para.content) == ["Text", "Text", "Emphasis", "Text", "Text"]
        assert transform.inserted_spaces == 2

    def test_cjk_markup_boundary_gets_no_space(self):
        """Test that CJK next to CJK markup stays joined."""
        para = Paragraph(content=[Text(content="使用"), Strong(content=[Text(content="粗体")]), Text(content="文字")])
        SpacingTransform().transform(para)

        assert _types(para.content) == ["Text", "Strong", "Text"]

    def test_stray_space_before_wide_punctuation_is_dropped(self):
        """Test that a space between markup and full-width punctuation is removed."""
        para = Paragraph(content=[Strikethrough(content=[Text(content="删除 ")]), Text(content=" 。")])
        SpacingTransform().transform(para)

        assert para.content[0].content[0].content == "删除"
        assert para.content[1].content == "。"

    def test_link_text_is_spaced_like_markup(self):
        """Test that link text and its boundaries are formatted."""
        link = Link(url="http://example.com", content=[Text(content="链接Link")])
        para = Paragraph(content=[link, Text(content="中文")])
        SpacingTransform().transform(para)

        assert link.content[0].content == "链接 Link"
        assert para.content[1].content == " "

    def test_pending_space_is_written_once(self):
        """Test that whitespace inside an otherwise empty run is re-emitted once."""
        strong = Strong(content=[Text(content=" ")])
        para = Paragraph(content=[Text(content="中文 "), strong, Text(content="English")])
        transform = SpacingTransform()
        transform.transform(para)

        assert para.content[0].content == "中文"
        assert strong.content[0].content == " "
        assert para.content[2].content == "English"
        assert transform.inserted_spaces == 0

    def test_pending_space_carries_across_empty_runs(self):
        """Test that the carried space survives several invisible siblings."""
        para = Paragraph(
            content=[Text(content="中文 "), Text(content=" "), Text(content=""), Text(content="English")]
        )
        SpacingTransform().transform(para)

        assert [node.content for node in para.content] == ["中文", "", " ", "English"]

    def test_carried_space_between_cjk_markup_is_dropped(self):
        """Test that a space-only sibling between two CJK runs is emptied."""
        first = Strong(content=[Text(content="中")])
        second = Strong(content=[Text(content="文")])
        para = Paragraph(content=[first, Text(content=" "), second])
        transform = SpacingTransform()
        transform.transform(para)

        assert _types(para.content) == ["Strong", "Text", "Strong"]
        assert para.content[1].content == ""
        assert first.content[0].content == "中"
        assert second.content[0].content == "文"
        assert transform.inserted_spaces == 0

    def test_carried_space_between_latin_and_cjk_markup_is_kept(self):
        """Test that a space-only sibling between Latin and CJK keeps one space."""
        para = Paragraph(
            content=[
                Emphasis(content=[Text(content="Hello")]),
                Text(content="  "),
                Emphasis(content=[Text(content="世界")]),
            ]
        )
        SpacingTransform().transform(para)

        assert para.content[1].content == " "

    def test_opaque_leaf_resets_pending_space(self):
        """Test that a line break severs the carried space."""
        para = Paragraph(
            content=[
                Text(content="中文 "),
                Text(content=" "),
                LineBreak(),
                Text(content=""),
                Text(content="English"),
            ]
        )
        SpacingTransform().transform(para)

        assert [getattr(node, "content", None) for node in para.content] == ["中文", "", None, "", "English"]


@pytest.mark.unit
class TestOpaqueAndStructural:
    """Tests for nodes that take no part in spacing."""

    def test_adjacent_opaque_leaves_are_untouched(self):
        """Test that an image next to a line break changes nothing."""
        image = Image(url="a.png", alt_text="图片")
        line_break = LineBreak()
        para = Paragraph(content=[image, line_break])
        transform = SpacingTransform()
        transform.transform(para)

        assert para.content == [image, line_break]
        assert image.alt_text == "图片"
        assert transform.inserted_spaces == 0

    def test_text_next_to_image_is_untouched(self):
        """Test that text touching an image keeps its edges."""
        para = Paragraph(content=[Text(content="中文 "), Image(url="a.png"), Text(content="English")])
        SpacingTransform().transform(para)

        assert para.content[0].content == "中文 "
        assert para.content[2].content == "English"

    def test_list_items_are_formatted_independently(self):
        """Test that no spacing is evaluated between list items."""
        first = ListItem(children=[Paragraph(content=[Text(content="中文")])])
        second = ListItem(children=[Paragraph(content=[Text(content="English")])])
        lst = List(items=[first, second])
        transform = SpacingTransform()
        transform.transform(lst)

        assert lst.items == [first, second]
        assert first.children[0].content[0].content == "中文"
        assert second.children[0].content[0].content == "English"
        assert transform.inserted_spaces == 0

    def test_list_item_content_is_formatted(self):
        """Test that paragraphs inside list items are normalized."""
        item = ListItem(children=[Paragraph(content=[Text(content="测试test")])])
        format_document(Document(children=[List(items=[item])]))

        assert item.children[0].content[0].content == "测试 test"

    def test_table_cells_are_formatted_independently(self):
        """Test that cells in a row do not affect each other."""
        row = TableRow(cells=[TableCell(content=[Text(content="中文")]), TableCell(content=[Text(content="Eng")])])
        table = Table(header=row, rows=[TableRow(cells=[TableCell(content=[Text(content="名称Name")])])])
        SpacingTransform().transform(table)

        assert [len(cell.content) for cell in row.cells] == [1, 1]
        assert table.rows[0].cells[0].content[0].content == "名称 Name"

    def test_blocks_in_quote_are_formatted(self):
        """Test recursion through block quotes."""
        para = Paragraph(content=[Text(content="引用Quote")])
        SpacingTransform().transform(Document(children=[BlockQuote(children=[para])]))

        assert para.content[0].content == "引用 Quote"

    def test_footnote_definition_is_opaque(self):
        """Test that footnote definitions are left as written."""
        note = FootnoteDefinition(identifier="1", content=[Paragraph(content=[Text(content="脚注Note")])])
        SpacingTransform().transform(Document(children=[note]))

        assert note.content[0].content[0].content == "脚注Note"

    def test_heading_is_formatted(self):
        """Test that heading content is normalized."""
        heading = Heading(level=2, content=[Text(content="使用"), Code(content="pip")])
        SpacingTransform().transform(heading)

        assert heading.content[0].content == "使用 "


@pytest.mark.unit
class TestMalformedTrees:
    """Tests for empty containers."""

    def test_empty_inline_container_is_a_no_op(self):
        """Test that a container without children is left alone."""
        para = Paragraph(content=[])
        SpacingTransform().transform(para)
        assert para.content == []

    def test_single_child_never_evaluates_a_boundary(self):
        """Test that a lone empty child is not an error."""
        para = Paragraph(content=[Strong(content=[])])
        SpacingTransform().transform(para)
        assert _types(para.content) == ["Strong"]

    def test_empty_container_at_boundary_is_rejected(self):
        """Test that an empty sibling reached by the locator raises."""
        para = Paragraph(content=[Text(content="中文"), Strong(content=[])])

        with pytest.raises(EmptyContainerError):
            SpacingTransform().transform(para)


@pytest.mark.unit
class TestCollaborators:
    """Tests for substituted spacing rules and their contracts."""

    def test_normalize_text_must_return_str(self):
        """Test that a non-string text normalizer is rejected."""

        class BrokenRules(SpacingRules):
            def normalize_text(self, value):
                return None

        with pytest.raises(CollaboratorError) as exc_info:
            SpacingTransform(rules=BrokenRules()).transform(Paragraph(content=[Text(content="a")]))

        assert exc_info.value.collaborator == "normalize_text"

    def test_normalize_math_must_return_str(self):
        """Test that a non-string math normalizer is rejected."""

        class BrokenRules(SpacingRules):
            def normalize_math(self, value):
                return 42

        with pytest.raises(CollaboratorError):
            SpacingTransform(rules=BrokenRules()).transform(Paragraph(content=[MathInline(content="x")]))

    def test_should_add_space_must_return_bool(self):
        """Test that a non-boolean decision is rejected."""

        class BrokenRules(SpacingRules):
            def should_add_space(self, left, right, had_space):
                return "yes"

        para = Paragraph(content=[Text(content="a"), Code(content="x")])
        with pytest.raises(CollaboratorError):
            SpacingTransform(options=SpacingOptions(normalize_text=False), rules=BrokenRules()).transform(para)

    def test_resolve_text_boundary_must_return_boundary(self):
        """Test that a malformed boundary result is rejected."""

        class BrokenRules(SpacingRules):
            def resolve_text_boundary(self, left, right, pending):
                return (left, right, False, False)

        para = Paragraph(content=[Strong(content=[Text(content="a")]), Text(content="b")])
        with pytest.raises(CollaboratorError):
            SpacingTransform(rules=BrokenRules()).transform(para)

    def test_custom_rules_are_used(self):
        """Test that a substituted table drives boundary decisions."""

        class NeverSpace(SpacingRules):
            def should_add_space(self, left, right, had_space):
                return False

        para = Paragraph(content=[Strong(content=[Text(content="AB")]), Text(content="你好")])
        transform = SpacingTransform(rules=NeverSpace())
        transform.transform(para)

        assert transform.inserted_spaces == 0


@pytest.mark.unit
class TestOptions:
    """Tests for SpacingOptions handling."""

    def test_text_normalization_can_be_disabled(self):
        """Test that runs keep their inner spacing when disabled."""
        para = Paragraph(content=[Text(content="中文English")])
        SpacingTransform(SpacingOptions(normalize_text=False)).transform(para)
        assert para.content[0].content == "中文English"

    def test_boundaries_apply_without_text_normalization(self):
        """Test that boundary spacing stays active when runs are not normalized."""
        para = Paragraph(content=[Strong(content=[Text(content="AB")]), Text(content="你好")])
        SpacingTransform(SpacingOptions(normalize_text=False)).transform(para)
        assert _types(para.content) == ["Strong", "Text", "Text"]

    def test_math_normalization(self):
        """Test that math source is tidied unless disabled."""
        enabled = MathInline(content="  a  +  b ")
        disabled = MathInline(content="  a  +  b ")
        SpacingTransform().transform(Paragraph(content=[enabled]))
        SpacingTransform(SpacingOptions(normalize_math=False)).transform(Paragraph(content=[disabled]))

        assert enabled.content == "a + b"
        assert disabled.content == "  a  +  b "

    def test_wrong_options_type(self):
        """Test that options of another component are rejected."""
        with pytest.raises(InvalidOptionsError):
            SpacingTransform(MarkdownRendererOptions())  # type: ignore[arg-type]

    def test_inserted_spaces_reset_per_run(self, mixed_document):
        """Test that the counter reflects only the last transform call."""
        transform = SpacingTransform()
        transform.transform(mixed_document)
        assert transform.inserted_spaces == 2

        transform.transform(mixed_document)
        assert transform.inserted_spaces == 0

    def test_format_document_returns_same_tree(self, mixed_document):
        """Test that the functional entry point mutates and returns its input."""
        assert format_document(mixed_document) is mixed_document
        assert extract_text(mixed_document) == "使用 Python 和  安装 "


# ---------------------------------------------------------------------------
# Property-based tests
# ---------------------------------------------------------------------------

RUN_ALPHABET = "中文字AB1 ，。(). "

visible_runs = st.text(alphabet="中文字AB1，。().", min_size=1, max_size=6)
text_runs = st.text(alphabet=RUN_ALPHABET, max_size=8)

text_leaves = st.builds(Text, content=text_runs)
token_leaves = st.one_of(
    st.builds(Code, content=st.sampled_from(["x", "pip", "a b"])),
    st.builds(MathInline, content=st.sampled_from(["x", "a+b"])),
)
markup = st.builds(
    lambda kind, runs: kind(content=[Text(content=run) for run in runs]),
    st.sampled_from([Strong, Emphasis, Strikethrough]),
    st.lists(text_runs, min_size=1, max_size=3),
)
inline_children = st.lists(
    st.one_of(text_leaves, token_leaves, markup, st.just(LineBreak())), min_size=0, max_size=8
)
paragraphs = st.builds(Paragraph, content=inline_children)
documents = st.builds(Document, children=st.lists(paragraphs, min_size=1, max_size=3))

# Paragraphs made of plain text and strong runs without edge whitespace
strong_and_text = st.lists(
    st.one_of(
        st.builds(Text, content=text_runs),
        st.builds(lambda run: Strong(content=[Text(content=run)]), visible_runs),
    ),
    min_size=1,
    max_size=8,
)


@pytest.mark.unit
class TestTransformProperties:
    """Property-based tests over random inline trees."""

    @given(documents)
    def test_idempotent(self, document):
        """Test that formatting twice equals formatting once."""
        once = format_document(copy.deepcopy(document))
        twice = format_document(copy.deepcopy(once))
        assert twice == once

    @given(documents)
    def test_leaf_count_grows_by_inserted_spaces(self, document):
        """Test that leaves are only ever added, one per inserted space."""
        before = count_leaves(document)
        transform = SpacingTransform()
        transform.transform(document)

        assert count_leaves(document) == before + transform.inserted_spaces

    @given(strong_and_text)
    def test_spaces_stay_outside_markup(self, children):
        """Test that strong runs never absorb a boundary space."""
        originals = [
            child.content[0].content for child in children if isinstance(child, Strong)
        ]
        SpacingTransform().transform(Paragraph(content=children))

        formatted = [child.content[0].content for child in children if isinstance(child, Strong)]
        assert formatted == [normalize_text(value) for value in originals]
