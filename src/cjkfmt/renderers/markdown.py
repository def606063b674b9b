#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/renderers/markdown.py
"""Markdown rendering from AST.

This module provides the MarkdownRenderer class which converts AST nodes back
to markdown text. The renderer aims to reproduce what the parser read, so that
formatting a document only changes its spacing: source bullets, ordered list
delimiters, code fence info strings, reference labels and frontmatter are all
written back as they were found.

Block nodes are rendered to strings first and then joined and indented by
their parent (list items, quotes, footnotes), which keeps nested indentation
independent of how deep a block sits.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Union

from cjkfmt.ast.nodes import (
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
)
from cjkfmt.ast.utils import extract_text
from cjkfmt.ast.visitors import NodeVisitor
from cjkfmt.constants import DEPS_FRONTMATTER
from cjkfmt.exceptions import CjkFmtError, RenderingError
from cjkfmt.options.markdown import MarkdownRendererOptions
from cjkfmt.renderers.base import BaseRenderer, InlineContentMixin
from cjkfmt.utils.decorators import requires_dependencies

# Text at the start of a paragraph line that would otherwise open a block
_LINE_START_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)(?:"
    r"(?P<num>\d{1,9})(?P<delim>[.)])(?=[ \t]|$)"
    r"|(?P<marker>[-+](?=[ \t]|$)|-+[ \t]*$|>|~{3,}|=+[ \t]*$)"
    r")",
    re.MULTILINE,
)

_URL_NEEDS_BRACKETS = re.compile(r"[\s<>]")


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render AST nodes to markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
    Basic usage:

        >>> from cjkfmt.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, content=[Text(content="标题")])])
        >>> print(MarkdownRenderer().render_to_string(doc), end="")
        # 标题

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._output: list[str] = []
        self._list_depth: int = 0
        self._in_table: bool = False

    def render_to_string(self, document: Document) -> str:
        """Render a document AST to markdown string.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            Markdown text ending in a single newline (empty for an empty document)

        Raises
        ------
        RenderingError
            If a node cannot be rendered

        """
        self._output = []
        self._list_depth = 0
        self._in_table = False

        try:
            document.accept(self)
        except CjkFmtError:
            raise
        except Exception as e:
            raise RenderingError(
                f"Failed to render markdown: {e!r}", rendering_stage="rendering", original_error=e
            ) from e

        result = "".join(self._output)
        self._output = []
        return self._cleanup_output(result)

    def render(
        self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]], encoding: str = "utf-8"
    ) -> None:
        """Render AST to markdown and write to output.

        Parameters
        ----------
        doc : Document
            AST Document node to render
        output : str, Path, IO[bytes] or IO[str]
            Output destination (file path or file-like object)
        encoding : str, default "utf-8"
            Encoding for paths and binary streams

        """
        markdown_text = self.render_to_string(doc)
        self.write_text_output(markdown_text, output, encoding=encoding)

    @staticmethod
    def _cleanup_output(text: str) -> str:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = text.rstrip()
        return text + "\n" if text else ""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _render_node(self, node: Node) -> str:
        """Render a single node to a string without touching the current output."""
        return self._render_inline_content([node])

    def _render_blocks(self, children: list[Node], separator: str = "\n\n") -> str:
        """Render block-level children and join them.

        Whitespace-only text runs sitting between blocks carry no content and
        are skipped, as are blocks that render to nothing. Consecutive link
        reference definitions are kept on adjacent lines.
        """
        parts: list[str] = []
        previous: Node | None = None
        for child in children:
            if isinstance(child, Text) and not child.content.strip():
                continue
            rendered = self._render_node(child)
            if not rendered:
                continue
            if parts:
                both_definitions = isinstance(previous, Definition) and isinstance(child, Definition)
                parts.append("\n" if both_definitions else separator)
            parts.append(rendered)
            previous = child
        return "".join(parts)

    @staticmethod
    def _indent_continuation(text: str, indent: str) -> str:
        """Indent every line after the first, leaving blank lines empty."""
        lines = text.split("\n")
        return "\n".join([lines[0]] + [f"{indent}{line}" if line else "" for line in lines[1:]])

    def _escape_markdown(self, text: str) -> str:
        """Escape special markdown characters with context awareness.

        - Backslash, backticks, asterisks, braces, brackets and dollar signs
          are always escaped
        - ``#`` only at the start of a text run
        - ``_`` only at word boundaries (``snake_case`` is left alone)
        - ``|`` inside table cells

        """
        if not self.options.escape_special:
            return text

        always_escape = "\\`*{}[]$"

        escaped_chars = []
        for i, char in enumerate(text):
            if char in always_escape:
                escaped_chars.append("\\")
                escaped_chars.append(char)
            elif char == "#" and i == 0:
                escaped_chars.append("\\#")
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                if not (prev_alnum and next_alnum):
                    escaped_chars.append("\\")
                escaped_chars.append(char)
            elif char == "|" and self._in_table:
                escaped_chars.append("\\|")
            else:
                escaped_chars.append(char)

        return "".join(escaped_chars)

    def _escape_line_starts(self, text: str) -> str:
        """Escape list, quote, fence and setext markers at the start of paragraph lines."""
        if not self.options.escape_special:
            return text

        def _escape(match: re.Match[str]) -> str:
            if match.group("num"):
                return f"{match.group('indent')}{match.group('num')}\\{match.group('delim')}"
            return f"{match.group('indent')}\\{match.group('marker')}"

        return _LINE_START_PATTERN.sub(_escape, text)

    @staticmethod
    def _format_destination(url: str) -> str:
        if not url or _URL_NEEDS_BRACKETS.search(url) or url.count("(") != url.count(")"):
            return f"<{url}>"
        return url

    @staticmethod
    def _format_title(title: str | None) -> str:
        if not title:
            return ""
        escaped = title.replace("\\", "\\\\").replace('"', '\\"')
        return f' "{escaped}"'

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render inline nodes, placing emphasis delimiters against their neighbours.

        Emphasis and strong delimiters only work when they can open and close
        where they stand, which depends on the characters around them once
        the spacing transform has removed whitespace. For each delimited node
        the first of ``*`` and ``_`` that can open and close and does not merge
        with an adjacent delimiter run is used. When neither works, a space is
        kept outside the delimiter.
        """
        pieces: list[str | _Delimited] = []
        for node in content:
            if isinstance(node, (Emphasis, Strong, Strikethrough)):
                pieces.append(self._delimited(node))
            else:
                pieces.append(super()._render_inline_content([node]))

        output: list[str] = []
        for index, piece in enumerate(pieces):
            if isinstance(piece, _Delimited):
                previous = piece.leading[-1:] or _last_char(output)
                following = piece.trailing[:1] or _first_char(pieces[index + 1 :])
                output.append(piece.place(previous, following))
            else:
                output.append(piece)
        return "".join(output)

    def _delimited(self, node: Emphasis | Strong | Strikethrough) -> str | _Delimited:
        """Split a delimited node into its edge whitespace, marker and content.

        Edge whitespace goes outside the delimiters, since emphasis cannot open
        before or close after whitespace.
        """
        content = self._render_inline_content(node.content)
        if isinstance(node, Emphasis):
            marker = self.options.emphasis_symbol
        elif isinstance(node, Strong):
            marker = "**"
        else:
            marker = "~~"

        stripped = content.strip(" \t")
        if not stripped:
            return content
        leading = content[: len(content) - len(content.lstrip(" \t"))]
        trailing = content[len(content.rstrip(" \t")) :]
        return _Delimited(leading, marker, stripped, trailing)

    # ------------------------------------------------------------------
    # Structural containers
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render a Document node, frontmatter first."""
        parts = []
        if self.options.metadata_frontmatter:
            frontmatter = self._render_frontmatter(node.metadata)
            if frontmatter:
                parts.append(frontmatter)

        body = self._render_blocks(node.children)
        if body:
            parts.append(body)

        self._output.append("\n\n".join(parts))

    def _render_frontmatter(self, metadata: dict[str, Any] | None) -> str:
        """Return the document frontmatter block, or an empty string.

        The raw block read by the parser is written back verbatim; metadata
        without raw text is serialized as YAML.
        """
        if not metadata:
            return ""
        raw = metadata.get("frontmatter")
        if isinstance(raw, str) and raw.strip():
            return raw.rstrip("\r\n")
        data = metadata.get("frontmatter_data")
        if data:
            return self._dump_frontmatter(data)
        return ""

    @requires_dependencies("frontmatter", DEPS_FRONTMATTER)
    def _dump_frontmatter(self, data: dict[str, Any]) -> str:
        import yaml

        dumped = yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)
        return f"---\n{dumped.rstrip()}\n---"

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node, prefixing every line with ``>``."""
        content = self._render_blocks(node.children)
        lines = content.split("\n") if content else [""]
        self._output.append("\n".join(f"> {line}" if line else ">" for line in lines))

    def visit_list(self, node: List) -> None:
        """Render a List node.

        The source bullet or ordered delimiter is reused when known; otherwise
        bullets come from ``bullet_symbols`` by nesting depth.
        """
        items = []
        self._list_depth += 1
        try:
            for i, item in enumerate(node.items):
                if node.ordered:
                    delimiter = node.bullet if node.bullet in (".", ")") else "."
                    marker = f"{node.start + i}{delimiter} "
                else:
                    bullet = node.bullet if node.bullet in ("-", "*", "+") else self._get_bullet_symbol()
                    marker = f"{bullet} "
                items.append(self._render_list_item(item, marker, node.tight))
        finally:
            self._list_depth -= 1

        self._output.append(("\n" if node.tight else "\n\n").join(items))

    def _get_bullet_symbol(self) -> str:
        symbols = self.options.bullet_symbols
        return symbols[(self._list_depth - 1) % len(symbols)]

    def _render_list_item(self, node: ListItem, marker: str, tight: bool) -> str:
        # Continuation lines must reach the content column of the bullet
        indent = " " * max(len(marker), self.options.list_indent_width)
        if node.task_status:
            marker = f"{marker}{'[x]' if node.task_status == 'checked' else '[ ]'} "

        content = self._render_blocks(node.children, separator="\n" if tight else "\n\n")
        if not content:
            return marker.rstrip()
        return marker + self._indent_continuation(content, indent)

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem outside of a list as a bulleted item."""
        self._output.append(self._render_list_item(node, f"{self._get_bullet_symbol()} ", tight=True))

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a GFM pipe table."""
        rows = [node.header] if node.header else []
        rows.extend(node.rows)
        if not rows:
            return

        num_cols = max(len(row.cells) for row in rows)
        rendered_rows = [self._render_cells(row, num_cols) for row in rows]

        lines = []
        for i, cells in enumerate(rendered_rows):
            lines.append("| " + " | ".join(cells) + " |")
            if i == 0:
                lines.append(self._generate_alignment_row(node, num_cols))
        self._output.append("\n".join(lines))

    def _render_cells(self, row: TableRow, num_cols: int) -> list[str]:
        self._in_table = True
        try:
            cells = [self._render_inline_content(cell.content).replace("\n", " ").strip() for cell in row.cells]
        finally:
            self._in_table = False
        cells.extend([""] * (num_cols - len(cells)))
        return cells

    @staticmethod
    def _generate_alignment_row(node: Table, num_cols: int) -> str:
        alignments = []
        for j in range(num_cols):
            alignment = node.alignments[j] if j < len(node.alignments) else None
            if alignment == "center":
                alignments.append(":---:")
            elif alignment == "right":
                alignments.append("---:")
            elif alignment == "left":
                alignments.append(":---")
            else:
                alignments.append("---")
        return "| " + " | ".join(alignments) + " |"

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow on its own (outside of a table)."""
        self._output.append("| " + " | ".join(self._render_cells(node, len(node.cells))) + " |")

    # ------------------------------------------------------------------
    # Inline-bearing containers
    # ------------------------------------------------------------------

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node in ATX style."""
        content = self._render_inline_content(node.content).replace("\n", " ").strip()
        prefix = "#" * node.level
        self._output.append(f"{prefix} {content}" if content else prefix)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        content = self._render_inline_content(node.content)
        self._output.append(self._escape_line_starts(content))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell's inline content."""
        self._output.append(self._render_inline_content(node.content))

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        self._output.append(self._render_inline_content([node]))

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._output.append(self._render_inline_content([node]))

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        self._output.append(self._render_inline_content([node]))

    def visit_link(self, node: Link) -> None:
        """Render a Link node.

        Autolinks are written back in angle brackets; everything else as an
        inline link.
        """
        if node.metadata.get("autolink"):
            self._output.append(f"<{extract_text(node.content)}>")
            return

        content = self._render_inline_content(node.content)
        destination = self._format_destination(node.url)
        self._output.append(f"[{content}]({destination}{self._format_title(node.title)})")

    def visit_link_reference(self, node: LinkReference) -> None:
        """Render a LinkReference node.

        ``[text]`` is used when the rendered text is the label itself,
        ``[text][label]`` otherwise.
        """
        content = self._render_inline_content(node.content)
        label = node.label or node.identifier
        if node.reference_type == "collapsed":
            self._output.append(f"[{content}][]")
        elif node.reference_type == "shortcut" and content == label:
            self._output.append(f"[{content}]")
        else:
            self._output.append(f"[{content}][{label}]")

    # ------------------------------------------------------------------
    # Rewritable leaves
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render a Text node."""
        self._output.append(self._escape_markdown(node.content))

    def visit_math_inline(self, node: MathInline) -> None:
        """Render a MathInline node as ``$...$``.

        Content that ``$...$`` cannot hold (leading whitespace, newlines, dollar
        signs) uses the ``$`...`$`` form.
        """
        content = node.content
        if not content or content[0].isspace() or "\n" in content or "$" in content:
            ticks = "`" * (_longest_run(content, "`") + 1)
            self._output.append(f"${ticks}{content}{ticks}$")
        else:
            self._output.append(f"${content}$")

    def visit_math_block(self, node: MathBlock) -> None:
        """Render a MathBlock node.

        Display math that was written inside a paragraph stays on its line.
        """
        if node.metadata.get("inline"):
            self._output.append(f"$${node.content}$$")
            return

        content = node.content.rstrip("\n")
        self._output.append(f"$$\n{content}\n$$")

    def visit_code(self, node: Code) -> None:
        """Render a Code node with enough backticks to hold its content."""
        ticks = "`" * (_longest_run(node.content, "`") + 1)
        content = node.content
        if content.startswith("`") or content.endswith("`") or (
            content.startswith(" ") and content.endswith(" ") and content.strip()
        ):
            content = f" {content} "
        self._output.append(f"{ticks}{content}{ticks}")

    # ------------------------------------------------------------------
    # Opaque leaves
    # ------------------------------------------------------------------

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node.

        Indented code blocks stay indented; fenced blocks get a fence longer
        than any fence character run in the content.
        """
        if node.metadata.get("indented"):
            lines = node.content.rstrip("\n").split("\n")
            self._output.append("\n".join(f"    {line}" if line else "" for line in lines))
            return

        fence_char = self.options.code_fence_char
        fence_length = max(self.options.code_fence_min, _longest_run(node.content, fence_char) + 1)
        fence = fence_char * fence_length
        info = node.metadata.get("info_string") or node.language or ""

        content = node.content
        if content and not content.endswith("\n"):
            content += "\n"
        self._output.append(f"{fence}{info}\n{content}{fence}")

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append("---")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Render an HTMLBlock node verbatim."""
        self._output.append(node.content.rstrip("\n"))

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Render an HTMLInline node verbatim."""
        self._output.append(node.content)

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node."""
        if node.soft:
            self._output.append("\n")
        else:
            self._output.append("  \n")

    def visit_image(self, node: Image) -> None:
        """Render an Image node."""
        alt = node.alt_text.replace("[", "\\[").replace("]", "\\]")
        destination = self._format_destination(node.url)
        self._output.append(f"![{alt}]({destination}{self._format_title(node.title)})")

    def visit_image_reference(self, node: ImageReference) -> None:
        """Render an ImageReference node."""
        alt = node.alt_text.replace("[", "\\[").replace("]", "\\]")
        label = node.label or node.identifier
        if node.reference_type == "collapsed":
            self._output.append(f"![{alt}][]")
        elif node.reference_type == "shortcut" and node.alt_text == label:
            self._output.append(f"![{alt}]")
        else:
            self._output.append(f"![{alt}][{label}]")

    def visit_definition(self, node: Definition) -> None:
        """Render a link reference Definition."""
        label = node.label or node.identifier
        destination = self._format_destination(node.url)
        self._output.append(f"[{label}]: {destination}{self._format_title(node.title)}")

    def visit_footnote_reference(self, node: FootnoteReference) -> None:
        """Render a FootnoteReference node."""
        self._output.append(f"[^{node.identifier}]")

    def visit_footnote_definition(self, node: FootnoteDefinition) -> None:
        """Render a FootnoteDefinition node.

        The first block follows the label; further blocks are indented by four
        spaces.
        """
        content = self._render_blocks(node.content)
        prefix = f"[^{node.identifier}]:"
        if not content:
            self._output.append(prefix)
            return
        self._output.append(f"{prefix} {self._indent_continuation(content, '    ')}")


def _longest_run(text: str, char: str) -> int:
    """Return the length of the longest run of ``char`` in ``text``."""
    longest = current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


_ALTERNATE_MARKERS = {"*": "_", "_": "*", "**": "__"}


@dataclass
class _Delimited:
    """Rendered content of an emphasis-like node, waiting for its delimiters."""

    leading: str
    marker: str
    content: str
    trailing: str

    def place(self, previous: str, following: str) -> str:
        """Return the node wrapped in delimiters that work between ``previous`` and ``following``."""
        if self.marker == "~~":
            return f"{self.leading}~~{self.content}~~{self.trailing}"

        # Start and end of the container behave like whitespace
        previous = previous or " "
        following = following or " "
        candidates = [self.marker, _ALTERNATE_MARKERS[self.marker]]
        for marker in candidates:
            char = marker[0]
            if char in (previous, self.content[0], self.content[-1]):
                continue
            if _can_open(previous, self.content[0], char) and _can_close(self.content[-1], following, char):
                return f"{self.leading}{marker}{self.content}{marker}{self.trailing}"

        marker = next((m for m in candidates if m[0] not in (self.content[0], self.content[-1])), self.marker)
        char = marker[0]
        leading, trailing = self.leading, self.trailing
        if previous == char or not _can_open(previous, self.content[0], char):
            leading += " "
        if not _can_close(self.content[-1], following, char):
            trailing = " " + trailing
        return f"{leading}{marker}{self.content}{marker}{trailing}"


def _is_punctuation(char: str) -> bool:
    return not char.isspace() and not char.isalnum()


def _can_open(previous: str, first: str, char: str) -> bool:
    """Whether a delimiter run of ``char`` between ``previous`` and ``first`` can open emphasis."""
    if char == "_" and previous.isalnum() and first.isalnum():
        return False
    if first.isspace():
        return False
    return not (_is_punctuation(first) and not previous.isspace() and not _is_punctuation(previous))


def _can_close(last: str, following: str, char: str) -> bool:
    """Whether a delimiter run of ``char`` between ``last`` and ``following`` can close emphasis."""
    if char == "_" and last.isalnum() and following.isalnum():
        return False
    if last.isspace():
        return False
    return not (_is_punctuation(last) and not following.isspace() and not _is_punctuation(following))


def _last_char(output: list[str]) -> str:
    for text in reversed(output):
        if text:
            return text[-1]
    return ""


def _first_char(pieces: list[str | _Delimited]) -> str:
    for piece in pieces:
        text = piece if isinstance(piece, str) else piece.leading or piece.marker
        if text:
            return text[0]
    return ""
