#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cjkfmt/parsers/markdown.py
"""Markdown to AST converter.

This module parses Markdown into the cjkfmt AST using mistune. It keeps enough
source detail (frontmatter, reference labels, footnote labels, autolinks, list
bullets) for the markdown renderer to write the document back without
surprising rewrites.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Literal, Optional

from cjkfmt.ast import (
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
from cjkfmt.constants import DEPS_FRONTMATTER, DEPS_MARKDOWN, FRONTMATTER_PATTERN
from cjkfmt.exceptions import CjkFmtError, ParsingError
from cjkfmt.options.markdown import MarkdownParserOptions
from cjkfmt.parsers.base import BaseParser, ParserInput
from cjkfmt.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_FOOTNOTE_LABEL_PATTERN = re.compile(r"\[\^((?:[^\\\[\]\s]|\\.){1,500})\]")
_ENCODED_NON_ASCII_PATTERN = re.compile(r"(?:%[89A-Fa-f][0-9A-Fa-f])+")


def _restore_url(url: str) -> str:
    """Undo percent-encoding of non-ASCII characters that mistune applies to URLs."""

    def _decode(match: re.Match[str]) -> str:
        try:
            return bytes.fromhex(match.group(0).replace("%", "")).decode("utf-8")
        except UnicodeDecodeError:
            return match.group(0)

    return _ENCODED_NON_ASCII_PATTERN.sub(_decode, url)


class MarkdownParser(BaseParser):
    r"""Convert Markdown to AST representation.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = MarkdownParser()
        >>> doc = parser.parse("# 标题\n\n这是**bold**。")

    Without math support:

        >>> parser = MarkdownParser(MarkdownParserOptions(parse_math=False))

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options
        self._footnote_labels: dict[str, str] = {}

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, input_data: ParserInput) -> Document:
        """Parse Markdown input into AST Document.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Markdown source text, a file path, a file-like object or raw bytes

        Returns
        -------
        Document
            AST document node

        Raises
        ------
        ParsingError
            If the input cannot be decoded or mistune fails
        DependencyError
            If mistune is not installed

        """
        markdown_content = self._load_text_content(input_data)
        markdown_content, metadata = self._extract_frontmatter(markdown_content)

        import mistune
        from mistune.core import BlockState
        from mistune.plugins.footnotes import parse_footnote_item
        from mistune.util import unikey

        plugins = []
        if self.options.parse_strikethrough:
            plugins.append("strikethrough")
        if self.options.parse_tables:
            plugins.append("table")
        if self.options.parse_footnotes:
            plugins.append("footnotes")
        if self.options.parse_task_lists:
            plugins.append("task_lists")
        if self.options.parse_math:
            plugins.append("math")

        # Footnote keys are case-folded by mistune; keep the labels as written
        self._footnote_labels = {}
        for match in _FOOTNOTE_LABEL_PATTERN.finditer(markdown_content):
            self._footnote_labels.setdefault(unikey(match.group(1)), match.group(1))

        try:
            markdown = mistune.create_markdown(plugins=plugins, renderer=None)
            tokens, state = markdown.parse(markdown_content)

            # Definitions that are never referenced are dropped by mistune
            defined = state.env.get("ref_footnotes") or {}
            used = state.env.get("footnotes") or []
            unused = [key for key in defined if key not in used]
            if unused and isinstance(tokens, list):
                extra = BlockState(parent=state)
                extra.tokens = [
                    {
                        "type": "footnotes",
                        "children": [
                            parse_footnote_item(markdown.block, key, len(used) + i + 1, state)
                            for i, key in enumerate(unused)
                        ],
                    }
                ]
                tokens = tokens + list(markdown.render_state(extra))
        except CjkFmtError:
            raise
        except Exception as e:
            raise ParsingError(f"Failed to parse markdown: {e}", parsing_stage="tokens", original_error=e) from e

        if not isinstance(tokens, list):
            raise ParsingError("mistune returned rendered output instead of tokens", parsing_stage="tokens")

        children = self._process_tokens(tokens)

        for key, definition in (state.env.get("ref_links") or {}).items():
            children.append(
                Definition(
                    identifier=key,
                    url=_restore_url(definition.get("url", "")),
                    title=definition.get("title"),
                    label=definition.get("label"),
                )
            )

        logger.debug(f"Parsed markdown into {len(children)} top-level nodes")
        return Document(children=children, metadata=metadata)

    @requires_dependencies("frontmatter", DEPS_FRONTMATTER)
    def _extract_frontmatter(self, content: str) -> tuple[str, dict[str, Any]]:
        """Split YAML frontmatter (``---`` ... ``---``) off the content.

        Returns
        -------
        tuple[str, dict]
            Remaining content and document metadata. The raw block is kept under
            ``"frontmatter"`` and the parsed mapping under ``"frontmatter_data"``.

        """
        if not self.options.parse_frontmatter:
            return content, {}

        match = FRONTMATTER_PATTERN.match(content)
        if not match:
            return content, {}

        import yaml

        metadata: dict[str, Any] = {"frontmatter": match.group(0)}
        body = match.group(1) or ""
        try:
            data = yaml.safe_load(body)
        except yaml.YAMLError as e:
            logger.warning(f"Frontmatter is not valid YAML, keeping it verbatim: {e}")
            data = None
        else:
            if data is not None and not isinstance(data, dict):
                # Two thematic breaks around plain text, not metadata
                logger.debug("Leading '---' block is not a YAML mapping; parsing it as markdown")
                return content, {}

        if isinstance(data, dict):
            metadata["frontmatter_data"] = data
        return content[match.end() :], metadata

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of mistune block tokens into AST nodes."""
        nodes: list[Node] = []

        for token in tokens:
            node = self._process_token(token)
            if node is None:
                continue
            if isinstance(node, list):
                nodes.extend(node)
            else:
                nodes.append(node)

        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | list[Node] | None:
        """Process a single mistune block token into AST node(s)."""
        token_type = token.get("type", "")

        if token_type == "heading":
            return self._process_heading(token)
        elif token_type in ("paragraph", "block_text"):
            # block_text is used for tight list items
            return Paragraph(content=self._process_inline_tokens(token.get("children", [])))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return self._process_table(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(content=token.get("raw", ""))
        elif token_type == "block_math":
            return MathBlock(content=token.get("raw", ""))
        elif token_type == "footnotes":
            return [self._process_footnote_item(item) for item in token.get("children", [])]
        elif token_type == "blank_line":
            return None

        logger.debug(f"Skipping unsupported block token: {token_type}")
        return None

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        attrs = token.get("attrs") or {}
        level = attrs.get("level", 1)
        if not isinstance(level, int) or level < 1 or level > 6:
            level = 1
        return Heading(level=level, content=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process code block token.

        The full info string is kept in metadata so it can be written back
        unchanged; the language is its first word.
        """
        attrs = token.get("attrs") or {}
        info_string = (attrs.get("info") or "").strip()

        metadata: dict[str, Any] = {}
        language = None
        if info_string:
            metadata["info_string"] = info_string
            language = info_string.split(maxsplit=1)[0]
        if token.get("style") == "indent":
            metadata["indented"] = True

        return CodeBlock(content=token.get("raw", ""), language=language, metadata=metadata)

    def _process_list(self, token: dict[str, Any]) -> List:
        """Process list token.

        ``tight`` and ``bullet`` are top-level keys of the mistune token,
        ``ordered`` and ``start`` live in ``attrs``.
        """
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered", False))
        start = attrs.get("start", 1)
        tight = token.get("tight", True)
        bullet = token.get("bullet")

        items = [
            self._process_list_item(child)
            for child in token.get("children", [])
            if child.get("type") in ("list_item", "task_list_item")
        ]
        return List(items=items, ordered=ordered, start=start, tight=tight, bullet=bullet)

    def _process_list_item(self, token: dict[str, Any]) -> ListItem:
        task_status: Literal["checked", "unchecked"] | None = None
        attrs = token.get("attrs") or {}
        if token.get("type") == "task_list_item" or "checked" in attrs:
            task_status = "checked" if attrs.get("checked") else "unchecked"

        return ListItem(children=self._process_tokens(token.get("children", [])), task_status=task_status)

    def _process_table(self, token: dict[str, Any]) -> Table:
        """Process table token.

        The header cells are direct children of ``table_head``; body rows sit
        under ``table_body`` as ``table_row`` tokens.
        """
        header = None
        rows = []
        alignments = []

        for section in token.get("children", []):
            section_type = section.get("type", "")
            if section_type == "table_head":
                cells = self._process_table_cells(section.get("children", []))
                header = TableRow(cells=cells, is_header=True)
                alignments = [cell.alignment for cell in cells]
            elif section_type == "table_body":
                for row_token in section.get("children", []):
                    rows.append(TableRow(cells=self._process_table_cells(row_token.get("children", []))))

        return Table(header=header, rows=rows, alignments=alignments)

    def _process_table_cells(self, cell_tokens: list[dict[str, Any]]) -> list[TableCell]:
        cells = []
        for cell_token in cell_tokens:
            if cell_token.get("type") != "table_cell":
                continue
            attrs = cell_token.get("attrs") or {}
            cells.append(
                TableCell(
                    content=self._process_inline_tokens(cell_token.get("children", [])),
                    alignment=attrs.get("align"),
                )
            )
        return cells

    def _process_footnote_item(self, token: dict[str, Any]) -> FootnoteDefinition:
        attrs = token.get("attrs") or {}
        key = attrs.get("key", "")
        return FootnoteDefinition(
            identifier=self._footnote_labels.get(key, key),
            content=self._process_tokens(token.get("children", [])),
        )

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens, merging adjacent text runs."""
        nodes: list[Node] = []

        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
                nodes[-1].content += node.content
                continue
            nodes.append(node)

        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Optional[Node]:
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "strikethrough": self._handle_strikethrough_token,
            "inline_html": self._handle_inline_html_token,
            "inline_math": self._handle_inline_math_token,
            "block_math": self._handle_display_math_token,
            "footnote_ref": self._handle_footnote_ref_token,
        }

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)

        logger.debug(f"Skipping unsupported inline token: {token_type}")
        return None

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        return Text(content=token.get("raw", ""))

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        return Strong(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        return Emphasis(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        return Strikethrough(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Link | LinkReference:
        """Handle link token.

        Reference links carry the ``ref`` key and the ``label`` as written.
        Autolinks are links whose only child is the URL text itself.
        """
        attrs = token.get("attrs") or {}
        url = attrs.get("url", "")
        children = token.get("children", [])
        content = self._process_inline_tokens(children)

        if "ref" in token:
            label = token.get("label") or token["ref"]
            return LinkReference(
                identifier=token["ref"],
                content=content,
                label=label,
                reference_type="shortcut" if label == _plain_text(children) else "full",
            )

        metadata: dict[str, Any] = {}
        if len(children) == 1 and children[0].get("type") == "text":
            from mistune.util import escape_url

            text = children[0].get("raw", "")
            if url in (escape_url(text), escape_url("mailto:" + text)):
                metadata["autolink"] = True

        return Link(url=_restore_url(url), content=content, title=attrs.get("title"), metadata=metadata)

    def _handle_image_token(self, token: dict[str, Any]) -> Image | ImageReference:
        attrs = token.get("attrs") or {}
        alt_text = _plain_text(token.get("children", []))

        if "ref" in token:
            label = token.get("label") or token["ref"]
            return ImageReference(
                identifier=token["ref"],
                alt_text=alt_text,
                label=label,
                reference_type="shortcut" if label == alt_text else "full",
            )

        return Image(url=_restore_url(attrs.get("url", "")), alt_text=alt_text, title=attrs.get("title"))

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=False)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=True)

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        return HTMLInline(content=token.get("raw", ""))

    def _handle_inline_math_token(self, token: dict[str, Any]) -> MathInline:
        return MathInline(content=token.get("raw", ""))

    def _handle_display_math_token(self, token: dict[str, Any]) -> MathBlock:
        # $$...$$ written inside a paragraph
        return MathBlock(content=token.get("raw", ""), metadata={"inline": True})

    def _handle_footnote_ref_token(self, token: dict[str, Any]) -> FootnoteReference:
        key = token.get("raw", "")
        return FootnoteReference(identifier=self._footnote_labels.get(key, key))


def _plain_text(tokens: list[dict[str, Any]]) -> str:
    """Concatenate the raw text of inline tokens, recursively."""
    parts = []
    for token in tokens:
        if "children" in token:
            parts.append(_plain_text(token["children"]))
        else:
            parts.append(token.get("raw", ""))
    return "".join(parts)


def markdown_to_ast(markdown_content: str, options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert a Markdown string to AST.

    Examples
    --------
    >>> doc = markdown_to_ast("# Hello\n\nWorld")
    >>> len(doc.children)
    2

    """
    return MarkdownParser(options).parse(markdown_content)
