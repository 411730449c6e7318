"""Render a structured rich-text document to an HTML string.

Text is escaped here as well as filtered later by the sanitizer, so a gap in
either layer does not on its own become a stored-XSS vector.
"""

import html
from typing import Any, Callable, Dict, Optional, Union

from inkwell.models.document import DocumentNode, Mark, MarkType, NodeType

# Node kinds that map one-to-one onto a wrapping tag
_BLOCK_TAGS: Dict[str, str] = {
    NodeType.PARAGRAPH: "p",
    NodeType.BULLET_LIST: "ul",
    NodeType.LIST_ITEM: "li",
    NodeType.BLOCKQUOTE: "blockquote",
}

# Mark kinds that map one-to-one onto a wrapping tag (link and highlight need attrs)
_MARK_TAGS: Dict[str, str] = {
    MarkType.BOLD: "strong",
    MarkType.ITALIC: "em",
    MarkType.CODE: "code",
    MarkType.STRIKE: "s",
    MarkType.UNDERLINE: "u",
}

_ALIGNMENTS = {"center", "right", "justify"}

HIGHLIGHT_CLASS = "highlight"


def _attr(name: str, value: Any) -> str:
    return f' {name}="{html.escape(str(value), quote=True)}"'


def _align_class(node: DocumentNode) -> str:
    align = (node.attrs or {}).get("textAlign")
    if align in _ALIGNMENTS:
        return _attr("class", f"text-{align}")
    return ""


def _children(node: DocumentNode) -> str:
    return "".join(_render_node(child) for child in node.content or [])


def _render_block(node: DocumentNode) -> str:
    tag = _BLOCK_TAGS[node.type]
    attrs = _align_class(node) if node.type == NodeType.PARAGRAPH else ""
    return f"<{tag}{attrs}>{_children(node)}</{tag}>"


def _render_heading(node: DocumentNode) -> str:
    level = (node.attrs or {}).get("level", 1)
    if not isinstance(level, int) or isinstance(level, bool) or not 1 <= level <= 6:
        level = 1
    return f"<h{level}{_align_class(node)}>{_children(node)}</h{level}>"


def _render_ordered_list(node: DocumentNode) -> str:
    start = (node.attrs or {}).get("start", 1)
    attrs = _attr("start", start) if isinstance(start, int) and start != 1 else ""
    return f"<ol{attrs}>{_children(node)}</ol>"


def _render_code_block(node: DocumentNode) -> str:
    language = (node.attrs or {}).get("language")
    attrs = _attr("class", f"language-{language}") if language else ""
    return f"<pre><code{attrs}>{_children(node)}</code></pre>"


def _render_text(node: DocumentNode) -> str:
    markup = html.escape(node.text or "", quote=False)
    # Wrap innermost first so the first declared mark ends up outermost
    for mark in reversed(node.marks or []):
        markup = _wrap_mark(mark, markup)
    return markup


def _wrap_mark(mark: Mark, inner: str) -> str:
    if mark.type in _MARK_TAGS:
        tag = _MARK_TAGS[mark.type]
        return f"<{tag}>{inner}</{tag}>"
    if mark.type == MarkType.HIGHLIGHT:
        return f'<span class="{HIGHLIGHT_CLASS}">{inner}</span>'
    if mark.type == MarkType.LINK:
        attrs = mark.attrs or {}
        rendered = ""
        if attrs.get("href"):
            rendered += _attr("href", attrs["href"])
        if attrs.get("target"):
            rendered += _attr("target", attrs["target"])
        return f"<a{rendered}>{inner}</a>"
    # Unknown mark: keep the text, drop the styling
    return inner


_RENDERERS: Dict[str, Callable[[DocumentNode], str]] = {
    NodeType.DOC: _children,
    NodeType.PARAGRAPH: _render_block,
    NodeType.HEADING: _render_heading,
    NodeType.BULLET_LIST: _render_block,
    NodeType.ORDERED_LIST: _render_ordered_list,
    NodeType.LIST_ITEM: _render_block,
    NodeType.BLOCKQUOTE: _render_block,
    NodeType.CODE_BLOCK: _render_code_block,
    NodeType.HARD_BREAK: lambda node: "<br>",
    NodeType.HORIZONTAL_RULE: lambda node: "<hr>",
    NodeType.TEXT: _render_text,
}


def _render_node(node: DocumentNode) -> str:
    renderer: Optional[Callable[[DocumentNode], str]] = _RENDERERS.get(node.type)
    if renderer is None:
        # Unknown node kind: render its children without a wrapper
        return _children(node)
    return renderer(node)


def render_to_markup(doc: Union[DocumentNode, Dict[str, Any]]) -> str:
    """Render *doc* (a node tree or its JSON form) to an HTML string.

    Pure and deterministic: the same document always yields the same markup.
    """
    if isinstance(doc, dict):
        doc = DocumentNode.model_validate(doc)
    return _render_node(doc)
