"""Allow-list HTML sanitizer for rendered post and page content.

The output of :func:`sanitize` is embedded into public pages without further
escaping, so every tag, attribute and URL that survives must be listed below.
"""

import logging

from bs4 import (
    BeautifulSoup,
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)
from bs4.builder import ParserRejectedMarkup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset(
    {
        "h1",
        "h2",
        "h3",
        "h4",
        "p",
        "strong",
        "em",
        "ul",
        "ol",
        "li",
        "a",
        "br",
        "code",
        "pre",
        "blockquote",
        "span",
    }
)

# Attributes permitted on specific tags, on top of GLOBAL_ATTRIBUTES
ALLOWED_ATTRIBUTES = {
    "a": frozenset({"href", "target", "rel"}),
}

GLOBAL_ATTRIBUTES = frozenset({"class"})

ALLOWED_URL_PREFIXES = ("https://",)

# Tags whose entire subtree is removed instead of unwrapped: their content is
# raw script/markup, not readable text.
DROP_CONTENT_TAGS = frozenset(
    {
        "script",
        "style",
        "noscript",
        "iframe",
        "object",
        "embed",
        "applet",
        "template",
        "textarea",
        "title",
        "svg",
        "math",
        "select",
        "option",
    }
)

SAFE_REL = "noopener noreferrer"

_NON_TEXT_NODES = (Comment, CData, Declaration, Doctype, ProcessingInstruction)

# Whitespace inside these tags is kept verbatim by the parser
PRESERVE_WHITESPACE_TAGS = frozenset({"pre", "textarea"})
_ASCII_SPACES = BeautifulSoup.ASCII_SPACES

# Escape only &, < and >; emit void tags as <br> so sanitized output re-parses
# to the same tree.
_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


def _filter_attributes(tag: Tag) -> None:
    allowed = ALLOWED_ATTRIBUTES.get(tag.name, frozenset()) | GLOBAL_ATTRIBUTES
    for attr in [name for name in tag.attrs if name not in allowed]:
        del tag[attr]


def _transform_anchor(tag: Tag) -> None:
    if tag.get("target") == "_blank":
        tag["rel"] = SAFE_REL
    href = tag.get("href")
    if href is not None and not str(href).startswith(ALLOWED_URL_PREFIXES):
        del tag["href"]


def _merge_adjacent_strings(soup: BeautifulSoup) -> None:
    # Same result as Tag.smooth(), without its recursion over nested tags
    for node in soup.find_all(string=True):
        previous = node.previous_sibling
        if isinstance(previous, NavigableString):
            previous.replace_with(previous + node)
            node.extract()


def _collapse_whitespace(soup: BeautifulSoup) -> None:
    """Fold whitespace-only strings the way the parser does on the next read.

    Unwrapping leaves neighbouring whitespace strings that
    :func:`_merge_adjacent_strings` joins into a run; the parser would read
    that run back as a single space or newline, so the output must already
    be in that form.
    """
    for node in soup.find_all(string=True):
        if not isinstance(node, NavigableString) or not node:
            continue
        if any(ch not in _ASCII_SPACES for ch in node):
            continue
        if any(parent.name in PRESERVE_WHITESPACE_TAGS for parent in node.parents):
            continue
        collapsed = "\n" if "\n" in node else " "
        if node != collapsed:
            node.replace_with(collapsed)


def sanitize(markup: str) -> str:
    """Filter *markup* down to the allow-listed tags, attributes and schemes.

    Disallowed tags are unwrapped (their text is kept) except for
    :data:`DROP_CONTENT_TAGS`, which are removed together with their content.
    Never raises: markup the parser rejects outright yields an empty string.
    """
    try:
        soup = BeautifulSoup(markup, "html.parser")
    except ParserRejectedMarkup as exc:
        logger.warning("Parser rejected markup, discarding it: %s", exc)
        return ""

    # Remove comments, doctypes and other non-text nodes
    for node in soup.find_all(string=lambda text: isinstance(text, _NON_TEXT_NODES)):
        node.extract()

    # Walk the tags bottom-up so children are settled before their parent is
    # unwrapped or dropped; iterative to cope with arbitrarily deep nesting.
    for tag in reversed(soup.find_all(True)):
        if tag.name in DROP_CONTENT_TAGS:
            tag.decompose()
            continue
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        _filter_attributes(tag)
        if tag.name == "a":
            _transform_anchor(tag)

    _merge_adjacent_strings(soup)
    _collapse_whitespace(soup)

    return soup.decode(formatter=_FORMATTER)
