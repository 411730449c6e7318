from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, model_validator


class NodeType(str, Enum):
    """Node kinds the renderer knows how to emit."""

    DOC = "doc"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "codeBlock"
    HARD_BREAK = "hardBreak"
    HORIZONTAL_RULE = "horizontalRule"
    TEXT = "text"


class MarkType(str, Enum):
    """Inline style annotations carried by text nodes."""

    BOLD = "bold"
    ITALIC = "italic"
    HIGHLIGHT = "highlight"
    LINK = "link"
    CODE = "code"
    STRIKE = "strike"
    UNDERLINE = "underline"


class Mark(BaseModel):
    type: str
    attrs: Optional[Dict[str, Any]] = None


class DocumentNode(BaseModel):
    """One node of a structured rich-text document.

    ``type`` stays a plain string so documents written by a newer editor
    (unknown node kinds) still load; the renderer decides what to do with them.
    """

    type: str
    attrs: Optional[Dict[str, Any]] = None
    content: Optional[List["DocumentNode"]] = None
    text: Optional[str] = None
    marks: Optional[List[Mark]] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "DocumentNode":
        if self.type == NodeType.TEXT:
            if self.text is None:
                raise ValueError("text nodes must carry a text value")
            if self.content:
                raise ValueError("text nodes cannot have child content")
        elif self.text is not None or self.marks:
            raise ValueError(f"'{self.type}' nodes cannot carry text or marks")
        return self


DocumentNode.model_rebuild()
