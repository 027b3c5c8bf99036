from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Optional


class BlockKind(Enum):
    """Block types produced by the block parser."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE_BLOCK = "codeBlock"
    LIST = "list"
    BLOCKQUOTE = "blockquote"
    HR = "hr"
    BLANK = "blank"


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    source_text: str  # Includes the line terminators of the consumed lines
    source_offset: int
    level: Optional[int] = None  # Heading level (1-4)
    ordered: Optional[bool] = None  # Lists only
    items: tuple[str, ...] = ()  # Item lines of a list

    @property
    def source_end(self) -> int:
        return self.source_offset + len(self.source_text)

    def source_lines(self) -> list[tuple[str, int]]:
        """Return (line, offset) pairs without line terminators."""
        result = []
        offset = self.source_offset
        for line in self.source_text.split("\n"):
            result.append((line, offset))
            offset += len(line) + 1
        # A trailing terminator leaves an empty piece that belongs to the next block
        if self.source_text.endswith("\n"):
            result.pop()
        return result


@dataclass(frozen=True)
class SegmentStyle:
    """Visual attributes of a segment. None means "not set"."""
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    dim: Optional[bool] = None
    kind: Optional[str] = None

    def merged(self, other: "Optional[SegmentStyle]") -> "SegmentStyle":
        """Return a copy with every attribute that `other` sets applied on top."""
        if other is None:
            return self
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        if not changes:
            return self
        return replace(self, **changes)


@dataclass(frozen=True)
class Segment:
    text: str
    source_offset: int
    source_length: int
    style: SegmentStyle = field(default_factory=SegmentStyle)

    @property
    def source_end(self) -> int:
        return self.source_offset + self.source_length

    @property
    def is_atomic(self) -> bool:
        """True for decorations whose display text does not mirror the source.

        Atomic segments (bullets, quote bars, rules, normalized heading
        markers) cannot be split character-by-character against the source.
        """
        return len(self.text) != self.source_length

    def offset_at(self, index: int) -> int:
        """Source offset for display character `index`."""
        if not self.is_atomic:
            return self.source_offset + index
        if self.source_length == 0:
            return self.source_offset
        return self.source_offset + min(index, self.source_length - 1)

    def slice(self, start: int, end: int) -> "Segment":
        """Sub-segment covering display characters [start, end)."""
        if start <= 0 and end >= len(self.text):
            return self
        if self.is_atomic:
            offset = self.offset_at(start) if start < len(self.text) else self.source_end
            end_offset = self.offset_at(end - 1) + 1 if end > start else offset
            length = max(0, min(end_offset, self.source_end) - offset)
            return replace(self, text=self.text[start:end], source_offset=offset, source_length=length)
        return replace(
            self,
            text=self.text[start:end],
            source_offset=self.source_offset + start,
            source_length=end - start,
        )


@dataclass(frozen=True)
class RenderedLine:
    line_number: int  # 1-based source line holding source_offset
    source_offset: int
    source_length: int
    segments: tuple[Segment, ...]
    indent: int = 0
    is_blank: bool = False

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.segments)


@dataclass(frozen=True)
class PositionMapping:
    terminal_row: int  # 1-based
    terminal_col: int  # 1-based
    source_offset: int


class DiffType(Enum):
    ADD = "add"
    DELETE = "delete"


@dataclass(frozen=True)
class DocumentDiff:
    start_offset: int
    end_offset: int
    type: DiffType

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentDiff":
        """Build a diff from its JSON form {"startOffset", "endOffset", "type"}."""
        return cls(
            start_offset=int(data["startOffset"]),
            end_offset=int(data["endOffset"]),
            type=DiffType(data["type"]),
        )


def _address_list(value, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"email header field {key!r} must be a string or a list of strings")
    return tuple(value)


@dataclass(frozen=True)
class EmailHeader:
    """Envelope fields shown above an email body."""

    sender: str
    to: tuple[str, ...]
    subject: str
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "EmailHeader":
        """Build a header from {"from", "to", "cc"?, "bcc"?, "subject"}."""
        if not isinstance(data, dict):
            raise ValueError("email header must be a JSON object")
        sender = data.get("from", "")
        subject = data.get("subject", "")
        if not isinstance(sender, str) or not isinstance(subject, str):
            raise ValueError("email header 'from' and 'subject' must be strings")
        return cls(
            sender=sender,
            to=_address_list(data.get("to"), "to"),
            subject=subject,
            cc=_address_list(data.get("cc"), "cc"),
            bcc=_address_list(data.get("bcc"), "bcc"),
        )


@dataclass(frozen=True)
class OverlayRange:
    start_offset: int
    end_offset: int
    style: SegmentStyle


@dataclass(frozen=True)
class SelectionState:
    is_selecting: bool = False
    anchor_offset: Optional[int] = None
    focus_offset: Optional[int] = None
    start_offset: Optional[int] = None
    end_offset: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.start_offset is None
            or self.end_offset is None
            or self.start_offset == self.end_offset
        )

    def with_focus(self, offset: int) -> "SelectionState":
        """Move the focus and renormalize start/end against the anchor."""
        anchor = self.anchor_offset if self.anchor_offset is not None else offset
        return replace(
            self,
            focus_offset=offset,
            start_offset=min(anchor, offset),
            end_offset=max(anchor, offset),
        )


@dataclass(frozen=True)
class DocumentSelection:
    selected_text: str
    start_offset: int
    end_offset: int
    start_line: int
    end_line: int
    start_column: int
    end_column: int

    def to_dict(self) -> dict:
        """JSON form used by hosts of the viewer."""
        return {
            "selectedText": self.selected_text,
            "startOffset": self.start_offset,
            "endOffset": self.end_offset,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "startColumn": self.start_column,
            "endColumn": self.end_column,
        }
