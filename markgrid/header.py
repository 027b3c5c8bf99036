"""Rows drawn above the document: the title and an optional email header.

Header rows are decorations, not source text. They are laid out as
RenderedLines so the terminal can style them like document rows, but their
segments carry no source span and never enter the position map.
"""

from typing import Optional

from .constants import (
    EMAIL_FIELD_STYLES,
    EMAIL_LABEL_STYLE,
    RULE_STYLE,
    TITLE_STYLE,
    RendererConstants,
)
from .model import EmailHeader, RenderedLine, Segment, SegmentStyle


def _row(*parts: tuple[str, SegmentStyle]) -> RenderedLine:
    segments = tuple(Segment(text, 0, 0, style) for text, style in parts if text)
    return RenderedLine(line_number=0, source_offset=0, source_length=0,
                        segments=segments, is_blank=not segments)


def _field(label: str, value: str, style: SegmentStyle) -> RenderedLine:
    return _row((label.ljust(RendererConstants.EMAIL_LABEL_WIDTH), EMAIL_LABEL_STYLE), (value, style))


def email_header_lines(email: EmailHeader, width: int) -> list[RenderedLine]:
    """Lay out From/To/Cc/Bcc, the subject and a closing rule.

    Empty address fields are left out. Values longer than the row are cut
    off by the terminal, not wrapped.
    """
    rows = []
    for label, key, value in (
        ("From:", "from", email.sender),
        ("To:", "to", ", ".join(email.to)),
        ("Cc:", "cc", ", ".join(email.cc)),
        ("Bcc:", "bcc", ", ".join(email.bcc)),
    ):
        if value:
            rows.append(_field(label, value, EMAIL_FIELD_STYLES[key]))
    rows.append(_row())
    rows.append(_field("Subject:", email.subject, EMAIL_FIELD_STYLES["subject"]))
    rows.append(_row())
    rows.append(_row(("─" * max(0, width - RendererConstants.RULE_MARGIN), RULE_STYLE)))
    rows.append(_row())
    return rows


def header_lines(title: str, email: Optional[EmailHeader] = None,
                 width: int = RendererConstants.DEFAULT_WIDTH) -> list[RenderedLine]:
    """Title row, followed by the email header when there is one."""
    lines = [_row((title, TITLE_STYLE))]
    if email is not None:
        lines.extend(email_header_lines(email, width))
    return lines
