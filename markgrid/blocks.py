"""Block-level parsing of the markup source.

The parser is a single forward scan over the source lines. Each line is
classified by ordered pattern checks; multi-line constructs (code fences,
quotes, lists, paragraphs) greedily consume the lines that belong to them.
Blocks keep their line terminators so that concatenating every block's
`source_text` gives back the original document.
"""

import re

from .model import Block, BlockKind

HEADING_RE = re.compile(r"^(#{1,4})\s")
RULE_RE = re.compile(r"^[-*_]{3,}\s*$")
FENCE = "```"
UNORDERED_RE = re.compile(r"^[-*+]\s")
ORDERED_RE = re.compile(r"^\d+\.\s")
# Item lines inside a list, nested items included
LIST_ITEM_RE = re.compile(r"^(\s*)([-*+]|\d+\.)(\s+)")


def _is_blank(line: str) -> bool:
    return line.strip() == ""


def _starts_block(line: str) -> bool:
    """True if the line opens a block other than a paragraph."""
    return bool(
        HEADING_RE.match(line)
        or RULE_RE.match(line)
        or line.startswith(FENCE)
        or line.startswith(">")
        or UNORDERED_RE.match(line)
        or ORDERED_RE.match(line)
    )


def _classify(line: str) -> BlockKind:
    if _is_blank(line):
        return BlockKind.BLANK
    if HEADING_RE.match(line):
        return BlockKind.HEADING
    if RULE_RE.match(line):
        return BlockKind.HR
    if line.startswith(FENCE):
        return BlockKind.CODE_BLOCK
    if line.startswith(">"):
        return BlockKind.BLOCKQUOTE
    if UNORDERED_RE.match(line) or ORDERED_RE.match(line):
        return BlockKind.LIST
    return BlockKind.PARAGRAPH


def _continues_quote(line: str) -> bool:
    # Quote markers, or lazy soft-wrapped text that starts nothing else
    return line.startswith(">") or (not _is_blank(line) and not _starts_block(line))


def _continues_list(line: str, ordered: bool) -> bool:
    if _is_blank(line):
        return False
    same_kind = ORDERED_RE if ordered else UNORDERED_RE
    if same_kind.match(line):
        return True
    # Indented lines belong to the list (nested items, continuations)
    if line[:1].isspace():
        return True
    return not _starts_block(line)


def _continues_paragraph(line: str) -> bool:
    return not _is_blank(line) and not _starts_block(line)


def _consume(lines: list[str], start: int, keep_going) -> int:
    """Return the index one past the last line accepted by keep_going."""
    i = start
    while i < len(lines) and keep_going(lines[i]):
        i += 1
    return i


def _consume_fence(lines: list[str], start: int) -> int:
    i = start + 1
    while i < len(lines) and not lines[i].startswith(FENCE):
        i += 1
    # Include the closing fence; an unterminated fence runs to the end
    return min(i + 1, len(lines))


def parse_blocks(content: str) -> list[Block]:
    """Split source text into typed blocks in source order.

    Never raises: malformed markup falls through to paragraph text, and the
    empty string produces a single blank block.
    """
    lines = content.split("\n")
    last = len(lines) - 1
    blocks: list[Block] = []
    offset = 0
    i = 0

    while i < len(lines):
        line = lines[i]
        kind = _classify(line)
        level = None
        ordered = None

        if kind == BlockKind.HEADING:
            level = len(HEADING_RE.match(line).group(1))
            end = i + 1
        elif kind in (BlockKind.BLANK, BlockKind.HR):
            end = i + 1
        elif kind == BlockKind.CODE_BLOCK:
            end = _consume_fence(lines, i)
        elif kind == BlockKind.BLOCKQUOTE:
            end = _consume(lines, i + 1, _continues_quote)
        elif kind == BlockKind.LIST:
            ordered = bool(ORDERED_RE.match(line))
            end = _consume(lines, i + 1, lambda ln: _continues_list(ln, ordered))
        else:
            end = _consume(lines, i + 1, _continues_paragraph)

        consumed = lines[i:end]
        source_text = "\n".join(consumed)
        if end - 1 < last:
            source_text += "\n"

        items: tuple[str, ...] = ()
        if kind == BlockKind.LIST:
            items = tuple(ln for ln in consumed if LIST_ITEM_RE.match(ln))

        blocks.append(Block(
            kind=kind,
            source_text=source_text,
            source_offset=offset,
            level=level,
            ordered=ordered,
            items=items,
        ))
        offset += len(source_text)
        i = end

    return blocks
