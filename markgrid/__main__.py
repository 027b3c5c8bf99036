"""markgrid - view a markup document in the terminal and select text.

Usage:
    python -m markgrid FILE [--width N] [--diffs FILE.json] [--title TEXT]
                       [--email-header FILE.json] [--read-only] [--print]

Options:
    --width N          Layout width in columns (20-400)
    --diffs FILE.json  JSON list of {"startOffset", "endOffset", "type"} ranges
    --title TEXT       Title shown above the document (default: file name)
    --email-header FILE.json
                       Show the document as an email body below
                       {"from", "to", "cc", "bcc", "subject"}
    --read-only        Scroll only; no selection
    --print            Write the rendered document to stdout and exit

Controls:
    Mouse drag: Select text
    Wheel, j/k, arrows: Scroll
    Space/b, PgDn/PgUp: Page
    g/G, Home/End: Top/bottom
    q, Esc: Close (the selection is printed as JSON)

Set MARKGRID_LOG=/path/to/file to write debug logs.
"""

import json
import logging
import os
import sys
from typing import Optional

from .constants import RendererConstants
from .header import email_header_lines, header_lines
from .model import DocumentDiff, EmailHeader
from .settings_persistence import SettingsPersistence
from .terminal import TerminalInterface
from .view import render
from .viewer import DocumentViewer

logger = logging.getLogger(__name__)

USAGE = (
    "usage: python -m markgrid FILE [--width N] [--diffs FILE.json] [--title TEXT]"
    " [--email-header FILE.json] [--read-only] [--print]"
)


class UsageError(Exception):
    pass


def parse_args(argv: list[str]) -> dict:
    """Parse command line arguments into an options dict."""
    options = {
        'path': None,
        'width': None,
        'diffs_path': None,
        'title': None,
        'email_path': None,
        'read_only': False,
        'print': False,
    }
    args = list(argv)
    while args:
        arg = args.pop(0)
        if arg in ('-h', '--help'):
            raise UsageError(__doc__)
        elif arg == '--width':
            if not args:
                raise UsageError("--width needs a value")
            try:
                width = int(args.pop(0))
            except ValueError:
                raise UsageError("--width must be an integer")
            if not RendererConstants.MIN_WIDTH <= width <= RendererConstants.MAX_WIDTH:
                raise UsageError(
                    f"--width must be between {RendererConstants.MIN_WIDTH} "
                    f"and {RendererConstants.MAX_WIDTH}")
            options['width'] = width
        elif arg == '--diffs':
            if not args:
                raise UsageError("--diffs needs a file name")
            options['diffs_path'] = args.pop(0)
        elif arg == '--title':
            if not args:
                raise UsageError("--title needs a value")
            options['title'] = args.pop(0)
        elif arg == '--email-header':
            if not args:
                raise UsageError("--email-header needs a file name")
            options['email_path'] = args.pop(0)
        elif arg == '--read-only':
            options['read_only'] = True
        elif arg == '--print':
            options['print'] = True
        elif arg.startswith('-'):
            raise UsageError(f"unknown option {arg}")
        elif options['path'] is None:
            options['path'] = arg
        else:
            raise UsageError("only one FILE may be given")
    if options['path'] is None:
        raise UsageError("missing FILE")
    return options


def load_diffs(path: str) -> list[DocumentDiff]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("diff file must contain a JSON list")
    return [DocumentDiff.from_dict(item) for item in data]


def load_email_header(path: str) -> EmailHeader:
    with open(path, 'r', encoding='utf-8') as f:
        return EmailHeader.from_dict(json.load(f))


def print_document(content: str, diffs: list[DocumentDiff], width: int,
                   terminal: Optional[TerminalInterface] = None,
                   title: Optional[str] = None, email: Optional[EmailHeader] = None) -> None:
    """Write the styled render to stdout, one row per line.

    The title and email header are printed above the document when given.
    """
    terminal = terminal or TerminalInterface()
    if title:
        lines = header_lines(title, email, width)
    elif email is not None:
        lines = email_header_lines(email, width)
    else:
        lines = []
    lines.extend(render(content, diffs, width=width))
    for line in lines:
        print(terminal.compose_line(line, width).rstrip())


def _configure_logging() -> None:
    log_file = os.environ.get('MARKGRID_LOG')
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


def main(argv: Optional[list[str]] = None) -> int:
    _configure_logging()
    try:
        options = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        print(e, file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2

    path = options['path']
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
        diffs = load_diffs(options['diffs_path']) if options['diffs_path'] else []
        email = load_email_header(options['email_path']) if options['email_path'] else None
    except (OSError, ValueError, KeyError) as e:
        print(f"markgrid: {e}", file=sys.stderr)
        return 1

    if options['print']:
        print_document(content, diffs, options['width'] or RendererConstants.DEFAULT_WIDTH,
                       title=options['title'], email=email)
        return 0

    viewer = DocumentViewer(
        content,
        path=path,
        diffs=diffs,
        width=options['width'],
        read_only=options['read_only'],
        title=options['title'],
        email=email,
        persistence=SettingsPersistence(),
    )
    logger.debug("opening viewer for %s", path)
    selection = viewer.run()
    if selection is not None:
        print(json.dumps(selection.to_dict()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
