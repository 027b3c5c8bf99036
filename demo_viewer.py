#!/usr/bin/env python3
"""Demo script showing an email draft with diff highlighting and mouse selection."""

import json

from markgrid.model import DiffType, DocumentDiff, EmailHeader
from markgrid.viewer import DocumentViewer

DOCUMENT = """# markgrid demo

Drag with the mouse to select text. The selection is tracked in **source
offsets**, so it survives *reflow*, markup and `inline code`.

## Lists

- Bullets are redrawn as dots
- Long items wrap with a hanging indent so the text lines up under the first word of the item
  1. Nested items are renumbered
  7. Like this one

> Quotes get a bar on the left, and wrapped quote lines stay under the bar
> instead of running back to the margin.

---

```
code blocks keep    their spacing
```
"""


def main():
    added = DOCUMENT.index("source")
    removed = DOCUMENT.index("Bullets")
    viewer = DocumentViewer(
        DOCUMENT,
        diffs=[
            DocumentDiff(added, added + len("source\noffsets"), DiffType.ADD),
            DocumentDiff(removed, removed + len("Bullets"), DiffType.DELETE),
        ],
        width=60,
        title="markgrid demo: reply draft",
        email=EmailHeader(
            sender="demo@example.com",
            to=("reader@example.com",),
            subject="Selecting text by source offset",
        ),
    )
    selection = viewer.run()
    if selection is not None:
        print(json.dumps(selection.to_dict(), indent=2))
    print("\nThanks for trying markgrid!")


if __name__ == "__main__":
    main()
