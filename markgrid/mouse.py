"""Pointer events in SGR extended mouse format.

A report looks like ESC [ < btn ; x ; y M (press, motion) or ... m
(release), with 1-based screen coordinates. The button byte packs the
button number and modifier flags.
"""

import re
from dataclasses import dataclass, field

SGR_MOUSE_RE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([Mm])")

# Button byte layout
BUTTON_MASK = 3  # 0=left, 1=middle, 2=right, 3=no button
SHIFT_FLAG = 4
META_FLAG = 8
CTRL_FLAG = 16
MOTION_FLAG = 32
WHEEL_FLAG = 64

LEFT_BUTTON = 0


@dataclass(frozen=True)
class MouseModifiers:
    shift: bool = False
    meta: bool = False
    ctrl: bool = False


@dataclass(frozen=True)
class MouseEvent:
    x: int  # 1-based column
    y: int  # 1-based row
    button: int = LEFT_BUTTON
    pressed: bool = True  # False on release
    is_motion: bool = False
    is_wheel: bool = False
    modifiers: MouseModifiers = field(default_factory=MouseModifiers)

    @property
    def wheel_delta(self) -> int:
        """-1 for wheel up, +1 for wheel down, 0 otherwise."""
        if not self.is_wheel:
            return 0
        return -1 if self.button == 0 else 1


def decode_button(btn: int, x: int, y: int, pressed: bool) -> MouseEvent:
    """Build a MouseEvent from the numeric fields of an SGR report."""
    button = btn & BUTTON_MASK
    return MouseEvent(
        x=x,
        y=y,
        # 3 means no button held (plain motion)
        button=LEFT_BUTTON if button == 3 else button,
        pressed=pressed,
        is_motion=bool(btn & MOTION_FLAG),
        is_wheel=bool(btn & WHEEL_FLAG),
        modifiers=MouseModifiers(
            shift=bool(btn & SHIFT_FLAG),
            meta=bool(btn & META_FLAG),
            ctrl=bool(btn & CTRL_FLAG),
        ),
    )
