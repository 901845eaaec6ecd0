"""Overlay window and drawing canvas on top of Tk."""

from __future__ import annotations

import re
from typing import Any, Callable, Protocol

from .color import Color, IntPair

FONT_SLOTS = 10
DEFAULT_FAMILY = "Courier"
DEFAULT_SIZE = 12

_SIZE_SUFFIX = re.compile(r"[0-9]+")


class Font(Protocol):
    def measure(self, text: str) -> int: ...
    def metrics(self, name: str) -> int: ...


FontFactory = Callable[[str, int], Font]


def to_hex(color: Color) -> str:
    """Return the colour as a Tk colour string '#rrggbb'; alpha is ignored."""
    return f"#{color.r:02x}{color.g:02x}{color.b:02x}"


def font_spec(name: str) -> tuple[str, int]:
    """Turn a font name of the form 'Family-size' into a (family, size) pair.

    A missing family or a size that is missing or zero falls back to the defaults.
    """
    family, separator, size_text = name.rpartition("-")
    if separator and _SIZE_SUFFIX.fullmatch(size_text):
        size = int(size_text)
    else:
        family, size = name, 0
    return (family or DEFAULT_FAMILY, size if size > 0 else DEFAULT_SIZE)


def _premultiplied(color: Color) -> Color:
    return Color(
        color.r * color.a // 255,
        color.g * color.a // 255,
        color.b * color.a // 255,
        color.a,
    )


def _default_font_factory(widget: Any) -> FontFactory:
    from tkinter import font as tkfont

    def make(family: str, size: int) -> Font:
        return tkfont.Font(root=widget, family=family, size=size)

    return make


class TkCanvas:
    """Draws rectangles and strings into a Tk canvas widget with ten font slots."""

    def __init__(self, widget: Any, font_factory: FontFactory | None = None) -> None:
        self.widget = widget
        self._font_factory = font_factory or _default_font_factory(widget)
        self.color = Color(0, 0, 0)
        self.fonts: list[Font | None] = [None] * FONT_SLOTS
        for n in range(FONT_SLOTS):
            self.set_font(n, "")

    def set_font(self, n: int, fontname: str) -> None:
        """Load a font into slot n; slots outside 0..9 are ignored."""
        if not 0 <= n < FONT_SLOTS:
            return
        family, size = font_spec(fontname)
        self.fonts[n] = self._font_factory(family, size)

    def set_color(self, color: Color) -> None:
        self.color = color

    def _fill(self) -> str:
        return to_hex(_premultiplied(self.color))

    def _font(self, font_n: int) -> Font:
        if not 0 <= font_n < FONT_SLOTS:
            raise ValueError(f"font slot {font_n} is not in the range 0..{FONT_SLOTS - 1}")
        font = self.fonts[font_n]
        assert font is not None
        return font

    def draw_rect(self, x: int, y: int, w: int, h: int) -> None:
        """Fill a rectangle in the current colour; fully transparent draws nothing."""
        if self.color.a == 0 or w <= 0 or h <= 0:
            return
        self.widget.create_rectangle(x, y, x + w, y + h, fill=self._fill(), width=0)

    def draw_string(self, x: int, y: int, font_n: int, text: str) -> None:
        """Draw text with its top-left corner at (x, y)."""
        font = self._font(font_n)
        if self.color.a == 0:
            return
        self.widget.create_text(x, y, text=text, anchor="nw", font=font, fill=self._fill())

    def string_dimension(self, font_n: int, text: str) -> IntPair:
        """Advance width of text and line height of the font."""
        font = self._font(font_n)
        return IntPair(font.measure(text), font.metrics("ascent") + font.metrics("descent"))


def _create_root() -> Any:
    try:
        import tkinter
    except ImportError as exc:
        raise RuntimeError("opening display... FAILED") from exc
    try:
        root = tkinter.Tk()
    except tkinter.TclError as exc:
        raise RuntimeError("opening display... FAILED") from exc
    root.overrideredirect(True)
    root.attributes("-topmost", True)
    root.configure(background="black")
    return root


def _create_canvas_widget(root: Any, width: int, height: int) -> Any:
    import tkinter

    widget = tkinter.Canvas(
        root, width=width, height=height, highlightthickness=0, borderwidth=0, background="black"
    )
    widget.pack(fill="both", expand=True)
    return widget


class TkWindow:
    """A borderless, always-on-top window placed relative to a monitor."""

    def __init__(
        self,
        x: int = 0,
        y: int = 0,
        width: int = 480,
        height: int = 640,
        *,
        root: Any = None,
        canvas_widget: Any = None,
        font_factory: FontFactory | None = None,
    ) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.monitor_index = -1
        self._monitor = (0, 0, 0, 0)
        self._font_factory = font_factory
        self.root = root if root is not None else _create_root()
        self.canvas_widget = (
            canvas_widget
            if canvas_widget is not None
            else _create_canvas_widget(self.root, width, height)
        )
        self._apply_geometry()
        self.set_active_monitor(0)

    @property
    def monitor_width(self) -> int:
        return self._monitor[2]

    @property
    def monitor_height(self) -> int:
        return self._monitor[3]

    def _monitors(self) -> list[tuple[int, int, int, int]]:
        return [(0, 0, self.root.winfo_screenwidth(), self.root.winfo_screenheight())]

    def _apply_geometry(self) -> None:
        left = self._monitor[0] + self.x
        top = self._monitor[1] + self.y
        self.root.geometry(f"{self.width}x{self.height}+{left}+{top}")

    def set_active_monitor(self, index: int) -> None:
        if self.monitor_index != index:
            self.monitor_index = index
            self.update_active_monitor()

    def update_active_monitor(self) -> bool:
        """Re-read the active monitor's area; True if it changed."""
        monitors = self._monitors()
        current = monitors[min(self.monitor_index, len(monitors) - 1)]
        if current == self._monitor:
            return False
        self._monitor = current
        self._apply_geometry()
        return True

    def create_canvas(self) -> TkCanvas:
        return TkCanvas(self.canvas_widget, self._font_factory)

    def move(self, x: int, y: int) -> None:
        if (self.x, self.y) != (x, y):
            self.x, self.y = x, y
            self._apply_geometry()

    def resize(self, width: int, height: int) -> None:
        if (self.width, self.height) != (width, height):
            self.width, self.height = width, height
            self.canvas_widget.configure(width=width, height=height)
            self._apply_geometry()

    def mouse_position(self) -> IntPair:
        """Pointer position relative to the window's top-left corner."""
        px, py = self.root.winfo_pointerxy()
        return IntPair(px - (self._monitor[0] + self.x), py - (self._monitor[1] + self.y))

    def clear(self) -> None:
        self.canvas_widget.delete("all")

    def flush(self) -> None:
        self.root.update_idletasks()
        self.root.update()

    def close(self) -> None:
        self.root.destroy()