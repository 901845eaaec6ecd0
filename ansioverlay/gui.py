"""Layout and drawing of ANSI-coloured text lines in an overlay window."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from . import ansi
from .ansi import Profile, Sequence
from .color import Color, IntPair


class Orientation(Enum):
    """Where the overlay sits on the monitor and how its lines are aligned."""

    N = 0
    NE = 1
    E = 2
    SE = 3
    S = 4
    SW = 5
    W = 6
    NW = 7
    CENTER = 8
    NONE = 9

    def to_string(self) -> str:
        return "" if self is Orientation.NONE else self.name

    @classmethod
    def from_string(cls, text: str) -> Orientation:
        """Return the orientation named by text, or Orientation.NONE if there is none."""
        for orientation in cls:
            if orientation is not cls.NONE and orientation.to_string() == text:
                return orientation
        return cls.NONE


_WEST = (Orientation.NW, Orientation.W, Orientation.SW)
_CENTERED_X = (Orientation.N, Orientation.CENTER, Orientation.S)
_EAST = (Orientation.NE, Orientation.E, Orientation.SE)
_CENTERED_Y = (Orientation.W, Orientation.CENTER, Orientation.E)
_SOUTH = (Orientation.SW, Orientation.S, Orientation.SE)


class Canvas(Protocol):
    def set_font(self, n: int, fontname: str) -> None: ...
    def set_color(self, color: Color) -> None: ...
    def draw_rect(self, x: int, y: int, w: int, h: int) -> None: ...
    def draw_string(self, x: int, y: int, font_n: int, text: str) -> None: ...
    def string_dimension(self, font_n: int, text: str) -> IntPair: ...


class Window(Protocol):
    width: int
    height: int
    monitor_width: int
    monitor_height: int

    def set_active_monitor(self, index: int) -> None: ...
    def update_active_monitor(self) -> bool: ...
    def create_canvas(self) -> Canvas: ...
    def move(self, x: int, y: int) -> None: ...
    def resize(self, width: int, height: int) -> None: ...
    def mouse_position(self) -> IntPair: ...
    def clear(self) -> None: ...
    def flush(self) -> None: ...


@dataclass(frozen=True)
class DrawColorCmd:
    """Select a colour, dimmed by the alpha factor given when drawn."""

    color: Color

    def draw(self, canvas: Canvas, offset_x: int, alpha: float) -> None:
        canvas.set_color(self.color.with_alpha(self.color.a * alpha))


@dataclass(frozen=True)
class DrawRectCmd:
    """Fill a rectangle in the current colour."""

    x: int
    y: int
    w: int
    h: int

    def draw(self, canvas: Canvas, offset_x: int, alpha: float) -> None:
        canvas.draw_rect(self.x + offset_x, self.y, self.w, self.h)


@dataclass(frozen=True)
class DrawTextCmd:
    """Draw a string in the current colour with one of the fonts."""

    x: int
    y: int
    font_n: int
    text: str

    def draw(self, canvas: Canvas, offset_x: int, alpha: float) -> None:
        canvas.draw_string(self.x + offset_x, self.y, self.font_n, self.text)


DrawCmd = DrawColorCmd | DrawRectCmd | DrawTextCmd


@dataclass(frozen=True)
class ClippingBox:
    """The area covered by one line of text, used for mouse-over detection."""

    x: int
    y: int
    w: int
    h: int


def trim_linefeeds_and_apply_tabs(text: str) -> str:
    """Drop CR and LF characters and expand tabs to the next multiple of four."""
    out: list[str] = []
    size = 0
    for char in text:
        if char in "\r\n":
            continue
        if char == "\t":
            if size % 4 == 0:
                out.append("    ")
                size += 4
            while size % 4 != 0:
                out.append(" ")
                size += 1
        else:
            out.append(char)
            size += 1
    return "".join(out)


def trim_for_orientation(orientation: Orientation, text: str) -> str:
    """Keep indentation for west, strip it for centre, mirror it for east."""
    if orientation in _WEST:
        return text
    stripped = text.strip(" ")
    if not stripped or stripped == text:
        return text

    start = len(text) - len(text.lstrip(" "))
    end = len(text.rstrip(" "))
    middle = text[start:end]
    if orientation in _CENTERED_X:
        return middle
    return text[end:] + middle + text[:start]


class Gui:
    """Collects text lines as draw commands and renders them into a window."""

    def __init__(self, window: Window) -> None:
        self.window = window
        self.canvas = window.create_canvas()
        self.orientation = Orientation.NW
        self.message_y = 0
        self.message_max_width = 0
        self.mouse_over = False
        self.redraw = True
        self.recalc = True
        self.increase_intensity = False
        self.last_fg_color = "\x1b[37m"
        self.color_profile = Profile.VGA
        self.screen_edge_spacing = 0
        self.line_spacing = 0
        self.mouse_over_tolerance = 0
        self.alpha = 0.25
        self.mouse_over_alpha = 0.25
        self.fg_color = Color(255, 255, 255, 200)
        self.bg_color = Color(0, 0, 0, 100)
        self.bg_commands: list[DrawCmd] = []
        self.fg_commands: list[DrawCmd] = []
        self.clipping_boxes: list[ClippingBox] = []
        self.clear_messages()

    def set_default_foreground_color(self, color: Color) -> None:
        self.redraw = True
        self.fg_color = color

    def set_default_background_color(self, color: Color) -> None:
        self.redraw = True
        self.bg_color = color

    def set_color_profile(self, profile: Profile) -> None:
        self.redraw = True
        self.color_profile = profile

    def set_dimming(self, dimming: float) -> None:
        self.redraw = True
        self.alpha = 1.0 - dimming

    def set_mouse_over_dimming(self, dimming: float) -> None:
        self.redraw = True
        self.mouse_over_alpha = 1.0 - dimming

    def set_mouse_over_tolerance(self, tolerance: int) -> None:
        self.redraw = True
        self.mouse_over_tolerance = tolerance

    def set_orientation(self, orientation: Orientation) -> None:
        self.redraw = True
        self.recalc = True
        self.orientation = orientation

    def set_screen_edge_spacing(self, spacing: int) -> None:
        self.redraw = True
        self.screen_edge_spacing = spacing

    def set_line_spacing(self, spacing: int) -> None:
        self.redraw = True
        self.recalc = True
        self.line_spacing = spacing

    def set_monitor_index(self, index: int) -> None:
        self.redraw = True
        self.recalc = True
        self.window.set_active_monitor(index)

    def set_font(self, n: int, font: str) -> None:
        self.redraw = True
        self.canvas.set_font(n, font)

    def flush(self) -> None:
        """Redraw the window if anything changed since the last flush."""
        w = self.message_max_width
        h = self.message_y

        current_mouse_over = self.is_mouse_over()
        if self.mouse_over != current_mouse_over:
            self.redraw = True
        if self.window.update_active_monitor():
            self.redraw = True
        self.mouse_over = current_mouse_over

        if not self.redraw and not self.recalc:
            return
        self.recalc = False

        self.window.clear()

        if w > 0 and h > 0:
            self.window.resize(w, h)
            self._update_window_position()

            offset_x = self.calc_x_for_orientation(0, self.message_max_width, 0)
            alpha = self.mouse_over_alpha if self.mouse_over else self.alpha
            DrawColorCmd(self.bg_color).draw(self.canvas, offset_x, alpha)
            for cmd in self.bg_commands:
                cmd.draw(self.canvas, offset_x, alpha)
            DrawColorCmd(self.fg_color).draw(self.canvas, offset_x, alpha)
            for cmd in self.fg_commands:
                cmd.draw(self.canvas, offset_x, alpha)

        self.window.flush()
        self.redraw = False

    def clear_messages(self) -> None:
        self.redraw = True
        self.increase_intensity = False
        self.last_fg_color = "\x1b[37m"
        self.message_max_width = 0
        self.message_y = 0
        self.bg_commands.clear()
        self.fg_commands.clear()
        self.clipping_boxes.clear()

    def add_message(self, font_n: int, message: str) -> None:
        """Lay out one line of text below the previous ones."""
        self.redraw = True
        text = trim_for_orientation(self.orientation, trim_linefeeds_and_apply_tabs(message))
        dim = self.canvas.string_dimension(font_n, text)

        if text:
            chunks = ansi.split(text)
            width = sum(
                self.canvas.string_dimension(font_n, chunk).w
                for chunk in chunks
                if ansi.parse_control_sequence(chunk) is Sequence.NONE
            )
            x = self.calc_x_for_orientation(width, 0, 0)
            self.clipping_boxes.append(ClippingBox(x, self.message_y, width, dim.h))

            for chunk in chunks:
                x += self._add_chunk(font_n, chunk, x, dim.h)

            self.message_max_width = max(self.message_max_width, width)

        self.message_y += dim.h + self.line_spacing

    def _add_chunk(self, font_n: int, chunk: str, x: int, height: int) -> int:
        """Append the commands for one chunk and return the width it takes."""
        sequence = ansi.parse_control_sequence(chunk)
        profile = self.color_profile

        if sequence is Sequence.RESET:
            self.increase_intensity = False
            self.fg_commands.append(DrawColorCmd(self.fg_color))
            self.bg_commands.append(DrawColorCmd(self.bg_color))
        elif sequence is Sequence.RESET_FOREGROUND:
            self.fg_commands.append(DrawColorCmd(self.fg_color))
        elif sequence is Sequence.RESET_BACKGROUND:
            self.bg_commands.append(DrawColorCmd(self.bg_color))
        elif sequence is Sequence.FOREGROUND_COLOR:
            self.last_fg_color = chunk
            color = ansi.to_color(chunk, self.fg_color, self.increase_intensity, profile)
            self.fg_commands.append(DrawColorCmd(color))
        elif sequence is Sequence.BACKGROUND_COLOR:
            color = ansi.to_color(chunk, self.bg_color, False, profile)
            self.bg_commands.append(DrawColorCmd(color))
        elif sequence in (
            Sequence.INCREASE_INTENSITY,
            Sequence.DECREASED_INTENSITY,
            Sequence.NORMAL_INTENSITY,
        ):
            self.increase_intensity = sequence is Sequence.INCREASE_INTENSITY
            color = ansi.to_color(self.last_fg_color, self.fg_color, self.increase_intensity, profile)
            self.fg_commands.append(DrawColorCmd(color))
        elif sequence is Sequence.NONE:
            chunk_w = self.canvas.string_dimension(font_n, chunk).w
            self.bg_commands.append(DrawRectCmd(x, self.message_y, chunk_w, height))
            self.fg_commands.append(DrawTextCmd(x, self.message_y, font_n, chunk))
            return chunk_w
        return 0

    def is_mouse_over(self) -> bool:
        """Whether the pointer is over one of the text lines, within the tolerance."""
        w = self.message_max_width
        h = self.message_y
        t = self.mouse_over_tolerance
        pos = self.window.mouse_position()

        in_frame = pos.x + t >= 0 and pos.y + t >= 0 and pos.x - t < w and pos.y - t < h
        if not in_frame:
            return False

        offset_x = self.calc_x_for_orientation(0, self.message_max_width, 0)
        return any(
            pos.x + t >= box.x + offset_x
            and pos.y + t >= box.y
            and pos.x - t <= box.x + offset_x + box.w
            and pos.y - t <= box.y + box.h
            for box in self.clipping_boxes
        )

    def calc_x_for_orientation(self, inner_width: int, outer_width: int, spacing: int) -> int:
        if self.orientation in _CENTERED_X:
            return outer_width // 2 - inner_width // 2
        if self.orientation in _EAST:
            return outer_width - inner_width - spacing
        return spacing

    def calc_y_for_orientation(self, inner_height: int, outer_height: int, spacing: int) -> int:
        if self.orientation in _CENTERED_Y:
            return outer_height // 2 - inner_height // 2
        if self.orientation in _SOUTH:
            return outer_height - inner_height - spacing
        return spacing

    def _update_window_position(self) -> None:
        window = self.window
        window.move(
            self.calc_x_for_orientation(window.width, window.monitor_width, self.screen_edge_spacing),
            self.calc_y_for_orientation(window.height, window.monitor_height, self.screen_edge_spacing),
        )