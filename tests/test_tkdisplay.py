import pytest

from ansioverlay.color import Color, IntPair
from ansioverlay.tkdisplay import (
    DEFAULT_FAMILY,
    DEFAULT_SIZE,
    FONT_SLOTS,
    TkCanvas,
    TkWindow,
    font_spec,
    to_hex,
)


class FakeFont:
    def __init__(self, family, size):
        self.family = family
        self.size = size

    def measure(self, text):
        return len(text) * self.size

    def metrics(self, name):
        return {"ascent": self.size, "descent": self.size // 4}[name]


class FakeWidget:
    def __init__(self):
        self.items = []
        self.options = {}
        self.deleted = []

    def create_rectangle(self, *coords, **options):
        self.items.append(("rect", coords, options))

    def create_text(self, *coords, **options):
        self.items.append(("text", coords, options))

    def delete(self, tag):
        self.deleted.append(tag)
        self.items.clear()

    def configure(self, **options):
        self.options.update(options)


class FakeRoot:
    def __init__(self, screen=(1920, 1080)):
        self.screen = screen
        self.pointer = (0, 0)
        self.geometries = []
        self.idle = 0
        self.updates = 0
        self.destroyed = False

    def winfo_screenwidth(self):
        return self.screen[0]

    def winfo_screenheight(self):
        return self.screen[1]

    def geometry(self, spec):
        self.geometries.append(spec)

    def winfo_pointerxy(self):
        return self.pointer

    def update_idletasks(self):
        self.idle += 1

    def update(self):
        self.updates += 1

    def destroy(self):
        self.destroyed = True


def make_canvas():
    widget = FakeWidget()
    return TkCanvas(widget, FakeFont), widget


def make_window(**kwargs):
    root = FakeRoot(**kwargs)
    widget = FakeWidget()
    window = TkWindow(0, 0, 100, 50, root=root, canvas_widget=widget, font_factory=FakeFont)
    return window, root, widget


def test_to_hex_pins_format():
    assert to_hex(Color(255, 0, 16)) == "#ff0010"


@pytest.mark.parametrize("color", [Color(0, 0, 0), Color(1, 128, 254), Color(255, 255, 255, 0)])
def test_to_hex_round_trip(color):
    text = to_hex(color)
    assert len(text) == 7
    assert (int(text[1:3], 16), int(text[3:5], 16), int(text[5:7], 16)) == (color.r, color.g, color.b)


def test_font_spec_with_size():
    assert font_spec("NotoSansMono-12") == ("NotoSansMono", 12)
    assert font_spec("Mx437 IBM VGA 8x16-24") == ("Mx437 IBM VGA 8x16", 24)


def test_font_spec_defaults():
    assert font_spec("") == (DEFAULT_FAMILY, DEFAULT_SIZE)
    assert font_spec("-0") == (DEFAULT_FAMILY, DEFAULT_SIZE)
    assert font_spec("Sans") == ("Sans", DEFAULT_SIZE)
    assert font_spec("Sans-bold") == ("Sans-bold", DEFAULT_SIZE)


def test_canvas_starts_with_default_fonts_in_every_slot():
    canvas, _ = make_canvas()
    assert len(canvas.fonts) == FONT_SLOTS
    assert all((f.family, f.size) == (DEFAULT_FAMILY, DEFAULT_SIZE) for f in canvas.fonts)


def test_set_font_outside_slots_is_ignored():
    canvas, _ = make_canvas()
    before = list(canvas.fonts)
    canvas.set_font(10, "Other-20")
    canvas.set_font(-1, "Other-20")
    assert canvas.fonts == before


def test_set_font_loads_slot():
    canvas, _ = make_canvas()
    canvas.set_font(3, "Mono-20")
    assert (canvas.fonts[3].family, canvas.fonts[3].size) == ("Mono", 20)


def test_string_dimension_uses_font_metrics():
    canvas, _ = make_canvas()
    canvas.set_font(1, "Mono-8")
    font = canvas.fonts[1]
    dim = canvas.string_dimension(1, "abcd")
    assert dim == IntPair(font.measure("abcd"), font.metrics("ascent") + font.metrics("descent"))


def test_string_dimension_rejects_bad_slot():
    canvas, _ = make_canvas()
    with pytest.raises(ValueError):
        canvas.string_dimension(FONT_SLOTS, "x")


def test_opaque_colour_is_drawn_unchanged():
    canvas, widget = make_canvas()
    color = Color(200, 100, 50, 255)
    canvas.set_color(color)
    canvas.draw_rect(1, 2, 3, 4)
    canvas.draw_string(5, 6, 0, "hi")
    kinds = [item[0] for item in widget.items]
    assert kinds == ["rect", "text"]
    assert widget.items[0][1] == (1, 2, 4, 6)
    assert widget.items[0][2]["fill"] == to_hex(color)
    assert widget.items[1][1] == (5, 6)
    assert widget.items[1][2]["text"] == "hi"
    assert widget.items[1][2]["font"] is canvas.fonts[0]


def test_transparent_colour_draws_nothing():
    canvas, widget = make_canvas()
    canvas.set_color(Color(200, 100, 50, 0))
    canvas.draw_rect(0, 0, 10, 10)
    canvas.draw_string(0, 0, 0, "hidden")
    assert widget.items == []


def test_partial_alpha_darkens_towards_black():
    canvas, widget = make_canvas()
    color = Color(200, 100, 50, 100)
    canvas.set_color(color)
    canvas.draw_rect(0, 0, 5, 5)
    fill = widget.items[0][2]["fill"]
    channels = [int(fill[i:i + 2], 16) for i in (1, 3, 5)]
    assert all(c <= o for c, o in zip(channels, (color.r, color.g, color.b)))
    assert channels[0] < color.r


def test_empty_rectangle_is_skipped():
    canvas, widget = make_canvas()
    canvas.draw_rect(0, 0, 0, 5)
    assert widget.items == []


def test_window_uses_screen_as_monitor():
    window, root, _ = make_window(screen=(800, 600))
    assert (window.monitor_width, window.monitor_height) == (800, 600)
    assert root.geometries[-1] == "100x50+0+0"


def test_move_sets_geometry_once():
    window, root, _ = make_window()
    window.move(10, 20)
    count = len(root.geometries)
    window.move(10, 20)
    assert len(root.geometries) == count
    assert root.geometries[-1] == "100x50+10+20"


def test_resize_configures_widget():
    window, root, widget = make_window()
    window.resize(30, 40)
    assert (window.width, window.height) == (30, 40)
    assert widget.options == {"width": 30, "height": 40}
    assert root.geometries[-1].startswith("30x40")


def test_mouse_position_is_relative_to_window():
    window, root, _ = make_window()
    window.move(10, 20)
    root.pointer = (15, 27)
    assert window.mouse_position() == IntPair(15 - 10, 27 - 20)


def test_update_active_monitor_reports_changes():
    window, root, _ = make_window(screen=(800, 600))
    assert window.update_active_monitor() is False
    root.screen = (1024, 768)
    assert window.update_active_monitor() is True
    assert (window.monitor_width, window.monitor_height) == (1024, 768)


def test_monitor_index_beyond_last_is_clamped():
    window, _, _ = make_window(screen=(800, 600))
    window.set_active_monitor(3)
    assert window.monitor_index == 3
    assert window.monitor_width == 800


def test_clear_flush_and_close():
    window, root, widget = make_window()
    window.clear()
    window.flush()
    window.close()
    assert widget.deleted == ["all"]
    assert (root.idle, root.updates) == (1, 1)
    assert root.destroyed is True


def test_create_canvas_draws_into_window_widget():
    window, _, widget = make_window()
    canvas = window.create_canvas()
    canvas.set_color(Color(1, 2, 3))
    canvas.draw_rect(0, 0, 2, 2)
    assert canvas.widget is widget
    assert len(widget.items) == 1