"""The overlay command: shows a text file with ANSI colours on top of the desktop."""

from __future__ import annotations

import signal
import sys
import threading
from itertools import islice
from typing import Protocol, Sequence

from .config import Config, default_config_file_path, usage_text
from .configparse import ConfigError
from .gui import Gui
from .tkdisplay import TkWindow
from .watch import FileWatcher

LINE_LIMIT = 100
CHECK_GUI_INTERVAL_MS = 50
_DIGITS = "0123456789"


class MessageSink(Protocol):
    def clear_messages(self) -> None: ...
    def add_message(self, font_n: int, message: str) -> None: ...


def parse_font_prefix(line: str, font_n: int) -> tuple[int, int, str]:
    """Handle a font prefix at the start of a line.

    'n~' selects font n for this and the following lines, 'n!' for this line
    only. Returns (font of this line, font for following lines, remaining text).
    """
    code = line[:1]
    is_digit = code != "" and code in _DIGITS
    if is_digit and line[1:2] == "~":
        font_n = int(code)
        line = line[2:]
    line_font = font_n
    if is_digit and line[1:2] == "!":
        line_font = int(code)
        line = line[2:]
    return line_font, font_n, line


def load_input_file(gui: MessageSink, filename: str) -> None:
    """Replace the shown messages with the first lines of the file."""
    gui.clear_messages()
    try:
        with open(filename, encoding="utf-8", errors="replace", newline="\n") as handle:
            lines = [line.removesuffix("\n") for line in islice(handle, LINE_LIMIT)]
    except OSError:
        return

    font_n = 0
    for line in lines:
        line_font, font_n, text = parse_font_prefix(line, font_n)
        gui.add_message(line_font, text)


def read_config(argv: Sequence[str]) -> Config:
    """Combine defaults, the config file and the command-line options.

    Raises ConfigError for a bad option and SystemExit(1) without an input file.
    """
    from_parameters = Config.from_parameters(argv)
    if from_parameters.config_file:
        from_file = Config.from_file(from_parameters.config_file, False)
    else:
        from_file = Config.from_file(default_config_file_path(), True)

    config = Config.default().override_with(from_file).override_with(from_parameters)

    if not config.input_file:
        print("ERROR: parameter 'INPUT_FILE' needs a value")
        print()
        print(usage_text(), end="")
        raise SystemExit(1)

    if config.verbose:
        config.write(sys.stdout)
    return config


def configure_gui(gui: Gui, config: Config) -> None:
    """Apply every setting of config to gui."""
    gui.set_orientation(config.orientation)
    gui.set_screen_edge_spacing(config.screen_edge_spacing)
    gui.set_line_spacing(config.line_spacing)
    gui.set_monitor_index(config.monitor_index)
    for n, (name, size) in enumerate(zip(config.font_names, config.font_sizes)):
        gui.set_font(n, f"{name}-{size}")
    gui.set_color_profile(config.color_profile)
    gui.set_default_foreground_color(config.default_foreground_color)
    gui.set_default_background_color(config.default_background_color)
    gui.set_dimming(config.dimming / 100.0)
    gui.set_mouse_over_dimming(config.mouse_over_dimming / 100.0)
    gui.set_mouse_over_tolerance(config.mouse_over_tolerance)


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        config = read_config(args)
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        return 1

    try:
        watcher = FileWatcher(config.input_file)
    except OSError:
        print("File cannot be monitored: the input file cannot be read.", file=sys.stderr)
        return 1

    try:
        window = TkWindow()
    except RuntimeError as exc:
        print(exc)
        return 1

    stop = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: stop.set())
    try:
        gui = Gui(window)
        configure_gui(gui, config)
        load_input_file(gui, config.input_file)
        while not stop.is_set():
            if watcher.has_file_been_rewritten():
                load_input_file(gui, config.input_file)
            gui.flush()
            stop.wait(CHECK_GUI_INTERVAL_MS / 1000)
    finally:
        signal.signal(signal.SIGINT, previous)
        window.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())