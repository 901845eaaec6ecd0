# ansioverlay

`ansioverlay` shows the lines of a text file in a borderless, always-on-top
window on your desktop. Text may carry ANSI colour escape sequences (3/4-bit,
256-colour and 24-bit), which are drawn as foreground and background colours,
and bold/normal intensity switches. Whenever the file changes, the overlay
reloads it. Moving the mouse over the text dims it.

## Installation

```
pip install .
```

The window is drawn with Tk, so your Python needs a working `tkinter`.
The package has no other dependencies.

## Usage

```
ansioverlay [OPTIONS] <INPUT_FILE>
```

General:

- `-c, --config=FILE` – file to read configuration from
- `-h, --help` – print the help text and quit
- `-v, --verbose` – print the resulting configuration at start-up
- `-V, --version` – print the version number and quit

Positioning:

- `-e PIXEL` – screen edge spacing (default `0`)
- `-l PIXEL` – line spacing (default `0`)
- `-m INDEX` – monitor to use (default `0`)
- `-o ORIENTATION` – one of `N`, `NE`, `E`, `SE`, `S`, `SW`, `W`, `NW`, `CENTER` (default `NW`);
  places the window on the screen and aligns the lines

Font:

- `-f, --font-name=FONT` – font family (default `NotoSansMono`); `-f 2:Name` sets font number 2
- `-s, --font-size=SIZE` – font size (default `12`); `-s 2:18` sets the size of font number 2

Fonts 1 to 9 that are not given a name fall back to Courier 12.

Colours:

- `-p, --profile=PROFILE` – palette for the 16 basic ANSI colours, `VGA` (default) or `XP`
- `--fg-color=COLOR`, `--fg-alpha=ALPHA` – default text colour and alpha (default white, alpha `255`)
- `--bg-color=COLOR`, `--bg-alpha=ALPHA` – default background colour and alpha (default black, alpha `100`)

A colour is a fore- or background colour sequence; the leading escape character
may be left out, for example `--fg-color='[91m'` or `--bg-color='[48;2;11;22;33m'`.

Behaviour:

- `-d, --dim=PERCENT` – dimming while the mouse is over the text (default `75`)
- `-D PERCENT` – general dimming (default `0`)
- `-t PIXEL` – mouse-over tolerance in pixels (default `0`)

A bad option or value prints an `ERROR:` line and exits with status 1, as does
a missing input file argument. Stop the overlay with Ctrl+C.

### Input file

At most the first 100 lines are shown. A line starting with a digit and `~`
(for example `3~`) switches to that font for this and all following lines; a
digit followed by `!` uses that font for this line only. Tabs are expanded to
the next multiple of four columns.

```
printf 'CPU \033[32mok\033[0m\n1!\033[1;31mDisk almost full\033[0m\n' > status.txt
ansioverlay -o NE -e 10 status.txt
```

## Configuration file

Settings are read from `~/.config/x11-overlayrc` unless `-c` names another
file; command-line options take precedence over it, and it takes precedence
over the built-in defaults.

```
InputFile=/some/inputFile.txt

[Positioning]
MonitorIndex=0
Orientation=SE
ScreenEdgeSpacing=10
LineSpacing=0

[Font]
Name=NotoSansMono
Size=12
Name.1=NotoSans
Size.1=18

[Colors]
AnsiProfile=XP
ForegroundColor=[91m
ForegroundAlpha=200
BackgroundColor=[48;2;11;22;33m
BackgroundAlpha=100

[Behavior]
Dimming=0
MouseOverDimming=75
Tolerance=0
```

Lines starting with `;` or `#` are comments. Invalid lines are logged as
warnings and skipped.

## Using the modules

- `ansioverlay.ansi` – `split`, `subsplit`, `parse_control_sequence`,
  `to_color`, `to_8bit_color` and `to_24bit_color` for ANSI colour sequences,
  with the `Sequence` and `Profile` enums.
- `ansioverlay.config` – the `Config` dataclass with `Config.default()`,
  `Config.from_file()`, `Config.from_parameters()` and `override_with()`.
- `ansioverlay.gui` – `Gui`, which lays out lines as draw commands for any
  window and canvas with the methods of `TkWindow` and `TkCanvas`.
- `ansioverlay.watch` – `FileWatcher`, which reports changes of a file by
  polling its size, modification time and inode.

## Limitations

- Mouse clicks do not pass through the window; it is an ordinary Tk window
  without a window-manager frame.
- Only the screen Tk reports is known, so every monitor index selects that
  screen.
- There is no real transparency: colours are blended against the black
  window background according to their alpha.