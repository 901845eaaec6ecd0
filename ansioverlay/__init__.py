"""Always-on-top Tk overlay that shows ANSI-coloured text from a file."""

__version__ = "1.0.0"