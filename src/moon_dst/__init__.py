"""moon-dst: bulk MoonBit dependency updater."""

__version__ = "0.1.0"
