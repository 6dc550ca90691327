"""Building blocks for TOML tooling: scalar parsers, local date/time types, error reports, tagged JSON and a converter driver."""

__version__ = "0.1.0"