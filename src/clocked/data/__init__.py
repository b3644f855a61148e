"""Data layer: discovery, parsing, time splits and the SQLite cache."""
