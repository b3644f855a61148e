"""Allow ``python -m clocked``."""

from clocked.cli import app

if __name__ == "__main__":
    app()
