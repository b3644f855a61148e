"""Claude Code usage analytics."""
