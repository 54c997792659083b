"""Top-level layerbind commands (no domain prefix)."""
