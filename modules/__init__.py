"""Chat-facing modules: command parsing and message handlers."""
