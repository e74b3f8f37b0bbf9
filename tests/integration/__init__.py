"""Integration tests: migrations and wiring against real SQLite files."""
