"""Unit tests: one module at a time, no network and no database files."""
