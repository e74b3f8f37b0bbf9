"""Command-line interface for CDCROUTE."""
