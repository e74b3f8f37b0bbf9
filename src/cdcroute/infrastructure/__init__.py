"""Infrastructure shared by SQL-backed adapters (engine, metadata, migrations)."""
