"""SQL persistence for dead letters: engine, metadata, column types, migrations."""
