"""CDCROUTE test suite.

- unit/         one module at a time; the Mongo driver is mocked, no files.
- contract/     one behaviour suite per port (document store, dead-letter
                queue, id generator) run against every adapter.
- integration/  Alembic migrations and composition-root wiring on SQLite files.
- functional/   the ``cdcroute`` command driven through Click's CliRunner.
- fixtures/     fixture factories loaded via ``pytest_plugins``; no tests.

Each test carries the marker of its folder (see ``conftest.py``). Hypothesis
tests additionally carry ``property``.
"""
