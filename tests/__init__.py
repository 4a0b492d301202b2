"""SLOTKEEPER test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Port behavior run against every adapter (memory, SQLite, Postgres).
- integration/  : Real databases and migrations; the engine wired by bootstrap.
- e2e/          : The ``slotkeeper`` command line, invoked through CliRunner.
- fixtures/     : Shared fixtures loaded via ``pytest_plugins`` (no tests here).

General guidance
- Keep unit fast and deterministic (no real I/O); prefer fakes over mocks at boundaries.
- Integration hits real dependencies with realistic setup/teardown.
- Contract parametrizes implementations to ensure consistent behavior.
- Property-based tests live with the layer they exercise; mark long ones slow.
- Markers unit, contract, integration and e2e are applied by directory.
"""
