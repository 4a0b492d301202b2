"""Relational persistence wiring: engine factory, metadata, schema, migrations."""
