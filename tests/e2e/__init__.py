"""End-to-end tests of the ``slotkeeper`` command line."""
