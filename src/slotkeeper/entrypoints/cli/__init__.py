"""The ``slotkeeper`` command-line interface."""
