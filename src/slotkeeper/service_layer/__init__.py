"""Service layer for SLOTKEEPER.

Implements the availability use-cases: commands and their handlers
(single-slot edits, working-day toggles, quick setup and clear), the message
bus, window queries, the sync controller and the async facade used by
entrypoints.

Dependency rule: may import `slotkeeper.domain` and `slotkeeper.interfaces`,
but not `slotkeeper.adapters` or `slotkeeper.entrypoints`.
"""
