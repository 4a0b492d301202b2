"""Adapters (infrastructure) for SLOTKEEPER.

Provide concrete implementations of the ports in `slotkeeper.interfaces`
(slot store, working-day store, visibility flag, change channel, clock, id
generation), plus persistence mapping and related wiring (engines, metadata,
migrations).

Dependency rule: may import `slotkeeper.domain` and `slotkeeper.interfaces`;
neither of those may import this package.
"""
