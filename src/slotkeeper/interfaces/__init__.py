"""Interfaces (application boundary) for SLOTKEEPER.

Defines framework-free application contracts: ports (ABCs) for the slot store,
working-day store, provider visibility flag, change-notification channel,
clock and ID generation, plus the small DTOs and error kinds they share.
Business rules stay out of this package.

Dependency rule: this package is independent; do not import from any
`slotkeeper.*` modules. It may be imported by `slotkeeper.service_layer`,
`slotkeeper.adapters`, and `slotkeeper.bootstrap`.
"""
