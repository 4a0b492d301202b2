"""Entrypoints (inbound adapters) for SLOTKEEPER.

Expose the engine to the outside world: today that is the ``slotkeeper`` CLI.
Parse and validate inputs, call the service layer through the bootstrap
factories, and present results.

Dependency rule: may import `slotkeeper.bootstrap` and
`slotkeeper.service_layer`; avoid importing `slotkeeper.adapters` directly.
"""
