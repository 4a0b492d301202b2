"""Bootstrap (composition root) for SLOTKEEPER.

Assembles the application at runtime: wires concrete adapters to service-layer
handlers, composes shared services (message bus, unit of work, sync), reads
configuration, and exposes small factories for entrypoints.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain)
  for wiring.
- This package may import: `slotkeeper.adapters`, `slotkeeper.service_layer`,
  `slotkeeper.interfaces`, `slotkeeper.domain`, and `slotkeeper.config`.
- Inner layers must not import `slotkeeper.bootstrap`.

Public surface:
- Re-export composition factories from this module; keep wiring helpers internal.
- No business rules live here; this is assembly and lifecycle only.
"""

from .bootstrap import (
    AppContainer,
    bootstrap,
    build_availability_service,
    build_message_bus,
    inject_dependencies,
)

__all__ = [
    "AppContainer",
    "bootstrap",
    "build_availability_service",
    "build_message_bus",
    "inject_dependencies",
]
