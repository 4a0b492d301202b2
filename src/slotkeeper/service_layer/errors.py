"""Service-layer outcomes that are neither validation nor store errors."""


class ServiceError(Exception):
    """Base class for service-layer errors."""


class ConfirmationRequiredError(ServiceError):
    """Quick setup would replace existing slots and was not confirmed."""

    def __init__(self, existing: int) -> None:
        super().__init__(
            f"{existing} slot(s) already exist in the next 7 days; "
            "confirm to replace them."
        )
        self.existing = existing


class EditSessionBusyError(ServiceError):
    """Another slot is already being edited for this provider."""

    def __init__(self, slot_id: str) -> None:
        super().__init__(f"Slot '{slot_id}' is already being edited.")
        self.slot_id = slot_id


class NoActiveEditSessionError(ServiceError):
    """The edit session is closed or was never opened."""

    def __init__(self) -> None:
        super().__init__("No active edit session; start editing the slot again.")
