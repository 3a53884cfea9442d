class InputValidationError(ValueError):
    """Raised when a pricing or slot input is out of range or malformed."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field} {reason}")
        self.field = field
        self.reason = reason
