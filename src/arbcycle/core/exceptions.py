"""Exception hierarchy for the cycle scanner."""


class ArbCycleError(Exception):
    """Base exception for all scanner errors."""


class ArithmeticOverflow(ArbCycleError, ArithmeticError):
    """A fixed-point conversion exceeded the 256-bit integer range."""

    def __init__(self, message: str, value: int | None = None) -> None:
        super().__init__(message)
        self.value = value


class InvariantViolation(ArbCycleError, AssertionError):
    """The search returned a route that does not close on its origin."""


class TokenConfigError(ArbCycleError):
    """Malformed entry in the token configuration file."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number
