"""
Exceptions raised by hyperlsh.

Both concrete errors subclass ValueError, so callers that only care about
"bad input" can keep catching that.
"""


class HyperLSHError(Exception):
    """Base class for hyperlsh errors."""


class DimensionMismatch(HyperLSHError, ValueError):
    """A vector's length differs from the index dimension."""

    def __init__(self, expected: int, received: int, what: str = "Vector", against: str = "index"):
        self.expected = expected
        self.received = received
        super().__init__(
            f"{what} dimension {received} does not match {against} dimension {expected}"
        )


class InvalidConfiguration(HyperLSHError, ValueError):
    """A constructor or tuning parameter is outside its valid range."""

    def __init__(self, parameter: str, value: object, constraint: str):
        self.parameter = parameter
        self.value = value
        super().__init__(f"Invalid {parameter}={value!r}: {constraint}")
