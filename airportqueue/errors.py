"""Exception hierarchy for the airport queue simulation."""


class AirportSimError(Exception):
    """Base class for all errors raised by airportqueue."""


class ValidationError(AirportSimError, ValueError):
    """Invalid input handed to the simulation core."""


class ConfigurationError(ValidationError):
    """Malformed simulation input detected while loading it.

    Attributes:
        line_number: 1-based line of the offending input, when known.
    """

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class InvariantViolation(AirportSimError, RuntimeError):
    """The causal model of the simulation is broken. Not recoverable."""
