"""Exception types raised by the spin engine."""


class LuckyWheelError(Exception):
    """Base class for all LuckyWheel errors."""


class ValidationError(LuckyWheelError):
    """A request was rejected; state is unchanged.

    Raised for a blank participant name, an empty prize pool or an
    invalid prize configuration. Always recoverable by changing inputs.
    """


class EmptyPoolError(ValidationError):
    """Prize templates expand to zero instances."""


class EnrichmentFailure(LuckyWheelError):
    """The commentary generator produced no usable text."""
