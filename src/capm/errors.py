"""Error types raised by the CAPM toolkit."""


class CapmError(ValueError):
    """Base class for all CAPM analysis errors."""


class InsufficientDataError(CapmError):
    """Raised when too few aligned observations exist to fit or forecast."""


class DegenerateRegressionError(CapmError):
    """Raised when the regression predictor has zero variance or n < 3."""


class InvalidConfidenceError(CapmError):
    """Raised when a confidence level lies outside the open interval (0, 1)."""


class MisalignedSeriesError(CapmError):
    """Raised when input series cannot be aligned on date."""


__all__ = [
    "CapmError",
    "DegenerateRegressionError",
    "InsufficientDataError",
    "InvalidConfidenceError",
    "MisalignedSeriesError",
]
