# ------------------------
# Error taxonomy
# ------------------------

__all__ = [
    "GradeTrackerError",
    "ValidationError",
    "EmptyNameError",
    "InvalidCreditError",
    "MalformedNumberError",
    "UnknownPresetError",
    "UnknownGradeSymbolError",
    "OutOfRangeError",
    "NoMatchingBandError",
    "InvalidTargetError",
    "InvalidCreditsError",
    "NotFoundError",
]


class GradeTrackerError(ValueError):
    """Base class for every failure the grade tracker reports to its caller."""


class ValidationError(GradeTrackerError):
    pass


class EmptyNameError(ValidationError):
    pass


class InvalidCreditError(ValidationError):
    pass


class MalformedNumberError(ValidationError):
    pass


class UnknownPresetError(GradeTrackerError):
    pass


class UnknownGradeSymbolError(GradeTrackerError):
    pass


class OutOfRangeError(GradeTrackerError):
    pass


class NoMatchingBandError(GradeTrackerError):
    pass


class InvalidTargetError(GradeTrackerError):
    pass


class InvalidCreditsError(GradeTrackerError):
    pass


class NotFoundError(GradeTrackerError):
    pass
