# aurora/utils/exceptions.py
"""
Exception hierarchy for Aurora Risk Lab

Only structural problems with caller input are raised. Degenerate input
(zero portfolio value, zero weight sum, single-point timelines) is handled
with explicit zero results, and gaps in non-base price history are
tolerated where they occur.
"""


class AuroraError(Exception):
    """Base class for all Aurora errors"""

    pass


class ValidationError(AuroraError):
    """Custom exception for validation errors"""

    pass


class InvalidInputError(ValidationError):
    """
    Raised for mismatched array lengths, missing required fields,
    non-chronological date ranges, an undefined base asset, or empty
    historical data for the base asset.
    """

    pass
