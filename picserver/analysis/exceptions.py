class AnalysisError(Exception):
    """Base exception for request handling failures before extraction."""


class InvalidRequestError(AnalysisError):
    """Raised when an upload does not meet the request preconditions."""


class StagingError(AnalysisError):
    """Raised when the upload cannot be written to transient storage."""
