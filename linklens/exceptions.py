class LinkLensError(Exception):
    """Base class for errors raised by LinkLens services."""


class ValidationError(LinkLensError, ValueError):
    """The submitted URL is not an absolute URL with a hostname."""


class NotSignedInError(LinkLensError):
    """An operation needed an active account and none is signed in."""


class AnalysisInProgressError(LinkLensError):
    """An analysis was submitted while another one is still running."""
