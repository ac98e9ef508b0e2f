"""
Shared exceptions for AI service modules.
"""


class UpstreamUnavailableError(Exception):
    """Raised when the remote language model call fails."""

    pass


class AnalysisParseError(Exception):
    """Raised when a model response does not contain a usable JSON object."""

    def __init__(self, message: str, raw_output: str = ""):
        super().__init__(message)
        self.raw_output = raw_output
