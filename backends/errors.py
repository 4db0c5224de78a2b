"""Error taxonomy for the Searchfox tools.

The server reports every error below to the MCP host as a failed tool call
carrying the error message.
"""


class SearchfoxError(Exception):
    """Base error reported to the MCP host as a failed tool call."""

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human readable description forwarded to the host
        """
        super().__init__(message)
        self.message = message


class InvalidInputError(SearchfoxError):
    """A required argument is missing or has the wrong type."""


class UnknownOperationError(SearchfoxError):
    """The requested tool name is not served."""


class UpstreamSearchError(SearchfoxError):
    """Searchfox returned an error status or could not be reached."""


class FileRetrievalError(SearchfoxError):
    """File retrieval failed outside the fetch itself."""
