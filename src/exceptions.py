"""
Exceptions
Error taxonomy shared by the Jira session store, transport, resolver, test generation and API handlers
"""
from typing import Optional


class JiraError(Exception):
    """Base exception for Jira-related errors"""
    pass


class ValidationError(JiraError):
    """Raised when caller input is malformed (never reaches the network)"""
    pass


class AuthenticationError(JiraError):
    """Raised when Jira rejects the identity check"""
    pass


class NotConnectedError(JiraError):
    """Raised when an operation needs an active Jira session and there is none"""

    def __init__(self, message: str = "Not connected to Jira. Please connect first."):
        super().__init__(message)


class TransportError(JiraError):
    """Raised for non-2xx responses and network-level failures"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 status_text: Optional[str] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body


class UpstreamError(JiraError):
    """Raised when both the v3 and the v2 attempt of an operation failed"""

    def __init__(self, operation: str, v3_error: str, v2_error: str):
        super().__init__(f"Failed to {operation}: v3: {v3_error}; v2: {v2_error}")
        self.operation = operation
        self.v3_error = v3_error
        self.v2_error = v2_error


class GenerationError(Exception):
    """Raised when the LLM call fails or its answer holds no usable test cases"""
    pass
