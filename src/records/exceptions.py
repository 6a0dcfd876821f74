"""Exceptions for Gmail access in the records module."""


class AuthenticationError(Exception):
    """Raised when Gmail authentication fails."""

    pass


class ScopeMismatchError(AuthenticationError):
    """Raised when the stored token lacks scopes needed for export or forwarding."""

    def __init__(self, required_scopes: list[str], token_scopes: list[str]):
        self.required_scopes = required_scopes
        self.token_scopes = token_scopes
        missing = sorted(set(required_scopes) - set(token_scopes))
        super().__init__(
            f"Token is missing scopes {missing}. "
            "Delete the token file and re-authenticate."
        )


class NonInteractiveAuthError(AuthenticationError):
    """Raised when authentication needs a browser but GMAIL_NON_INTERACTIVE is set."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            f"Gmail authentication requires user interaction ({reason}) "
            "but GMAIL_NON_INTERACTIVE=1 is set."
        )
