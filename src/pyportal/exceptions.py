"""Portal exceptions."""


class PortalError(Exception):
    """Base class for portal integration errors."""


class PortalPathError(PortalError):
    """Raised when an asset path cannot be turned into a site path."""

    def __init__(self, message: str, path: str = ""):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path:
            return f"{self.message}: '{self.path}'"
        return self.message


class PortalContextError(PortalError):
    """Raised when a template helper runs without a portal registry."""
