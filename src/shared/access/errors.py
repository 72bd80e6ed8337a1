"""Access-control failures raised by the HTTP edge and the domains."""


class NotAuthenticated(Exception):
    """No valid credentials accompanied the request."""

    def __init__(self, message="Authentication required"):
        super().__init__(message)
        self.message = message


class PermissionDenied(Exception):
    """The requester is authenticated but their role does not allow the action."""

    def __init__(self, message="You do not have permission to perform this action"):
        super().__init__(message)
        self.message = message
