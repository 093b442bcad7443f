# nodegraph/core/exceptions.py
class GraphAPIException(Exception):
    """Base class for errors that are reported back to the caller."""
    status_code = 500

    def __init__(self, message="Internal server error."):
        self.message = message
        super().__init__(self.message)

class BadRequestException(GraphAPIException):
    """Raised when the client payload is malformed or incomplete."""
    status_code = 400

class StorageException(GraphAPIException):
    """Raised when a query, insert or row scan fails."""
    status_code = 500

class RouteNotFoundException(GraphAPIException):
    """Raised when no handler matches the request method and path."""
    status_code = 404

    def __init__(self, message="Not found"):
        super().__init__(message)

class DatabaseUnavailableException(Exception):
    """Raised when the startup connectivity check fails."""
    def __init__(self, message="Database is not accessible."):
        self.message = message
        super().__init__(self.message)
