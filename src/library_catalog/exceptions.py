"""Exception taxonomy for the Library Catalog."""


class LibraryCatalogError(Exception):
    """Base exception for catalog operations."""


class NotFoundError(LibraryCatalogError):
    """Raised when the requested id does not exist."""


class ConstraintViolationError(LibraryCatalogError):
    """Raised when a write would break a uniqueness or required-field rule."""


class StoreUnavailableError(LibraryCatalogError):
    """Raised when the underlying store cannot be reached."""


class UnauthorizedError(LibraryCatalogError):
    """Raised when the caller's role does not permit the operation."""
