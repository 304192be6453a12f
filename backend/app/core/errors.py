"""
Catalog error taxonomy

Every failure raised by the catalog core carries a distinguishing kind and
the HTTP status the API layer maps it to.
"""
from fastapi import status


class CatalogError(Exception):
    """Base class for all catalog failures"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "catalog_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Bad caller input; reported, never retried"""
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "validation_error"


class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"


class UnauthenticatedError(CatalogError):
    """No valid bearer credential"""
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthenticated"


class UnauthorizedError(CatalogError):
    """Valid credential, insufficient role"""
    status_code = status.HTTP_403_FORBIDDEN
    kind = "unauthorized"


class ForbiddenError(CatalogError):
    """Caller may not access this particular resource"""
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"


class PersistenceError(CatalogError):
    """Underlying storage I/O failed; callers may retry"""
    kind = "persistence_error"


class CorruptStoreError(CatalogError):
    """Metadata artifact (or a stored payload) cannot be parsed"""
    kind = "corrupt_store"


class NoDeliverableError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "no_deliverable"
