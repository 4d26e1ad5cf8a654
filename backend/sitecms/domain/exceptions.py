class CmsError(Exception):
    """Base class for errors the CMS core raises on purpose."""

    kind = "CmsError"
    status_code = 500


class ValidationError(CmsError):
    kind = "ValidationError"
    status_code = 400


class NotFoundError(CmsError):
    kind = "NotFoundError"
    status_code = 404


class ForbiddenMasterWriteError(CmsError):
    """Raised when a tenant tries to mutate a master (tenant_id IS NULL) row."""

    kind = "ForbiddenMasterWriteError"
    status_code = 403

    def __init__(self, message: str = "cannot update/delete master data"):
        super().__init__(message)


class ConflictError(CmsError):
    kind = "ConflictError"
    status_code = 409


class TransientDbError(CmsError):
    """Connection-level failure that survived every retry."""

    kind = "TransientDbError"
    status_code = 503


class SchemaDriftError(CmsError):
    kind = "SchemaDriftError"
    status_code = 500


class TranslationApiError(CmsError):
    """External translation API failure. Never surfaced to HTTP callers."""

    kind = "TranslationApiError"
    status_code = 502

    def __init__(self, message: str, *, status_code: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.upstream_status = status_code
        self.retryable = retryable
