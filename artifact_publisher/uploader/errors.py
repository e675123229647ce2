"""
Exceptions raised by the uploader.

Every failure is raised from the operation that detects it. None of them is
fatal to the process: callers decide whether to abort a batch or go on.
"""

from typing import Optional


class PublisherError(Exception):
    """Base class for all artifact publisher errors."""


# ============================================================================
# Credentials
# ============================================================================

class CredentialsError(PublisherError, ValueError):
    """Service account credentials could not be resolved."""


class CredentialsNotFoundError(CredentialsError):
    """Neither the JSON nor the file path credentials variable is set."""

    def __init__(self, json_name: str, path_name: str) -> None:
        super().__init__(
            f"GCS credentials not found! Set `{json_name}` or `{path_name}`."
        )
        self.json_name = json_name
        self.path_name = path_name


class MalformedCredentialsError(CredentialsError):
    """Credentials text is not a valid JSON object."""

    def __init__(self, source: str, reason: str = "") -> None:
        message = f"Error parsing JSON credentials from {source}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.source = source


class CredentialsFileMissingError(CredentialsError):
    """The credentials file path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File does not exist: `{path}`!")
        self.path = path


class MissingCredentialFieldError(CredentialsError):
    """Parsed credentials lack a required field."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"GCS credentials missing `{field_name}`!")
        self.field = field_name


# ============================================================================
# Uploads
# ============================================================================

class UploadError(PublisherError):
    """An artifact could not be uploaded."""


class NoDestinationPathError(UploadError, ValueError):
    """`prepare` was given no destination or an empty destination path."""

    def __init__(self) -> None:
        super().__init__("no destination path specified!")


class NotPreparedError(UploadError):
    """`upload` was called for a destination that was never prepared."""

    def __init__(self) -> None:
        super().__init__("Method `prepare` must be called before `upload`")


class MissingLocalPathError(UploadError, ValueError):
    """The artifact has no local file to upload."""

    def __init__(self, filename: Optional[str] = None) -> None:
        message = "no local path to file specified!"
        if filename:
            message = f"{message} (artifact: {filename})"
        super().__init__(message)
        self.filename = filename


class UploadFailedError(UploadError):
    """The storage backend rejected the transfer."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(
            f"Encountered an error while uploading: {type(cause).__name__}: {cause}"
        )
        self.cause = cause
