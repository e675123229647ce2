"""
Artifacts, upload destinations and destination preparation.

A destination starts UNPREPARED. ``validate_destination`` checks it once per
batch and moves it to PREPARED; only then does the client accept uploads for
it. The caller owns the destination and calls ``reset()`` before reusing it
for an unrelated batch.
"""

import os
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from artifact_publisher.uploader.errors import NoDestinationPathError
from artifact_publisher.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredFile:
    """
    Artifact metadata as recorded by the artifact provider.

    Attributes:
        filename: Name of the file in the provider
        download_path: Path the provider serves the file from
        size: File size in bytes
    """

    filename: str
    download_path: str
    size: int


@dataclass
class Artifact:
    """
    A build artifact to publish.

    Attributes:
        filename: Name used for the remote object
        stored_file: Provider metadata
        local_filepath: Downloaded copy on disk; required at upload time
    """

    filename: str
    stored_file: StoredFile
    local_filepath: Optional[str] = None


class DestinationState(str, Enum):
    """Preparation state of an UploadDestination."""

    UNPREPARED = "unprepared"
    PREPARED = "prepared"


@dataclass
class UploadDestination:
    """
    Remote prefix that one batch of artifacts is uploaded under.

    Attributes:
        path: Remote prefix, e.g. ``/dist/1.4.0/``
        state: UNPREPARED until ``validate_destination`` accepts it
    """

    path: Optional[str]
    state: DestinationState = field(default=DestinationState.UNPREPARED, compare=False)

    @property
    def checked(self) -> bool:
        return self.state is DestinationState.PREPARED

    def reset(self) -> None:
        """Start a new batch: uploads are refused until prepared again."""
        self.state = DestinationState.UNPREPARED


# Set by validate_destination on every token it issues
_ISSUED = object()


@dataclass(frozen=True)
class PreparedDestination:
    """
    Token returned by a successful prepare; ``upload`` accepts it as-is.

    Only tokens issued by ``validate_destination`` count as prepared. One
    constructed by hand is refused like an unprepared destination.
    """

    path: str
    _issued: Optional[object] = field(default=None, repr=False, compare=False)


AnyDestination = Union[UploadDestination, PreparedDestination]


def validate_destination(
    artifacts: Sequence[Artifact], destination: Optional[UploadDestination]
) -> PreparedDestination:
    """
    Validate the destination of a batch and mark it prepared.

    Args:
        artifacts: Artifacts the batch will upload
        destination: Destination shared by the batch

    Returns:
        PreparedDestination token for the validated path

    Raises:
        NoDestinationPathError: If destination or its path is missing/empty
    """
    if destination is None or not destination.path:
        raise NoDestinationPathError()

    destination.state = DestinationState.PREPARED
    logger.debug(
        f"Prepared destination {destination.path} for {len(artifacts)} artifact(s)"
    )
    return PreparedDestination(path=destination.path, _issued=_ISSUED)


def is_prepared(destination: Optional[AnyDestination]) -> bool:
    if isinstance(destination, PreparedDestination):
        return destination._issued is _ISSUED and bool(destination.path)
    if isinstance(destination, UploadDestination):
        return destination.checked
    return False


def build_destination_key(path: str, filename: str) -> str:
    """
    Remote object key for an artifact.

    Only the bare file name of the artifact is used.

    Example:
        >>> build_destination_key("/stats/2020/", "march.csv")
        '/stats/2020/march.csv'
        >>> build_destination_key("dist", "build/bundle.js")
        'dist/bundle.js'
    """
    return posixpath.join(path, os.path.basename(filename))
