"""
Service account credential resolution.

Credentials come from one of two configuration variables: one holding the
service account JSON inline, one holding a path to a JSON key file. The
inline variable wins when both are set.

Example usage:
    >>> from artifact_publisher.uploader.credentials import (
    ...     ConfigVar, get_gcs_credentials_from_env,
    ... )
    >>> creds = get_gcs_credentials_from_env(
    ...     ConfigVar("GCS_CREDENTIALS_JSON"),
    ...     ConfigVar("GCS_CREDENTIALS_PATH"),
    ... )
    >>> creds.project_id
    'my-project'

Secret values are never logged.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from artifact_publisher.uploader.errors import (
    CredentialsFileMissingError,
    CredentialsNotFoundError,
    MalformedCredentialsError,
    MissingCredentialFieldError,
)
from artifact_publisher.utils.config import ConfigSource, ConfigVar
from artifact_publisher.utils.logging import get_logger

logger = get_logger(__name__)

# Checked in this order; only the first missing one is reported
REQUIRED_FIELDS = ("project_id", "client_email", "private_key")

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class GCSCredentials:
    """
    Service account credentials for the upload client.

    Attributes:
        project_id: GCP project owning the bucket
        client_email: Service account email
        private_key: PEM private key (hidden from repr)
    """

    project_id: str
    client_email: str
    private_key: str = field(repr=False)

    def as_service_account_info(self) -> Dict[str, str]:
        """Mapping accepted by google.oauth2.service_account."""
        return {
            "type": "service_account",
            "project_id": self.project_id,
            "client_email": self.client_email,
            "private_key": self.private_key,
            "token_uri": GOOGLE_TOKEN_URI,
        }


def _parse_credentials(text: str, source: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(text)
    except ValueError as e:
        raise MalformedCredentialsError(source, str(e)) from e

    if not isinstance(parsed, dict):
        raise MalformedCredentialsError(
            source, f"expected a JSON object, got {type(parsed).__name__}"
        )
    return parsed


def _read_credentials_file(filepath: str) -> Dict[str, Any]:
    path = Path(filepath)
    if not path.is_file():
        raise CredentialsFileMissingError(filepath)

    source = f"file `{filepath}`"
    logger.debug(f"Reading GCS credentials from file: {filepath}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedCredentialsError(source, str(e)) from e
    return _parse_credentials(text, source)


def credentials_from_mapping(parsed: Dict[str, Any], source: str) -> GCSCredentials:
    """
    Build GCSCredentials from a parsed service account document.

    Extra keys are ignored. Empty values count as missing.

    Raises:
        MissingCredentialFieldError: For the first missing required field
        MalformedCredentialsError: If a required field is not a string
    """
    for field_name in REQUIRED_FIELDS:
        value = parsed.get(field_name)
        if not value:
            raise MissingCredentialFieldError(field_name)
        if not isinstance(value, str):
            raise MalformedCredentialsError(
                source, f"`{field_name}` must be a string"
            )

    return GCSCredentials(
        project_id=parsed["project_id"],
        client_email=parsed["client_email"],
        private_key=parsed["private_key"],
    )


def get_gcs_credentials_from_env(
    json_var: ConfigVar,
    path_var: ConfigVar,
    source: Optional[ConfigSource] = None,
) -> GCSCredentials:
    """
    Resolve GCS credentials from configuration.

    Resolution order:
        1. ``json_var`` set: parse its value as JSON
        2. else ``path_var`` set: the file must exist, parse its contents
        3. else: fail

    Args:
        json_var: Variable holding the service account JSON inline
        path_var: Variable holding a path to the service account JSON file
        source: Where to read variables from (default: ConfigSource())

    Returns:
        Resolved GCSCredentials

    Raises:
        CredentialsNotFoundError: Neither variable is set
        MalformedCredentialsError: JSON does not parse to an object
        CredentialsFileMissingError: The file path does not exist
        MissingCredentialFieldError: A required field is missing
    """
    source = source or ConfigSource()

    json_credentials = json_var.read(source)
    credentials_path = path_var.read(source)

    if json_credentials:
        origin = f"`{json_var.name}`"
        if credentials_path:
            logger.debug(
                f"Both {origin} and `{path_var.name}` are set, using {origin}"
            )
        parsed = _parse_credentials(json_credentials, origin)
    elif credentials_path:
        origin = f"file `{credentials_path}`"
        parsed = _read_credentials_file(credentials_path)
    else:
        raise CredentialsNotFoundError(json_var.name, path_var.name)

    credentials = credentials_from_mapping(parsed, origin)
    logger.info(
        f"Loaded GCS credentials for {credentials.client_email} "
        f"(project: {credentials.project_id}) from {origin}"
    )
    return credentials
