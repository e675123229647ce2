"""Tests for artifacts, destinations and destination preparation."""

import pytest

from artifact_publisher.uploader import (
    Artifact,
    DestinationState,
    NoDestinationPathError,
    PreparedDestination,
    StoredFile,
    UploadDestination,
    build_destination_key,
    validate_destination,
)
from artifact_publisher.uploader.destination import is_prepared


@pytest.fixture
def artifact():
    return Artifact(
        filename="march-squirrel-stats.csv",
        stored_file=StoredFile(
            filename="march-2020-squirrel-stats.csv",
            download_path="squirrel-chasing/march-2020-squirrel-stats.csv",
            size=1231,
        ),
        local_filepath="./temp/march-squirrel-stats.csv",
    )


class TestUploadDestination:
    """Test UploadDestination state handling."""

    def test_starts_unprepared(self):
        """Test a new destination is not prepared."""
        destination = UploadDestination(path="/stats/2020/")

        assert destination.state is DestinationState.UNPREPARED
        assert destination.checked is False
        assert is_prepared(destination) is False

    def test_reset_returns_to_unprepared(self, artifact):
        """Test reset starts a new batch."""
        destination = UploadDestination(path="/stats/2020/")
        validate_destination([artifact], destination)

        destination.reset()

        assert destination.checked is False

    def test_equality_ignores_state(self):
        """Test destinations compare by path only."""
        prepared = UploadDestination(path="/a/", state=DestinationState.PREPARED)
        assert prepared == UploadDestination(path="/a/")


class TestValidateDestination:
    """Test validate_destination."""

    def test_marks_destination_prepared(self, artifact):
        """Test success flips the state and returns a token."""
        destination = UploadDestination(path="/stats/2020/")

        token = validate_destination([artifact], destination)

        assert destination.state is DestinationState.PREPARED
        assert destination.checked is True
        assert token == PreparedDestination(path="/stats/2020/")
        assert is_prepared(token) is True

    def test_hand_built_token_is_not_prepared(self):
        """Test only tokens issued by validation count as prepared."""
        assert is_prepared(PreparedDestination(path="/stats/2020/")) is False

    def test_empty_batch_is_allowed(self):
        """Test a batch without artifacts can still be prepared."""
        destination = UploadDestination(path="/empty/")
        validate_destination([], destination)
        assert destination.checked is True

    def test_errors_if_destination_missing(self, artifact):
        """Test None destination is rejected."""
        with pytest.raises(NoDestinationPathError, match="no destination path specified!"):
            validate_destination([artifact], None)

    def test_errors_if_path_missing(self, artifact):
        """Test destination with no path is rejected."""
        destination = UploadDestination(path=None)

        with pytest.raises(NoDestinationPathError):
            validate_destination([artifact], destination)
        assert destination.checked is False

    def test_errors_if_path_empty(self, artifact):
        """Test destination with an empty path is rejected."""
        with pytest.raises(NoDestinationPathError):
            validate_destination([artifact], UploadDestination(path=""))

    def test_preparing_another_destination_keeps_the_first(self, artifact):
        """Test re-preparing with a new destination leaves the old one alone."""
        first = UploadDestination(path="/first/")
        second = UploadDestination(path="/second/")

        validate_destination([artifact], first)
        validate_destination([artifact], second)

        assert first.checked is True
        assert second.checked is True


class TestBuildDestinationKey:
    """Test remote key construction."""

    def test_joins_path_and_filename(self):
        assert build_destination_key("/stats/2020/", "march.csv") == "/stats/2020/march.csv"

    def test_adds_missing_separator(self):
        assert build_destination_key("/out", "a.csv") == "/out/a.csv"

    def test_uses_bare_filename(self):
        """Test directories in the artifact name are dropped."""
        assert build_destination_key("dist/", "build/js/bundle.js") == "dist/bundle.js"

    def test_is_prepared_rejects_none(self):
        assert is_prepared(None) is False
