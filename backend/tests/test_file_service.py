"""
MindScribe Backend — File Service Unit Tests
===============================================

What:  Tests for audio upload validation, MIME mapping and temp-file lifecycle.
How:   Real FileService instances writing into pytest's tmp_path.
"""

from pathlib import Path

import pytest

from app.exceptions import ValidationError
from app.services.file_service import FileService, get_mime_type


class TestMimeType:
    """Extension → MIME type mapping sent to Gemini."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("lecture.mp3", "audio/mpeg"),
            ("lecture.wav", "audio/wav"),
            ("lecture.m4a", "audio/mp4"),
            ("lecture.ogg", "audio/ogg"),
            ("lecture.webm", "audio/webm"),
            ("LECTURE.M4A", "audio/mp4"),
        ],
    )
    def test_known_extensions(self, filename, expected):
        assert get_mime_type(filename) == expected

    def test_unknown_extension_defaults_to_mpeg(self):
        assert get_mime_type("recording.aac") == "audio/mpeg"
        assert get_mime_type("noextension") == "audio/mpeg"


class TestFileValidation:
    """Tests for type and size checks."""

    @pytest.fixture(autouse=True)
    def _service(self, tmp_path):
        self.service = FileService(upload_dir=str(tmp_path), max_upload_size=1_048_576)

    # ── Type Validation ───────────────────────────────────────────────────

    def test_audio_extension_accepted(self):
        self.service.validate_type("note.webm", "application/octet-stream")

    def test_extension_check_is_case_insensitive(self):
        self.service.validate_type("note.MP3", None)

    def test_audio_content_type_accepted_without_extension(self):
        self.service.validate_type("blob", "audio/ogg")

    def test_pdf_rejected(self):
        with pytest.raises(ValidationError, match="Invalid file type"):
            self.service.validate_type("slides.pdf", "application/pdf")

    def test_image_rejected(self):
        with pytest.raises(ValidationError, match="Invalid file type"):
            self.service.validate_type("photo.jpg", "image/jpeg")

    # ── Size Validation ───────────────────────────────────────────────────

    def test_size_within_limit(self):
        self.service.validate_size(None, 1000)

    def test_size_at_limit(self):
        self.service.validate_size(1_048_576, 1_048_576)

    def test_size_over_limit(self):
        with pytest.raises(ValidationError, match="too large"):
            self.service.validate_size(None, 1_048_577)

    def test_reported_size_over_limit(self):
        with pytest.raises(ValidationError, match="too large"):
            self.service.validate_size(5_000_000, 10)

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            self.service.validate_size(0, 0)

    def test_validate_upload_checks_type_first(self):
        with pytest.raises(ValidationError, match="Invalid file type"):
            self.service.validate_upload("notes.txt", "text/plain", b"")


class TestTempFiles:
    """Store, read back, and clean up temporary uploads."""

    @pytest.mark.asyncio
    async def test_store_and_read_round_trip(self, tmp_path):
        service = FileService(upload_dir=str(tmp_path / "uploads"), max_upload_size=1_048_576)

        path = await service.store_temp_file(b"RIFFdata", "voice.wav")

        assert path.endswith(".wav")
        assert path.startswith(str((tmp_path / "uploads").resolve()))
        assert await service.read_file(path) == b"RIFFdata"

    @pytest.mark.asyncio
    async def test_stored_name_never_uses_client_filename(self, tmp_path):
        service = FileService(upload_dir=str(tmp_path), max_upload_size=1_048_576)

        path = await service.store_temp_file(b"x", "../../etc/passwd.mp3")

        assert "passwd" not in path
        assert path.startswith(str(tmp_path.resolve()))

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, tmp_path):
        service = FileService(upload_dir=str(tmp_path), max_upload_size=1_048_576)
        path = await service.store_temp_file(b"audio", "a.mp3")

        await service.cleanup_file(path)

        assert not Path(path).exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, tmp_path):
        """cleanup_file should not raise for files that are already gone."""
        service = FileService(upload_dir=str(tmp_path), max_upload_size=1_048_576)
        await service.cleanup_file(str(tmp_path / "missing.mp3"))

    @pytest.mark.asyncio
    async def test_cleanup_failure_is_swallowed(self, tmp_path, monkeypatch):
        service = FileService(upload_dir=str(tmp_path), max_upload_size=1_048_576)
        path = await service.store_temp_file(b"audio", "a.mp3")

        def boom(_path):
            raise PermissionError("read-only volume")

        monkeypatch.setattr("app.services.file_service.os.remove", boom)

        await service.cleanup_file(path)
