"""Unit tests for the data models."""

import pytest

from workspace_facade.models import PostedFile, UploadedLink, posted_files_from_form


class TestPostedFile:

    def test_declared_mime_type_wins(self):
        posted = PostedFile("upload", "/tmp/php1", "report.pdf", "application/x-custom")
        assert posted.resolved_mime_type == "application/x-custom"

    def test_mime_type_guessed_from_name(self):
        assert PostedFile("upload", "/tmp/php1", "report.pdf").resolved_mime_type == "application/pdf"

    def test_unknown_extension(self):
        posted = PostedFile("upload", "/tmp/php1", "blob.zzqx")
        assert posted.resolved_mime_type == "application/octet-stream"


class TestPostedFilesFromForm:

    def test_single_value(self):
        files = posted_files_from_form("a.pdf", "/tmp/php1")
        assert files == [PostedFile("upload", "/tmp/php1", "a.pdf")]

    def test_arrays_keep_order(self):
        files = posted_files_from_form(
            ["a.pdf", "b.png"], ["/tmp/1", "/tmp/2"], field_name="docs", mime_types=[None, "image/png"]
        )
        assert [f.original_name for f in files] == ["a.pdf", "b.png"]
        assert files[1].mime_type == "image/png"
        assert all(f.field_name == "docs" for f in files)

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            posted_files_from_form(["a.pdf"], ["/tmp/1", "/tmp/2"])


def test_uploaded_link_as_dict():
    link = UploadedLink("00_invoice.pdf", "https://drive/x")
    assert link.as_dict() == {"fileName": "00_invoice.pdf", "webLink": "https://drive/x"}
