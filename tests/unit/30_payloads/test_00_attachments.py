# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for Attachment values."""

import io
from pathlib import Path

import pytest

from mailgun_client.attachments import DEFAULT_CONTENT_TYPE, Attachment
from mailgun_client.errors import MailgunValidationError


class TestConstruction:
    """Tests for metadata inferred at construction."""

    def test_path(self, tmp_path):
        path = tmp_path / "report.pdf"
        attachment = Attachment(str(path))

        assert attachment.kind == "path"
        assert attachment.filename == "report.pdf"
        assert attachment.content_type == "application/pdf"

    def test_pathlike(self, tmp_path):
        attachment = Attachment(tmp_path / "notes.txt")
        assert attachment.filename == "notes.txt"
        assert attachment.content_type == "text/plain"

    def test_bytes_defaults(self):
        attachment = Attachment(b"\x00\x01")
        assert attachment.kind == "bytes"
        assert attachment.filename == "file"
        assert attachment.content_type == DEFAULT_CONTENT_TYPE

    def test_explicit_metadata(self):
        attachment = Attachment(bytearray(b"a,b\n"), filename="data.csv", content_type="text/csv")
        assert attachment.data == b"a,b\n"
        assert attachment.filename == "data.csv"
        assert attachment.content_type == "text/csv"

    def test_stream_requires_metadata(self):
        """Test a wrapped stream must declare content type and length."""
        with pytest.raises(MailgunValidationError, match="known_length"):
            Attachment(io.BytesIO(b"data"), filename="d.bin")
        with pytest.raises(MailgunValidationError):
            Attachment(io.BytesIO(b"data"), content_type="text/plain")

    def test_stream(self):
        attachment = Attachment(io.BytesIO(b"data"), content_type="text/plain", known_length=4)
        assert attachment.kind == "stream"
        assert attachment.filename == "file"

    def test_empty_path(self):
        with pytest.raises(MailgunValidationError):
            Attachment("")

    def test_unsupported_type(self):
        with pytest.raises(MailgunValidationError, match="int"):
            Attachment(42)

    def test_negative_length(self):
        with pytest.raises(MailgunValidationError):
            Attachment(b"x", known_length=-1)


class TestCoerce:
    """Tests for Attachment.coerce."""

    def test_attachment_passthrough(self):
        attachment = Attachment(b"x")
        assert Attachment.coerce(attachment) is attachment

    def test_open_file_uses_name(self, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(b"\x89PNG")
        with open(path, "rb") as handle:
            attachment = Attachment.coerce(handle)
            assert attachment.kind == "stream"
            assert attachment.filename == "logo.png"
            assert attachment.content_type == "image/png"
            assert attachment.known_length is None

    def test_anonymous_stream(self):
        attachment = Attachment.coerce(io.BytesIO(b"x"))
        assert attachment.filename == "file"

    def test_path_string(self, tmp_path):
        attachment = Attachment.coerce(str(tmp_path / "a.txt"))
        assert attachment.kind == "path"


class TestRead:
    """Tests for loading attachment content."""

    @pytest.mark.asyncio
    async def test_read_file(self, tmp_path):
        path = tmp_path / "hello.txt"
        path.write_text("hello")

        filename, content, content_type = await Attachment(path).read()

        assert filename == "hello.txt"
        assert content == b"hello"
        assert content_type == "text/plain"

    @pytest.mark.asyncio
    async def test_read_missing_file(self, tmp_path):
        with pytest.raises(MailgunValidationError, match="not found"):
            await Attachment(tmp_path / "missing.txt").read()

    @pytest.mark.asyncio
    async def test_read_bytes(self):
        assert await Attachment(b"abc", filename="a.bin").read() == (
            "a.bin", b"abc", DEFAULT_CONTENT_TYPE,
        )

    @pytest.mark.asyncio
    async def test_read_stream(self):
        stream = io.BytesIO(b"1234")
        attachment = Attachment(stream, filename="n.txt", content_type="text/plain", known_length=4)
        assert await attachment.read() == ("n.txt", b"1234", "text/plain")

    @pytest.mark.asyncio
    async def test_text_stream_encoded(self):
        attachment = Attachment.coerce(io.StringIO("caffè"))
        _, content, _ = await attachment.read()
        assert content == "caffè".encode("utf-8")

    @pytest.mark.asyncio
    async def test_length_mismatch(self):
        attachment = Attachment(io.BytesIO(b"12"), content_type="text/plain", known_length=10)
        with pytest.raises(MailgunValidationError, match="expected 10"):
            await attachment.read()

    def test_repr(self):
        assert "hello.txt" in repr(Attachment(Path("hello.txt")))
