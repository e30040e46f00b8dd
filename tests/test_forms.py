"""Tests for roost.http.forms — URL-encoded and multipart bodies."""

import pytest

from roost.http.forms import FormData, UploadFile, parse_form_data

BOUNDARY = "roostboundary"


def _multipart(*parts: str) -> bytes:
    body = "".join(f"--{BOUNDARY}\r\n{part}\r\n" for part in parts)
    return (body + f"--{BOUNDARY}--\r\n").encode()


class TestUrlEncoded:
    def test_fields(self) -> None:
        form = parse_form_data(b"name=ada&tag=a&tag=b&empty=", "application/x-www-form-urlencoded")
        assert form["name"] == "ada"
        assert form.get_list("tag") == ["a", "b"]
        assert form["empty"] == ""
        assert form.files == {}

    def test_charset_parameter(self) -> None:
        form = parse_form_data(b"q=caf%C3%A9", "application/x-www-form-urlencoded; charset=utf-8")
        assert form["q"] == "café"

    def test_unsupported_type(self) -> None:
        with pytest.raises(ValueError, match="Unsupported form content type"):
            parse_form_data(b"{}", "application/json")


class TestMultipart:
    def test_fields_and_files(self) -> None:
        body = _multipart(
            'Content-Disposition: form-data; name="title"\r\n\r\nHello',
            'Content-Disposition: form-data; name="avatar"; filename="a.png"\r\n'
            "Content-Type: image/png\r\n\r\nPNGDATA",
        )
        form = parse_form_data(body, f"multipart/form-data; boundary={BOUNDARY}")
        assert form["title"] == "Hello"
        upload = form.files["avatar"]
        assert upload.filename == "a.png"
        assert upload.content_type == "image/png"
        assert upload.content == b"PNGDATA"
        assert upload.size == 7

    def test_missing_boundary(self) -> None:
        with pytest.raises(ValueError, match="boundary"):
            parse_form_data(b"", "multipart/form-data")


class TestFormData:
    def test_mapping(self) -> None:
        form = FormData({"a": ["1", "2"]})
        assert dict(form) == {"a": "1"}
        assert form.get("missing", "x") == "x"
        assert "a" in form
        assert len(form) == 1

    def test_upload_repr(self) -> None:
        assert repr(UploadFile("f.txt", "text/plain", b"abc")) == (
            "UploadFile('f.txt', 'text/plain', 3 bytes)"
        )
