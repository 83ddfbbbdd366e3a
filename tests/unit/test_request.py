"""
Unit tests for HTTP request parsing and id extraction.
"""

import pytest

from userserver.http.request import (
    HTTPRequest,
    RequestParser,
    InvalidIdError,
    extract_id,
    parse_id,
)


class TestRequestParser:
    """Tests for RequestParser class."""

    def setup_method(self):
        self.parser = RequestParser()

    def test_parse_simple_get(self, sample_get_request):
        """Test parsing a simple GET request."""
        request = self.parser.parse(sample_get_request)

        assert request.method == "GET"
        assert request.path == "/users/7"
        assert request.version == "HTTP/1.1"
        assert request.headers["host"] == "localhost:8080"
        assert request.headers["accept"] == "application/json"

    def test_parse_post_with_body(self, sample_post_request):
        """Test parsing POST request with JSON body."""
        request = self.parser.parse(sample_post_request)

        assert request.method == "POST"
        assert request.path == "/users"
        assert request.body == '{"name": "Ann", "email": "ann@example.com"}'
        assert request.headers["content-length"] == str(len(request.body.encode()))

    def test_body_is_empty_string_after_blank_line(self):
        """Test a terminator with nothing after it yields an empty body."""
        request = self.parser.parse(b"GET /users HTTP/1.1\r\nHost: x\r\n\r\n")

        assert request.body == ""

    def test_body_is_none_without_terminator(self):
        """Test a request with no blank line has no body at all."""
        request = self.parser.parse(b"POST /users HTTP/1.1\r\nHost: x\r\n")

        assert request.body is None
        assert request.method == "POST"

    def test_body_split_at_first_terminator(self):
        """Test that only the first \\r\\n\\r\\n separates headers from body."""
        request = self.parser.parse(b"PUT /users/1 HTTP/1.1\r\n\r\nfirst\r\n\r\nsecond")

        assert request.body == "first\r\n\r\nsecond"

    def test_query_string_kept_in_path(self):
        """Test the request target is kept verbatim."""
        request = self.parser.parse(b"GET /users?page=2 HTTP/1.1\r\n\r\n")

        assert request.path == "/users?page=2"

    def test_header_names_lowercased(self):
        """Test header names are stored lowercase."""
        request = self.parser.parse(
            b"GET / HTTP/1.1\r\nContent-Type: text/plain\r\nX-CUSTOM: value\r\n\r\n"
        )

        assert request.headers == {"content-type": "text/plain", "x-custom": "value"}

    def test_duplicate_headers_joined(self):
        """Test repeated headers are combined."""
        request = self.parser.parse(b"GET / HTTP/1.1\r\nAccept: a\r\nAccept: b\r\n\r\n")

        assert request.headers["accept"] == "a, b"

    def test_malformed_header_lines_skipped(self):
        """Test lines without a colon are ignored."""
        request = self.parser.parse(b"GET / HTTP/1.1\r\nnot a header\r\nHost: x\r\n\r\n")

        assert request.headers == {"host": "x"}

    def test_invalid_utf8_replaced(self):
        """Test undecodable bytes do not break parsing."""
        request = self.parser.parse(b"GET /users HTTP/1.1\r\n\r\n\xff\xfe")

        assert request.method == "GET"
        assert "�" in request.body

    def test_garbage_never_raises(self):
        """Test arbitrary bytes still produce a request."""
        request = self.parser.parse(b"\x00\x01garbage")

        assert request.path == ""
        assert request.version == ""
        assert request.body is None

    def test_request_line_with_missing_parts(self):
        """Test a bare method parses with empty target and version."""
        request = self.parser.parse(b"GET\r\n\r\n")

        assert request.method == "GET"
        assert request.path == ""
        assert request.request_line == "GET"


class TestExtractId:
    """Tests for extract_id()."""

    @pytest.mark.parametrize("path,expected", [
        ("/users/5", "5"),
        ("/users/5/posts", "5"),
        ("/users/42 HTTP/1.1", "42"),
        ("/users/", ""),
        ("/users", ""),
        ("", ""),
        ("/users/abc", "abc"),
    ])
    def test_extract(self, path, expected):
        assert extract_id(path) == expected


class TestParseId:
    """Tests for parse_id()."""

    def test_valid_ids(self):
        assert parse_id("1") == 1
        assert parse_id("007") == 7
        assert parse_id("-3") == -3
        assert parse_id("+4") == 4

    def test_range_limits(self):
        """Test the 32-bit signed range is accepted at both ends."""
        assert parse_id("2147483647") == 2147483647
        assert parse_id("-2147483648") == -2147483648

    @pytest.mark.parametrize("text", [
        "",
        "abc",
        "1.5",
        "1e3",
        " 1",
        "2147483648",
        "-2147483649",
        "١٢",
    ])
    def test_invalid_ids(self, text):
        with pytest.raises(InvalidIdError):
            parse_id(text)

    def test_invalid_id_is_value_error(self):
        with pytest.raises(ValueError):
            parse_id("x")


class TestHTTPRequest:
    """Tests for HTTPRequest properties."""

    def test_user_id(self):
        assert HTTPRequest(method="GET", path="/users/12").user_id == 12

    def test_user_id_missing(self):
        with pytest.raises(InvalidIdError):
            HTTPRequest(method="GET", path="/users/").user_id

    def test_request_line(self):
        request = HTTPRequest(method="DELETE", path="/users/3")
        assert request.request_line == "DELETE /users/3 HTTP/1.1"
