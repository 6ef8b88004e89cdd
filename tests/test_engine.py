# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for ugcguard.engine: dispatcher, batch wrapper and end-to-end behaviour."""

import logging

import pytest

from ugcguard import is_clean, sanitize, sanitize_batch
from ugcguard.options import FieldType, SanitizationOptions
from ugcguard.presets import PRESETS


class TestDispatcher:
    def test_none_short_circuits(self):
        result = sanitize(None, "EMAIL")
        assert result.value == ""
        assert result.modified is False
        assert result.issues == ()
        assert result.original is None

    def test_unchanged_input(self):
        result = sanitize("Hello")
        assert result.value == "Hello"
        assert result.modified is False
        assert result.issues == ()
        assert result.original is None

    def test_non_string_stringified(self):
        result = sanitize(42)
        assert result.value == "42"
        assert result.modified is False

    def test_bool_uses_python_spelling(self):
        assert sanitize(True).value == "True"
        assert sanitize(False).value == "False"

    def test_bytes_decoded_as_utf8(self):
        assert sanitize("café".encode()).value == "café"

    def test_script_removed_from_text(self):
        result = sanitize("<script>alert(1)</script>Hello", {"field_type": "text", "level": "strict"})
        assert result.value == "Hello"
        assert result.modified is True
        assert result.issues == ("Removed script tags",)
        assert result.original == "<script>alert(1)</script>Hello"

    def test_accepts_options_object(self):
        result = sanitize("<b>Band</b>", SanitizationOptions(field_type=FieldType.TEXT))
        assert result.value == "Band"
        assert result.issues == ("Removed HTML tags",)

    def test_accepts_preset_name(self):
        assert sanitize("Hello World!", "slug").value == "hello-world"


class TestTrimAndTruncate:
    def test_trim_is_silent(self):
        result = sanitize("  <b>x</b>  ", {"field_type": "html"})
        assert result.value == "<b>x</b>"
        assert result.modified is True
        assert result.issues == ()

    def test_trim_disabled(self):
        result = sanitize("  <b>x</b>  ", {"field_type": "html", "trim": False})
        assert result.value == "  <b>x</b>  "
        assert result.modified is False

    def test_truncation(self):
        result = sanitize("abcdefghij", {"max_length": 5})
        assert result.value == "abcde"
        assert result.modified is True
        assert result.issues == ("Truncated to 5 characters",)

    def test_zero_means_unlimited(self):
        value = "a" * 10_000
        assert sanitize(value, {"max_length": 0}).value == value

    def test_exact_length_not_truncated(self):
        assert sanitize("abcde", {"max_length": 5}).issues == ()

    @pytest.mark.parametrize("field_type", list(FieldType))
    def test_length_bound_for_every_field_type(self, field_type):
        value = "https://example.com/" + "a" * 400 if field_type is FieldType.URL else "word " * 200
        result = sanitize(value, {"field_type": field_type, "max_length": 50})
        assert len(result.value) <= 50


class TestCustomSanitizer:
    def test_hook_applied_after_strategy(self):
        result = sanitize("<b>hello</b>", {"custom_sanitizer": str.upper})
        assert result.value == "HELLO"
        assert result.issues == ("Removed HTML tags", "Applied custom sanitizer")

    def test_identity_hook_is_silent(self):
        result = sanitize("hello", {"custom_sanitizer": lambda s: s})
        assert result.modified is False
        assert result.issues == ()

    def test_hook_runs_before_trim_and_truncate(self):
        result = sanitize("abc", {"custom_sanitizer": lambda s: f"  {s}{s}  ", "max_length": 4})
        assert result.value == "abca"

    def test_hook_exception_rejects(self, caplog):
        def boom(_value):
            raise RuntimeError("hook failed")

        with caplog.at_level(logging.WARNING, logger="ugcguard.engine"):
            result = sanitize("hello", {"custom_sanitizer": boom})
        assert result.value == ""
        assert result.rejected
        assert result.issues == ("Custom sanitizer failed",)
        assert "Custom sanitizer failed for text input" in caplog.text
        assert "hello" not in caplog.messages[0]


class TestFieldTypesEndToEnd:
    def test_javascript_url_rejected(self):
        result = sanitize("javascript:alert(1)", "URL")
        assert result.value == ""
        assert result.rejected
        assert result.issues == ("Blocked javascript: protocol in URL",)

    def test_disallowed_protocol(self):
        result = sanitize("ftp://example.com/file", "URL")
        assert result.value == ""
        assert result.issues == ("Protocol 'ftp' not allowed",)

    def test_youtube_allowlist_accepts(self):
        url = "https://www.youtube.com/watch?v=abc"
        result = sanitize(url, "YOUTUBE_URL")
        assert result.value == url
        assert result.modified is False

    def test_youtube_allowlist_rejects_other_hosts(self):
        result = sanitize("https://evil.com/video", "YOUTUBE_URL")
        assert result.value == ""
        assert result.issues == ("Domain 'evil.com' not allowed",)

    def test_youtube_allowlist_rejects_lookalike_suffix(self):
        assert sanitize("https://youtube.com.evil.com/", "YOUTUBE_URL").value == ""

    def test_filename_traversal(self):
        result = sanitize("../../etc/passwd", "FILENAME")
        assert result.value == "etcpasswd"
        assert "/" not in result.value
        assert not result.value.startswith(".")
        assert result.issues == ("Sanitized filename",)

    def test_filename_single_dot(self):
        assert sanitize("my file.tar.gz", "FILENAME").value == "my_file_tar.gz"

    def test_slug(self):
        result = sanitize("  Hello World!  ", "SLUG")
        assert result.value == "hello-world"
        assert result.issues == ("Normalized slug",)

    def test_slug_drops_punctuation(self):
        result = sanitize("Southern University's Band!!!", {"field_type": "slug"})
        assert result.value == "southern-universitys-band"

    def test_subdomain_of_allowed_domain(self):
        options = {"field_type": "url", "allowed_domains": ["youtube.com"]}
        result = sanitize("https://www.youtube.com/watch?v=abc", options)
        assert "youtube.com" in result.value
        assert result.modified is False

    def test_email_markup_characters_removed(self):
        result = sanitize("test@example.com<script>", {"field_type": "email"})
        assert result.value == "test@example.comscript"
        assert result.issues == ("Removed invalid email characters",)

    def test_email_lowercased(self):
        result = sanitize("User@Example.COM", "EMAIL")
        assert result.value == "user@example.com"
        assert result.modified is True

    def test_email_rejected(self):
        result = sanitize("not-an-email", "EMAIL")
        assert result.value == ""
        assert result.issues == ("Invalid email format",)

    def test_strict_search_escapes_metacharacters(self):
        result = sanitize("a.b", {"field_type": "search", "level": "strict"})
        assert result.value == "a\\.b"
        assert result.issues == ("Escaped regex metacharacters",)

    def test_search_preset_strips_tags(self):
        result = sanitize("<b>rock</b> bands", "SEARCH")
        assert result.value == "rock bands"
        assert result.issues == ("Removed HTML tags",)

    def test_rich_text_allowlist(self):
        result = sanitize('<p onclick="x()">Hi <b>there</b></p>', "RICH_TEXT")
        assert result.value == "<p>Hi there</p>"
        assert result.issues == (
            "Removed event handlers",
            "Removed disallowed tag: b",
            "Removed disallowed tag: b",
        )

    def test_rich_text_drops_iframe_with_content(self):
        result = sanitize('<p>x</p><iframe src="https://evil.example">y</iframe>', "RICH_TEXT")
        assert result.value == "<p>x</p>"
        assert result.issues == ("Removed iframe tags",)

    def test_control_only_input(self):
        result = sanitize("\x00\x01\x02")
        assert result.value == ""
        assert result.issues == ("Removed control characters",)


class TestNoThrow:
    @pytest.mark.parametrize("field_type", list(FieldType))
    @pytest.mark.parametrize(
        "value",
        [
            "",
            "\x00\x01\x7f",
            "<" * 100_001,
            "<a " * 40_000,
            "javascript:" * 10_000,
            "\ud800 lone surrogate",
        ],
        ids=["empty", "control", "brackets", "open-tags", "js-repeat", "surrogate"],
    )
    def test_never_raises(self, field_type, value):
        result = sanitize(value, {"field_type": field_type, "allowed_tags": ["p", "a"]})
        assert isinstance(result.value, str)

    def test_deterministic(self):
        value = '<p onclick="x">Tom & Jerry\'s <script>bad()</script></p>'
        for name in PRESETS:
            assert sanitize(value, name) == sanitize(value, name)

    def test_modified_reflects_change(self):
        for name in PRESETS:
            result = sanitize("  Mixed <i>Input</i> & more  ", name)
            assert result.modified == (result.value != "  Mixed <i>Input</i> & more  ")

    @pytest.mark.timeout(10)
    def test_long_whitespace_description(self):
        result = sanitize(" " * 100_000 + "x", {"field_type": "description"})
        assert result.value == "x"
        assert result.issues == ("Normalized whitespace",)

    @pytest.mark.timeout(10)
    def test_long_whitespace_inside_allowed_tag(self):
        text = "<p" + " " * 100_000 + ">x</p>"
        result = sanitize(text, "RICH_TEXT")
        assert result.value == text
        assert result.modified is False


class TestBatch:
    def test_independent_results(self):
        results = sanitize_batch(
            {"name": "<b>Band</b>", "email": "bad", "bio": "ok"},
            {"name": "NAME", "email": "EMAIL"},
        )
        assert results["name"].value == "Band"
        assert results["email"].rejected
        assert results["bio"].value == "ok"
        assert results["bio"].modified is False

    def test_keys_preserved(self):
        values = {"a": "1", "b": None, "c": 3}
        assert list(sanitize_batch(values)) == ["a", "b", "c"]

    def test_none_entry(self):
        assert sanitize_batch({"x": None})["x"].value == ""

    def test_failing_hook_only_rejects_its_key(self):
        def boom(_value):
            raise ValueError("bad")

        results = sanitize_batch(
            {"name": "Band", "title": "Song", "bio": "About us"},
            {"title": {"custom_sanitizer": boom}, "bio": {"field_type": "description"}},
        )
        assert results["title"].rejected
        assert results["title"].issues == ("Custom sanitizer failed",)
        assert results["name"].value == "Band"
        assert results["bio"].value == "About us"


class TestIsClean:
    def test_clean(self):
        assert is_clean("Hello")

    def test_unclean(self):
        assert not is_clean("<b>x</b>")

    def test_with_preset(self):
        assert is_clean("hello-world", "SLUG")
        assert not is_clean("Hello World", "SLUG")


class TestLogging:
    def test_rejection_logged_without_value(self, caplog):
        with caplog.at_level(logging.INFO, logger="ugcguard.engine"):
            sanitize("javascript:alert(1)", "URL")
        assert "Rejected url input" in caplog.text
        assert "alert(1)" not in caplog.text

    def test_clean_input_not_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ugcguard.engine"):
            sanitize("Hello")
        assert caplog.records == []
