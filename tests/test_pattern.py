"""Tests for wren.routing.pattern — path classification and compilation."""

import re

import pytest

from wren.routing.pattern import (
    CompiledPattern,
    LiteralPath,
    PlaceholderPath,
    RawPattern,
    classify_path,
    compile_path,
)


class TestClassifyPath:
    def test_literal(self) -> None:
        assert classify_path("/hello-world/simple") == LiteralPath("/hello-world/simple")

    def test_placeholders_in_order(self) -> None:
        spec = classify_path("/hello/:and/:junk")
        assert isinstance(spec, PlaceholderPath)
        assert spec.names == ("and", "junk")

    def test_compiled_pattern_is_raw(self) -> None:
        regex = re.compile(r"/kaka/(.*?)/junk")
        assert classify_path(regex) == RawPattern(regex)

    def test_already_classified_passes_through(self) -> None:
        spec = LiteralPath("/x")
        assert classify_path(spec) is spec

    def test_rejects_other_types(self) -> None:
        with pytest.raises(TypeError, match="string or compiled pattern"):
            classify_path(42)  # type: ignore[arg-type]


class TestLiteralPatterns:
    def test_exact_match(self) -> None:
        pattern = compile_path("/hello-world/simple")
        assert pattern.match("/hello-world/simple") is not None
        assert pattern.placeholder_names == ()

    def test_no_partial_match(self) -> None:
        pattern = compile_path("/hello")
        assert pattern.match("/hello/there") is None
        assert pattern.match("/say/hello") is None
        assert pattern.match("/hello\n") is None

    def test_regex_characters_are_literal(self) -> None:
        pattern = compile_path("/file.txt")
        assert pattern.match("/file.txt") is not None
        assert pattern.match("/fileXtxt") is None


class TestPlaceholderPatterns:
    def test_captures_follow_names(self) -> None:
        pattern = compile_path("/hello/:and/:junk")
        match = pattern.match("/hello/foo/bar")
        assert match is not None
        assert match.groups() == ("foo", "bar")
        assert len(match.groups()) == len(pattern.placeholder_names)

    def test_placeholder_does_not_cross_segments(self) -> None:
        pattern = compile_path("/users/:id")
        assert pattern.match("/users/1/2") is None

    @pytest.mark.parametrize("char", ["?", "#", "&"])
    def test_placeholder_excludes_boundaries(self, char: str) -> None:
        pattern = compile_path("/users/:id")
        assert pattern.match(f"/users/a{char}b") is None

    def test_placeholder_needs_one_character(self) -> None:
        pattern = compile_path("/users/:id")
        assert pattern.match("/users/") is None

    def test_placeholder_within_segment(self) -> None:
        pattern = compile_path("/files/:name.txt")
        match = pattern.match("/files/report.txt")
        assert match is not None
        assert match.group(1) == "report"

    def test_non_letter_name_is_literal_text(self) -> None:
        pattern = compile_path("/users/:id2")
        assert pattern.placeholder_names == ("id",)
        assert pattern.match("/users/7") is None
        assert pattern.match("/users/72") is not None


class TestRawPatterns:
    def test_uses_callers_regex(self) -> None:
        regex = re.compile(r"/kaka/(.*?)/junk")
        pattern = compile_path(regex)
        assert isinstance(pattern, CompiledPattern)
        assert pattern.regex is regex
        assert pattern.placeholder_names == ()

        match = pattern.match("/kaka/hi/junk")
        assert match is not None
        assert match.groups() == ("hi",)

    def test_callers_anchors_decide(self) -> None:
        unanchored = compile_path(re.compile(r"/kaka/"))
        anchored = compile_path(re.compile(r"^/kaka/$"))
        assert unanchored.match("/x/kaka/y") is not None
        assert anchored.match("/x/kaka/y") is None
