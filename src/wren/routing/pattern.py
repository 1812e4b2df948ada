"""Path specification parsing and pattern compilation.

A route's path is declared one of three ways::

    "/hello-world/simple"          -> LiteralPath      (exact match)
    "/hello/:and/:junk"            -> PlaceholderPath  (named captures)
    re.compile(r"/kaka/(.*?)/junk") -> RawPattern       (caller's regex)

The kind is decided once, at registration, by ``classify_path``.
"""

import re
from dataclasses import dataclass

# ``:name``: a colon followed by one or more ASCII letters
PLACEHOLDER_RE = re.compile(r":([a-zA-Z]+)")

# What a placeholder captures: one or more characters up to the next
# path, query, fragment, or query-pair boundary.
PLACEHOLDER_CAPTURE = r"([^?/#&]+)"


@dataclass(frozen=True, slots=True)
class LiteralPath:
    """A plain string path with no placeholders."""

    path: str


@dataclass(frozen=True, slots=True)
class PlaceholderPath:
    """A string path containing one or more ``:name`` placeholders."""

    path: str
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RawPattern:
    """A pre-compiled regular expression supplied by the caller."""

    pattern: re.Pattern[str]


type PathSpec = LiteralPath | PlaceholderPath | RawPattern


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A matchable pattern plus the ordered names of its placeholders.

    ``placeholder_names`` is empty for literal and raw patterns. For
    placeholder paths a successful match always has exactly
    ``len(placeholder_names)`` groups.
    """

    regex: re.Pattern[str]
    placeholder_names: tuple[str, ...] = ()
    anchored: bool = True

    def match(self, path: str) -> re.Match[str] | None:
        """Test *path* against the pattern.

        Literal and placeholder patterns must match the whole path. Raw
        patterns are searched, so their own anchors decide.
        """
        if self.anchored:
            return self.regex.fullmatch(path)
        return self.regex.search(path)

    @property
    def source(self) -> str:
        return self.regex.pattern


def classify_path(spec: str | re.Pattern[str] | PathSpec) -> PathSpec:
    """Decide which kind of path specification *spec* is."""
    if isinstance(spec, LiteralPath | PlaceholderPath | RawPattern):
        return spec
    if isinstance(spec, re.Pattern):
        return RawPattern(spec)
    if not isinstance(spec, str):
        msg = f"Route path must be a string or compiled pattern, got {type(spec).__name__}"
        raise TypeError(msg)
    names = tuple(PLACEHOLDER_RE.findall(spec))
    if names:
        return PlaceholderPath(spec, names)
    return LiteralPath(spec)


def compile_path(spec: str | re.Pattern[str] | PathSpec) -> CompiledPattern:
    """Compile a path specification into a ``CompiledPattern``.

    Placeholder names must be ASCII letters only. Anything else (digits,
    underscores) is left in the path as literal text, so the pattern
    compiles but will not match the way it reads. This is not validated.
    """
    match classify_path(spec):
        case RawPattern(pattern):
            return CompiledPattern(pattern, (), anchored=False)
        case PlaceholderPath(path, names):
            parts: list[str] = []
            last = 0
            for m in PLACEHOLDER_RE.finditer(path):
                parts.append(re.escape(path[last : m.start()]))
                parts.append(PLACEHOLDER_CAPTURE)
                last = m.end()
            parts.append(re.escape(path[last:]))
            return CompiledPattern(re.compile("".join(parts)), names)
        case LiteralPath(path):
            return CompiledPattern(re.compile(re.escape(path)))
