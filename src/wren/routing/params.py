"""Request parameter extraction.

Builds the single parameter mapping a handler receives. Sources are
applied in a fixed order, later ones overwriting earlier ones on key
collision::

    query string  ->  path captures  ->  form body (POST/PUT)

Captures from a pattern without named placeholders are collected, in
order, under the reserved ``"captures"`` key.
"""

from typing import Any
from urllib.parse import parse_qsl

from wren.errors import RouteConsistencyError
from wren.routing.route import Route

CAPTURES_KEY = "captures"

type ParamMap = dict[str, Any]


def parse_query(query_string: str) -> dict[str, str]:
    """Decode a query string (or URL-encoded body) into a flat mapping.

    Repeated keys keep the last value; blank values are kept.
    """
    return dict(parse_qsl(query_string, keep_blank_values=True))


def extract_params(route: Route, path: str, query_string: str = "") -> ParamMap:
    """Match *route* against *path* and build its parameters.

    *path* must be the exact string the route table matched; it is not
    re-parsed. Raises ``RouteConsistencyError`` if it does not match,
    which means the caller skipped the route table.
    """
    match = route.pattern.match(path)
    if match is None:
        raise RouteConsistencyError(route.pattern.source, path)

    params: ParamMap = {**parse_query(query_string)}
    names = route.placeholder_names
    captures: list[str] = []
    for i, value in enumerate(match.groups()):
        if i < len(names):
            params[names[i]] = value
        else:
            captures.append(value)

    if captures:
        params[CAPTURES_KEY] = captures
    return params


def merge_body(params: ParamMap, body: bytes, encoding: str = "utf-8") -> ParamMap:
    """Merge URL-encoded form fields from *body* into *params* (body wins).

    Returns a new mapping. Undecodable bodies raise ``UnicodeDecodeError``.
    """
    if not body:
        return dict(params)
    return {**params, **parse_query(body.decode(encoding))}
