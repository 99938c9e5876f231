"""Path patterns for route layers.

Patterns use ``{param}`` segments with optional converters::

    "/users"              static
    "/users/{id}"         one segment, any characters but "/"
    "/users/{id:int}"     digits only
    "/files/{rest:path}"  the remainder of the path, slashes included

Patterns match the whole request path, ignoring a trailing slash. They
do not look at the HTTP method; method handling belongs to whoever
registered the layer.
"""

import re
from dataclasses import dataclass

from kelp.errors import ConfigurationError

# Regex fragment for each supported converter
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


def parse_path(path: str) -> list[PathSegment]:
    """Split a pattern into segments.

    Raises ``ConfigurationError`` for unknown converters, a ``path``
    converter that is not last, Flask/Express-style parameters, and
    parameter names that are not identifiers or appear twice.
    """
    parts = [p for p in path.strip("/").split("/") if p]
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for i, part in enumerate(parts):
        if part.startswith("<") or part.startswith(":"):
            msg = (
                f"Route path {path!r} uses an unsupported parameter syntax "
                f"({part!r}). Use {{param}} segments instead."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name, param_type = inner, "str"
            if not param_name.isidentifier():
                msg = f"Parameter name {param_name!r} in {path!r} is not a valid identifier."
                raise ConfigurationError(msg)
            if param_name in seen:
                msg = f"Parameter {param_name!r} appears more than once in {path!r}."
                raise ConfigurationError(msg)
            seen.add(param_name)
            if param_type not in CONVERTERS:
                msg = f"Unknown path converter {param_type!r} in {path!r}."
                raise ConfigurationError(msg)
            if param_type == "path" and i != len(parts) - 1:
                msg = f"The path converter must be the last segment in {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(value=part, is_param=True, param_name=param_name, param_type=param_type)
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class PathPattern:
    """A compiled path pattern.

    Usage::

        pattern = PathPattern("/users/{id:int}")
        pattern.match("/users/42")   # {"id": "42"}
        pattern.match("/users/bob")  # None
    """

    __slots__ = ("_regex", "path", "segments")

    def __init__(self, path: str) -> None:
        self.path = path
        self.segments = tuple(parse_path(path))
        pieces: list[str] = []
        for seg in self.segments:
            if seg.is_param:
                pieces.append(f"/(?P<{seg.param_name}>{CONVERTERS[seg.param_type]})")
            else:
                pieces.append("/" + re.escape(seg.value))
        self._regex = re.compile("^" + "".join(pieces) + "/?$")

    def match(self, path: str) -> dict[str, str] | None:
        """Return captured parameters if *path* matches, else None."""
        if not self.segments:
            return {} if path.strip("/") == "" else None
        found = self._regex.match(path)
        if found is None:
            return None
        return found.groupdict()

    @property
    def shape(self) -> str:
        """The pattern with parameter names erased, e.g. ``/users/{int}``.

        Two patterns with the same shape match exactly the same paths.
        """
        return "/" + "/".join(
            f"{{{seg.param_type}}}" if seg.is_param else seg.value for seg in self.segments
        )

    def __repr__(self) -> str:
        return f"PathPattern({self.path!r})"
