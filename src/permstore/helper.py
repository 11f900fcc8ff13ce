"""Internal helper functions for the store tree.

Managing path-representation and the value domain of stores.
"""

from __future__ import annotations

import typing as t
from collections.abc import Mapping

from typing_extensions import TypeAlias

from permstore.errors import InvalidPathError

StorePath: TypeAlias = str
PathSegment: TypeAlias = str
PATH_SEPARATOR = ":"

JSONPrimitive: TypeAlias = t.Union[str, int, float, bool, None]
JSONValue: TypeAlias = t.Union[
    JSONPrimitive,
    t.List["JSONValue"],
    t.Dict[str, "JSONValue"],
]
JSONObject: TypeAlias = t.Dict[str, JSONValue]


def join_path(path_segments: t.Iterable[PathSegment]) -> StorePath:
    """Join path in a well-defined manner.

    Args:
        path_segments: Segments to join.

    Returns:
        One joint path.
    """
    return PATH_SEPARATOR.join(path_segments)


def split_path(path: StorePath) -> list[PathSegment]:
    """Split path in a well-defined manner.

    Every segment must be non-empty. Leading or trailing separators are
    therefore rejected as well.

    Args:
        path: Path to be split.

    Returns:
        Segments of which the path consists.

    Raises:
        InvalidPathError: If the path contains an empty segment.
    """
    path_segments = str(path).split(PATH_SEPARATOR)
    if "" in path_segments:
        msg = (
            f"Path '{path}' is invalid, because it contains an empty segment. "
            f"Segments are separated by a single '{PATH_SEPARATOR}'."
        )
        raise InvalidPathError(msg)
    return path_segments


def normalize_path_segment(path_segment: str) -> str:
    """Bring segment into a standard form used for name comparisons.

    - lower case
    - '_' ignored

    Args:
        path_segment: Segment of a path to be normalized.

    Returns:
        The segment, following the described formatting standards.
    """
    return str(path_segment).lower().replace("_", "")


def is_plain_mapping(value: object) -> bool:
    """Check if a value should be promoted into a sub-store on write.

    Stores are excluded by the caller, see `Store._set_field`.

    Args:
        value: Value to be written.

    Returns:
        Whether the value is a plain mapping.
    """
    return isinstance(value, Mapping)


def is_lazy(value: object) -> bool:
    """Check if a stored value is a lazy field.

    Classes are callable too, but are never meant as lazy fields.
    """
    return callable(value) and not isinstance(value, type)
