"""Content-Type detection for uploaded artifacts."""

from typing import List, Tuple

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Suffix -> Content-Type. Longest matching suffix wins.
_CONTENT_TYPES: List[Tuple[str, str]] = [
    (".js", "application/javascript; charset=utf-8"),
    (".mjs", "application/javascript; charset=utf-8"),
    (".js.map", "application/json; charset=utf-8"),
    (".map", "application/json; charset=utf-8"),
    (".json", "application/json; charset=utf-8"),
    (".css", "text/css; charset=utf-8"),
    (".html", "text/html; charset=utf-8"),
    (".txt", "text/plain; charset=utf-8"),
    (".csv", "text/csv; charset=utf-8"),
    (".xml", "application/xml"),
    (".svg", "image/svg+xml"),
    (".wasm", "application/wasm"),
    (".zip", "application/zip"),
    (".gz", "application/gzip"),
    (".tgz", "application/gzip"),
    (".tar.gz", "application/gzip"),
    (".whl", "application/zip"),
]


def register_content_type(suffix: str, content_type: str) -> None:
    """
    Add or override a suffix mapping.

    Example:
        >>> register_content_type(".bvh", "text/plain; charset=utf-8")
    """
    suffix = suffix.lower()
    if not suffix.startswith("."):
        suffix = f".{suffix}"

    for i, (known, _) in enumerate(_CONTENT_TYPES):
        if known == suffix:
            _CONTENT_TYPES[i] = (suffix, content_type)
            return
    _CONTENT_TYPES.append((suffix, content_type))


def detect_content_type(filename: str) -> str:
    """
    Content-Type for a file name, based on its suffix.

    Example:
        >>> detect_content_type("bundle.js")
        'application/javascript; charset=utf-8'
        >>> detect_content_type("release.unknownext")
        'application/octet-stream'
    """
    name = filename.lower()
    matches = [entry for entry in _CONTENT_TYPES if name.endswith(entry[0])]
    if not matches:
        return DEFAULT_CONTENT_TYPE
    return max(matches, key=lambda entry: len(entry[0]))[1]
