"""URL template path-variable substitution."""

import re
from collections.abc import Mapping
from urllib.parse import quote, urlsplit

from .exceptions import PathVariableError

# `:name` or `{name}`; names cannot start with a digit so ports stay literal
PLACEHOLDER_RE = re.compile(
    r":(?P<colon>[A-Za-z_][A-Za-z0-9_]*)|\{(?P<brace>[A-Za-z_][A-Za-z0-9_]*)\}"
)


def _split_origin(template: str) -> tuple[str, str]:
    """Split off `scheme://netloc` so credentials and ports are never scanned."""
    parts = urlsplit(template)
    if not parts.scheme or not parts.netloc:
        return "", template
    size = len(parts.scheme) + len("://") + len(parts.netloc)
    return template[:size], template[size:]


def placeholders(template: str) -> list[str]:
    """List placeholder names in order of first appearance."""
    _, rest = _split_origin(template)
    names = []
    for match in PLACEHOLDER_RE.finditer(rest):
        name = match.group("colon") or match.group("brace")
        if name not in names:
            names.append(name)
    return names


def resolve_path(
    template: str, path_variables: Mapping[str, str | int] | None = None
) -> str:
    """Fill every placeholder in `template` from `path_variables`.

    Values are percent-encoded as a single path segment. Keys with no
    placeholder are ignored. The scheme and host part of an absolute URL
    is left untouched.

    Args:
        template: URL such as "/api/users/:id/posts/{post_id}".
        path_variables: Placeholder values keyed by name.

    Returns:
        The URL with all placeholders replaced.

    Raises:
        PathVariableError: If any placeholder has no value.
    """
    path_variables = path_variables or {}
    missing = [name for name in placeholders(template) if name not in path_variables]
    if missing:
        raise PathVariableError(
            f"Missing path variables for {template}: {', '.join(missing)}",
            missing=missing,
            suggestions=[f"Pass path_variables with keys: {', '.join(missing)}"],
            context={"template": template},
        )

    def _substitute(match: re.Match) -> str:
        name = match.group("colon") or match.group("brace")
        return quote(str(path_variables[name]), safe="")

    origin, rest = _split_origin(template)
    return origin + PLACEHOLDER_RE.sub(_substitute, rest)
