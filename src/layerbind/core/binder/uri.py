"""Bindings references.

A reference is a URI such as ``module:/*::default`` or
``module-hiera:/ntp/data?optional``. Identity is structural: two references
are the same when their normalized string forms are equal.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union
from urllib.parse import urlsplit

WILDCARD = "*"
OPTIONAL_QUERIES = frozenset({"", "optional"})


@dataclass(frozen=True)
class BindingsURI:
    """A parsed bindings reference.

    ``query`` is ``None`` when the reference has no ``?`` at all, and ``""``
    for a bare trailing ``?``; both ``""`` and ``"optional"`` mark the
    reference optional.
    """

    scheme: str
    path: str
    query: Optional[str] = None

    @classmethod
    def parse(cls, text: Union[str, "BindingsURI"]) -> "BindingsURI":
        if isinstance(text, BindingsURI):
            return text
        raw = str(text).strip()
        parts = urlsplit(raw)
        # urlsplit cannot tell "x?" from "x"
        query = parts.query if "?" in raw.split("#", 1)[0] else None
        return cls(scheme=parts.scheme, path=parts.path, query=query)

    @classmethod
    def build(cls, scheme: str, path: str) -> "BindingsURI":
        """Create a clean reference (no query) with an absolute path."""
        if not path.startswith("/"):
            path = "/" + path
        return cls(scheme=scheme, path=path)

    @property
    def is_optional(self) -> bool:
        return self.query is not None and self.query in OPTIONAL_QUERIES

    def segments(self) -> List[str]:
        """Path segments after the leading ``/``, without a trailing empty one.

        ``/`` and ``""`` both yield ``[]``; ``/ntp/data/`` yields
        ``["ntp", "data"]``.
        """
        split_path = self.path.split("/")
        if len(split_path) > 1 and split_path[-1] == "":
            split_path.pop()
        return split_path[1:]

    def __str__(self) -> str:
        text = f"{self.scheme}:{self.path}"
        if self.query is not None:
            text += f"?{self.query}"
        return text


def parse_references(descriptions: Union[None, str, Iterable[str]]) -> List[BindingsURI]:
    """Normalize a single reference or a list of references into parsed URIs."""
    if not descriptions:
        return []
    if isinstance(descriptions, str):
        descriptions = [descriptions]
    return [BindingsURI.parse(d) for d in descriptions]


def unique_references(uris: Iterable[BindingsURI]) -> List[BindingsURI]:
    """Drop duplicates by normalized form, keeping first-seen order."""
    seen: dict[str, BindingsURI] = {}
    for uri in uris:
        seen.setdefault(str(uri), uri)
    return list(seen.values())


def subtract_references(
    included: Iterable[BindingsURI], excluded: Iterable[BindingsURI]
) -> List[BindingsURI]:
    """Return ``included - excluded`` compared by normalized string form."""
    excluded_keys = {str(uri) for uri in excluded}
    return [uri for uri in unique_references(included) if str(uri) not in excluded_keys]


__all__ = [
    "WILDCARD",
    "BindingsURI",
    "parse_references",
    "unique_references",
    "subtract_references",
]
