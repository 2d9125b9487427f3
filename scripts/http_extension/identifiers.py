"""Identifier derivation and validation.

A derived identifier is the element kind's short tag followed by a SHA-1
digest of the ordered contextual parts. Identical inputs always give the
identical identifier, so an element authored twice without an Id collides
downstream as a true duplicate instead of producing two distinct rows.
"""

from __future__ import annotations

import base64
import hashlib
import re

from http_extension.types import Identifier, IdentifierKind

_LEGAL_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")

_PART_SEPARATOR = "|"


def is_legal_identifier(value: str) -> bool:
    """True if value may be used as an element identifier."""
    return _LEGAL_IDENTIFIER.fullmatch(value) is not None


def derive(kind: IdentifierKind | str, *parts: str | None) -> Identifier:
    """Derive a deterministic identifier for an element with no authored Id.

    Args:
        kind: Short tag for the element kind ("url", "ace").
        *parts: Ordered contextual values. None participates as "".

    Returns:
        Identifier with generated=True.

    Raises:
        ValueError: if kind is empty or not itself a legal identifier start.
    """
    tag = kind.value if isinstance(kind, IdentifierKind) else kind
    if not tag or not is_legal_identifier(tag):
        raise ValueError(f"Identifier kind tag must be a legal identifier, got {tag!r}")

    joined = _PART_SEPARATOR.join("" if part is None else part for part in parts)
    digest = hashlib.sha1(joined.encode("utf-8")).digest()
    encoded = base64.b64encode(digest).decode("ascii")
    suffix = encoded.replace("+", ".").replace("/", "_").rstrip("=")
    return Identifier(id=f"{tag}{suffix}", generated=True)
