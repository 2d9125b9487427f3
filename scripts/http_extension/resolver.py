"""Enumeration resolution for token-valued attributes.

Two independent closed enumerations are supported: the conflict-handling
mode (UrlReservation/@HandleExisting) and the access rights level
(UrlAce/@Rights). An unrecognized token is reported and the caller's
default is kept, so the rest of the element is still validated in the same
pass.
"""

from __future__ import annotations

from enum import Enum, IntEnum

from http_extension import messages
from http_extension.interfaces import MessageSink
from http_extension.types import AceRights, ConflictMode, SourcePosition


class EnumerationKind(str, Enum):
    CONFLICT_MODE = "conflict-mode"
    RIGHTS = "rights"


# Token order is the order listed in diagnostics.
_TOKENS: dict[EnumerationKind, dict[str, IntEnum]] = {
    EnumerationKind.CONFLICT_MODE: {
        "replace": ConflictMode.REPLACE,
        "ignore": ConflictMode.IGNORE,
        "fail": ConflictMode.FAIL,
    },
    EnumerationKind.RIGHTS: {
        "all": AceRights.ALL,
        "delegate": AceRights.DELEGATE,
        "register": AceRights.REGISTER,
    },
}


def legal_tokens(kind: EnumerationKind) -> tuple[str, ...]:
    return tuple(_TOKENS[kind])


def resolve(
    kind: EnumerationKind,
    token: str,
    *,
    sink: MessageSink,
    position: SourcePosition,
    element_name: str,
    attribute_name: str,
    default: IntEnum,
) -> tuple[IntEnum, bool]:
    """Map token to its code.

    Tokens are case-sensitive.

    Returns:
        (code, True) for a recognized token; (default, False) otherwise, after
        an IllegalAttributeValue diagnostic listing every legal token.
    """
    code = _TOKENS[kind].get(token)
    if code is not None:
        return code, True

    sink.on_message(
        messages.illegal_attribute_value(
            position, element_name, attribute_name, token, legal_tokens(kind)
        )
    )
    return default, False
