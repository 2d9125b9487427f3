"""Type definitions for the HTTP compiler extension.

Enums are the closed code sets the extension writes into its tables.
Row dataclasses are frozen and constructed complete; as_row() yields the
positional column tuple in table order.

Table shapes:
    WixHttpUrlReservation — (id, handle_existing, sddl, url, component_id)
    WixHttpUrlAce         — (id, url_reservation_id, security_principal, rights)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar


# ─── Namespace & Names ────────────────────────────────────────────────────────

HTTP_NAMESPACE = "http://wixtoolset.org/schemas/v4/wxs/http"

# Prefix that turns a service name into its virtual service account.
SERVICE_PRINCIPAL_PREFIX = "NT SERVICE\\"

URL_RESERVATION_TABLE = "WixHttpUrlReservation"
URL_ACE_TABLE = "WixHttpUrlAce"
CUSTOM_ACTION_TABLE = "CustomAction"

# Identifiers longer than this still compile but draw a warning.
MAX_IDENTIFIER_LENGTH = 72


# ─── Enums ────────────────────────────────────────────────────────────────────


class ConflictMode(IntEnum):
    """UrlReservation/@HandleExisting: what to do with an existing reservation."""

    REPLACE = 0
    IGNORE = 1
    FAIL = 2


class AceRights(IntEnum):
    """UrlAce/@Rights, stored as the generic access mask it maps to."""

    ALL = 0x10000000  # GENERIC_ALL
    DELEGATE = 0x40000000  # GENERIC_WRITE
    REGISTER = 0x20000000  # GENERIC_EXECUTE


class Platform(str, Enum):
    """Compilation target platform.

    ARM is the constrained architecture variant with its own custom actions;
    every other platform shares the x86 pair.
    """

    X86 = "x86"
    X64 = "x64"
    IA64 = "ia64"
    ARM = "arm"


class IdentifierKind(str, Enum):
    """Short tags that prefix derived identifiers."""

    URL_RESERVATION = "url"
    URL_ACE = "ace"


# ─── Scheduling Custom Actions ────────────────────────────────────────────────

# (install, uninstall) scheduling actions per platform family.
DEFAULT_CUSTOM_ACTIONS: tuple[str, str] = (
    "WixSchedHttpUrlReservationsInstall",
    "WixSchedHttpUrlReservationsUninstall",
)
ARM_CUSTOM_ACTIONS: tuple[str, str] = (
    "WixSchedHttpUrlReservationsInstall_ARM",
    "WixSchedHttpUrlReservationsUninstall_ARM",
)


def custom_actions_for(platform: Platform) -> tuple[str, str]:
    """Return the (install, uninstall) custom action pair for a platform."""
    if platform is Platform.ARM:
        return ARM_CUSTOM_ACTIONS
    return DEFAULT_CUSTOM_ACTIONS


# ─── Frozen Dataclasses ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class SourcePosition:
    """Where in the authored source an element came from.

    line is None when the host tree carries no line information
    (xml.etree.ElementTree elements do not; lxml elements do).
    """

    file: str | None
    line: int | None
    element: str

    def __str__(self) -> str:
        where = self.file or "<source>"
        if self.line is not None:
            return f"{where}({self.line})"
        return where


@dataclass(frozen=True)
class Identifier:
    """An element identifier plus whether it was derived rather than authored."""

    id: str
    generated: bool = False

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class UrlReservationRow:
    """One row of the WixHttpUrlReservation table."""

    table: ClassVar[str] = URL_RESERVATION_TABLE

    id: str
    handle_existing: ConflictMode
    sddl: str | None
    url: str
    component_id: str | None

    def as_row(self) -> tuple[str, int, str | None, str, str | None]:
        return (self.id, int(self.handle_existing), self.sddl, self.url, self.component_id)


@dataclass(frozen=True)
class UrlAceRow:
    """One row of the WixHttpUrlAce table.

    url_reservation_id is the owning UrlReservationRow.id; an ACE belongs to
    exactly one reservation.
    """

    table: ClassVar[str] = URL_ACE_TABLE

    id: str
    url_reservation_id: str
    security_principal: str
    rights: AceRights

    def as_row(self) -> tuple[str, str, str, int]:
        return (self.id, self.url_reservation_id, self.security_principal, int(self.rights))


@dataclass(frozen=True)
class SimpleReference:
    """A dependency edge from compiled output onto a named row in another table."""

    table: str
    name: str


Row = UrlReservationRow | UrlAceRow
