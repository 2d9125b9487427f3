"""YAML-driven UrlReservation fixture loader and test case generator.

Loads reservations.yaml and turns each entry under `cases` into a frozen
ReservationTestCase with a complete host document and readable pytest id.

Usage:
    from fixtures.fixture_loader import ReservationFixture

    fixture = ReservationFixture()

    @pytest.mark.parametrize(
        "tc",
        [pytest.param(tc, id=tc.id) for tc in fixture.generate_cases()],
    )
    def test_reservation(tc):
        ...
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import yaml

from http_extension.messages import MessageKind
from http_extension.types import HTTP_NAMESPACE, Platform

_HOST_ELEMENTS: frozenset[str] = frozenset({"Component", "ServiceInstall"})


# ─── TestCase Dataclass ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ReservationTestCase:
    """Generated test case for one authored reservation snippet.

    Fields:
        name: Fixture key (e.g. "sddl_and_aces").
        description: Human-readable description.
        parent: Host element kind the snippet is nested in.
        platform: Target platform for the compilation.
        document: Full host markup, namespace declared, ready to parse.
        expected_reservations: Number of WixHttpUrlReservation rows.
        expected_aces: Number of WixHttpUrlAce rows.
        expected_messages: MessageKinds in report order.
        expected_references: CustomAction names in declaration order.
        id: Pytest-friendly identifier.
    """

    name: str
    description: str
    parent: str
    platform: Platform
    document: str
    expected_reservations: int
    expected_aces: int
    expected_messages: tuple[MessageKind, ...]
    expected_references: tuple[str, ...]
    id: str


# ─── ReservationFixture ───────────────────────────────────────────────────────


class ReservationFixture:
    """Load reservations.yaml and generate ReservationTestCase objects."""

    def __init__(self, fixture_path: str | Path | None = None) -> None:
        """Initialize from reservations.yaml.

        Args:
            fixture_path: Path to the YAML file. If None, uses reservations.yaml
                next to this module.
        """
        if fixture_path is None:
            fixture_path = Path(__file__).parent / "reservations.yaml"
        self._path = Path(fixture_path)

        with open(self._path) as f:
            self._data: dict = yaml.safe_load(f)

    @property
    def cases(self) -> dict:
        """Raw cases axis from YAML (keyed by case name)."""
        return self._data.get("cases", {})

    def generate_cases(self) -> Iterator[ReservationTestCase]:
        """Yield one ReservationTestCase per YAML case, in file order.

        Raises:
            ValueError: if a case names an unknown host element.
        """
        for name, raw in self.cases.items():
            parent = raw["parent"]
            if parent not in _HOST_ELEMENTS:
                raise ValueError(
                    f"Case {name!r} has parent {parent!r}; expected one of {sorted(_HOST_ELEMENTS)}"
                )
            expected = raw.get("expected", {})
            platform = Platform(raw.get("platform", Platform.X86.value))
            yield ReservationTestCase(
                name=name,
                description=raw.get("description", ""),
                parent=parent,
                platform=platform,
                document=_wrap(parent, raw["markup"]),
                expected_reservations=expected.get("reservations", 0),
                expected_aces=expected.get("aces", 0),
                expected_messages=tuple(
                    MessageKind(kind) for kind in expected.get("messages", [])
                ),
                expected_references=tuple(expected.get("references", [])),
                id=f"{name}-{platform.value}",
            )


def _wrap(parent: str, markup: str) -> str:
    body = textwrap.indent(markup.strip(), "  ")
    return f'<{parent} xmlns:http="{HTTP_NAMESPACE}">\n{body}\n</{parent}>'
