"""Shared pytest fixtures and helpers for the http_extension test suite.

Module-level helpers (import directly):
    _parse(markup)            — dedent + parse markup into an ElementTree element.
    _compile(markup, ...)     — run HttpCompiler.parse_element on every HTTP
                                child of the parsed host element.
    _kinds(session)           — MessageKind list in report order.

pytest fixtures:
    session      — fresh CompilationSession targeting x86.
    arm_session  — fresh CompilationSession targeting ARM.
    compiler     — HttpCompiler bound to `session`.
"""

from __future__ import annotations

import textwrap
import xml.etree.ElementTree as ET
from typing import Mapping

import pytest

from http_extension.compiler import HttpCompiler
from http_extension.messages import MessageKind
from http_extension.session import CompilationSession
from http_extension.types import HTTP_NAMESPACE, Platform

# Import after production imports so PYTHONPATH=scripts:tests resolves fixtures/
from fixtures.fixture_loader import ReservationFixture


_RESERVATION_FIXTURE = ReservationFixture()

# Namespace declaration every test document carries.
NS_DECL = f'xmlns:http="{HTTP_NAMESPACE}"'


# ─── Module-Level Helpers ─────────────────────────────────────────────────────


def _parse(markup: str) -> ET.Element:
    """Parse a markup snippet (dedented, stripped) into its root element."""
    return ET.fromstring(textwrap.dedent(markup).strip())


def _compile(
    markup: str,
    session: CompilationSession,
    context: Mapping[str, str | None] | None = None,
) -> ET.Element:
    """Compile every HTTP-namespace child of the host element in markup.

    The context defaults to a Component context for "MyComp" plus a service
    install "Svc1" owned by "SvcComp", so either parent kind works.
    """
    if context is None:
        context = {
            "ComponentId": "MyComp",
            "ServiceInstallComponentId": "SvcComp",
            "ServiceInstallName": "Svc1",
        }
    parent = _parse(markup)
    compiler = HttpCompiler(session)
    for child in list(parent):
        if child.tag.startswith(f"{{{HTTP_NAMESPACE}}}"):
            compiler.parse_element(parent, child, context)
    return parent


def _kinds(session: CompilationSession) -> list[MessageKind]:
    return [m.kind for m in session.messages]


# ─── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def session() -> CompilationSession:
    return CompilationSession(platform=Platform.X86)


@pytest.fixture
def arm_session() -> CompilationSession:
    return CompilationSession(platform=Platform.ARM)


@pytest.fixture
def compiler(session: CompilationSession) -> HttpCompiler:
    return HttpCompiler(session)


@pytest.fixture(scope="session")
def reservation_fixture() -> ReservationFixture:
    """YAML-driven reservation cases (loaded once)."""
    return _RESERVATION_FIXTURE
