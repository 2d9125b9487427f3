"""Host compiler contract consumed by the HTTP compiler extension.

The extension never owns document loading, table storage or platform
detection. It reaches all of those through the Protocols below, which a
hosting compiler satisfies by structural subtyping (no inheritance needed).

    MessageSink     — report diagnostics; exposes the session-wide error flag
    RecordStore     — append typed rows
    ReferenceStore  — declare idempotent dependency edges onto named rows
    PlatformQuery   — current compilation target
    ExtensionHandler — forward foreign-namespace attributes and elements
    CompilerCore    — everything above, the surface HttpCompiler is given

session.CompilationSession is the in-memory implementation used by the
command line driver and the tests.

Elements are ElementTree-API elements: xml.etree.ElementTree elements and
lxml elements both qualify.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Protocol, runtime_checkable

from http_extension.messages import Message
from http_extension.types import Platform, Row, SourcePosition


@runtime_checkable
class MessageSink(Protocol):
    def on_message(self, message: Message) -> None:
        """Record a diagnostic. Error-severity messages set encountered_error."""
        ...

    @property
    def encountered_error(self) -> bool:
        """True once any error-severity message has been reported this session."""
        ...


@runtime_checkable
class RecordStore(Protocol):
    def add_row(self, position: SourcePosition, row: Row) -> None:
        """Append a fully constructed row to its table."""
        ...


@runtime_checkable
class ReferenceStore(Protocol):
    def create_simple_reference(self, position: SourcePosition, table: str, name: str) -> None:
        """Declare a dependency onto table/name. Repeating a reference is a no-op."""
        ...


@runtime_checkable
class PlatformQuery(Protocol):
    @property
    def current_platform(self) -> Platform:
        ...


@runtime_checkable
class ExtensionHandler(Protocol):
    def parse_extension_attribute(self, element: ET.Element, name: str, value: str) -> None:
        """Hand a foreign-namespace attribute to whichever extension owns it."""
        ...

    def parse_extension_element(self, parent: ET.Element, element: ET.Element) -> None:
        """Hand a foreign-namespace child element to whichever extension owns it."""
        ...


@runtime_checkable
class CompilerCore(
    MessageSink, RecordStore, ReferenceStore, PlatformQuery, ExtensionHandler, Protocol
):
    """The full host surface HttpCompiler works against."""
