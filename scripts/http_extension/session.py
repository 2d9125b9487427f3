"""In-memory compilation session: the reference CompilerCore implementation.

Holds everything one compilation shares: diagnostics, the error flag,
emitted rows, the de-duplicated reference set, the target platform, and the
extension handlers foreign namespaces are forwarded to. Nothing here is
module-level, so independent sessions never interfere.

Intended for the command line driver and tests. A hosting compiler with its
own storage only needs to satisfy interfaces.CompilerCore.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from http_extension import messages
from http_extension.attributes import local_name, source_position, split_name
from http_extension.interfaces import ExtensionHandler
from http_extension.messages import Message
from http_extension.types import Platform, Row, SimpleReference, SourcePosition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmittedRow:
    """A row together with the position of the element that produced it."""

    position: SourcePosition
    row: Row


class CompilationSession:
    """Concrete CompilerCore backed by in-memory lists.

    Satisfies interfaces.CompilerCore (structural subtyping, no inheritance
    required).
    """

    def __init__(self, platform: Platform = Platform.X86) -> None:
        self._platform = platform
        self._messages: list[Message] = []
        self._encountered_error = False
        self._rows: list[EmittedRow] = []
        # dict keeps insertion order and doubles as the de-duplicating set.
        self._references: dict[SimpleReference, SourcePosition] = {}
        self._extensions: dict[str, ExtensionHandler] = {}

    # ── MessageSink ───────────────────────────────────────────────────────────

    def on_message(self, message: Message) -> None:
        self._messages.append(message)
        if message.is_error:
            self._encountered_error = True
        logger.debug("%s", message)

    @property
    def encountered_error(self) -> bool:
        return self._encountered_error

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def errors(self) -> list[Message]:
        return [m for m in self._messages if m.is_error]

    @property
    def warnings(self) -> list[Message]:
        return [m for m in self._messages if not m.is_error]

    # ── RecordStore ───────────────────────────────────────────────────────────

    def add_row(self, position: SourcePosition, row: Row) -> None:
        self._rows.append(EmittedRow(position=position, row=row))

    @property
    def rows(self) -> list[Row]:
        return [emitted.row for emitted in self._rows]

    @property
    def emitted_rows(self) -> list[EmittedRow]:
        return list(self._rows)

    def rows_for(self, table: str) -> list[Row]:
        """Rows of one table, in emission order."""
        return [emitted.row for emitted in self._rows if emitted.row.table == table]

    # ── ReferenceStore ────────────────────────────────────────────────────────

    def create_simple_reference(self, position: SourcePosition, table: str, name: str) -> None:
        reference = SimpleReference(table=table, name=name)
        if reference not in self._references:
            self._references[reference] = position

    @property
    def references(self) -> list[SimpleReference]:
        return list(self._references)

    def references_for(self, table: str) -> list[SimpleReference]:
        return [ref for ref in self._references if ref.table == table]

    # ── PlatformQuery ─────────────────────────────────────────────────────────

    @property
    def current_platform(self) -> Platform:
        return self._platform

    # ── ExtensionHandler ──────────────────────────────────────────────────────

    def register_extension(self, namespace: str, handler: ExtensionHandler) -> None:
        """Route attributes and elements in namespace to handler."""
        self._extensions[namespace] = handler

    def parse_extension_attribute(self, element: ET.Element, name: str, value: str) -> None:
        namespace, local = split_name(name)
        handler = self._extensions.get(namespace)
        if handler is None:
            self.on_message(
                messages.unexpected_attribute(
                    source_position(element), local_name(element), local
                )
            )
            return
        handler.parse_extension_attribute(element, name, value)

    def parse_extension_element(self, parent: ET.Element, element: ET.Element) -> None:
        namespace, local = split_name(element.tag)
        handler = self._extensions.get(namespace)
        if handler is None:
            self.on_message(
                messages.unexpected_element(
                    source_position(element), local_name(parent), local
                )
            )
            return
        handler.parse_extension_element(parent, element)
