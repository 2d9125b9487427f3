"""Attribute and child-element extraction over ElementTree-API elements.

Names arrive in Clark notation ("{namespace}local"). Attributes with no
namespace or the extension's own namespace are dispatched by local name
through a closed handler table; anything in another namespace belongs to a
cooperating extension and is forwarded to the host untouched.

Design notes:
- Each attribute and child is visited exactly once, in document order, so
  diagnostics come out in a reproducible order.
- Unknown names are reported and skipped; extraction never stops early.
- Children use a stricter rule than attributes: only the
  extension's own namespace is ours, un-namespaced children are forwarded.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Callable, Mapping

from http_extension import messages
from http_extension.identifiers import is_legal_identifier
from http_extension.interfaces import CompilerCore
from http_extension.types import (
    HTTP_NAMESPACE,
    MAX_IDENTIFIER_LENGTH,
    Identifier,
    SourcePosition,
)

AttributeHandler = Callable[[str], None]
ChildHandler = Callable[[ET.Element], None]


# ─── Name Helpers ─────────────────────────────────────────────────────────────


def split_name(name: str) -> tuple[str, str]:
    """Split a Clark-notation name into (namespace, local). No namespace is ""."""
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        return namespace, local
    return "", name


def local_name(element: ET.Element) -> str:
    return split_name(element.tag)[1]


def source_position(element: ET.Element) -> SourcePosition:
    """Position of an element for diagnostic attribution.

    lxml elements carry sourceline and base (the document URL); plain
    ElementTree elements carry neither, so both fall back to None.
    """
    return SourcePosition(
        file=getattr(element, "base", None),
        line=getattr(element, "sourceline", None),
        element=local_name(element),
    )


def iter_child_elements(element: ET.Element):
    """Yield element children only, skipping lxml comments and processing instructions."""
    for child in element:
        if isinstance(child.tag, str):
            yield child


# ─── Extractor ────────────────────────────────────────────────────────────────


class AttributeExtractor:
    """Walks an element's attributes and children on behalf of the compiler.

    Usage:
        extractor = AttributeExtractor(core)
        extractor.extract(element, {"Url": on_url, "Sddl": on_sddl})
        extractor.extract_children(element, {"UrlAce": on_ace})
    """

    def __init__(self, core: CompilerCore, namespace: str = HTTP_NAMESPACE) -> None:
        self._core = core
        self._namespace = namespace

    def extract(self, element: ET.Element, handlers: Mapping[str, AttributeHandler]) -> None:
        """Dispatch every attribute of element to its handler.

        Args:
            element: Element whose attributes are read.
            handlers: Local attribute name → handler receiving the raw value.
        """
        for name, value in element.attrib.items():
            namespace, local = split_name(name)
            if namespace and namespace != self._namespace:
                self._core.parse_extension_attribute(element, name, value)
                continue

            handler = handlers.get(local)
            if handler is None:
                self._core.on_message(
                    messages.unexpected_attribute(
                        source_position(element), local_name(element), local
                    )
                )
                continue
            handler(value)

    def extract_children(
        self, element: ET.Element, handlers: Mapping[str, ChildHandler] | None = None
    ) -> None:
        """Dispatch every child element of element to its handler.

        With no handlers every child in our namespace is unexpected, which is
        how elements without children of their own still let extensions nest.
        """
        handlers = handlers or {}
        for child in iter_child_elements(element):
            namespace, local = split_name(child.tag)
            if namespace != self._namespace:
                self._core.parse_extension_element(element, child)
                continue

            handler = handlers.get(local)
            if handler is None:
                self._core.on_message(
                    messages.unexpected_element(
                        source_position(child), local_name(element), local
                    )
                )
                continue
            handler(child)

    # ── Typed Readers ─────────────────────────────────────────────────────────

    def read_value(self, element: ET.Element, attribute: str, value: str) -> str | None:
        """Return value, or None after reporting an empty-value error."""
        if value == "":
            self._core.on_message(
                messages.illegal_empty_attribute_value(
                    source_position(element), local_name(element), attribute
                )
            )
            return None
        return value

    def read_identifier(
        self, element: ET.Element, attribute: str, value: str
    ) -> Identifier | None:
        """Return an authored Identifier, or None if the value is empty or illegal.

        Over-long identifiers are accepted with a warning.
        """
        text = self.read_value(element, attribute, value)
        if text is None:
            return None

        position = source_position(element)
        if not is_legal_identifier(text):
            self._core.on_message(
                messages.illegal_identifier(position, local_name(element), attribute, text)
            )
            return None
        if len(text) > MAX_IDENTIFIER_LENGTH:
            self._core.on_message(
                messages.identifier_too_long(position, local_name(element), attribute, text)
            )
        return Identifier(id=text)
