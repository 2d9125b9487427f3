"""Minimal hosting driver: load a source document and route extension elements.

The compiler itself never loads documents. This module plays the host's
part for the command line and end-to-end tests:

    load_document(path)               → root element (lxml, with source lines)
    compile_document(root, session)   → walks the tree, calling HttpCompiler

Routing rule: every child in the HTTP namespace is handed to
HttpCompiler.parse_element together with its parent and the context values
of the nearest enclosing Component / ServiceInstall. HTTP-namespace
elements are not descended into; the compiler walks their children itself.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from lxml import etree

from http_extension.attributes import iter_child_elements, local_name, split_name
from http_extension.compiler import (
    COMPONENT_ID,
    SERVICE_INSTALL_COMPONENT_ID,
    SERVICE_INSTALL_NAME,
    HttpCompiler,
)
from http_extension.session import CompilationSession

logger = logging.getLogger(__name__)


class DocumentLoadError(Exception):
    """Raised when a source document is missing or is not well-formed XML."""


def load_document(path: str | Path) -> etree._Element:
    """Parse path into an element tree with source line numbers.

    Entity expansion and network access are disabled.

    Raises:
        DocumentLoadError: if the file does not exist or fails to parse.
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentLoadError(
            f"Source document not found: {path}. "
            f"Fix: pass the path of an existing .wxs file."
        )
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        tree = etree.parse(str(path), parser)
    except etree.XMLSyntaxError as exc:
        raise DocumentLoadError(f"Malformed XML in {path}: {exc}") from exc
    return tree.getroot()


def _context_for(
    element: etree._Element, context: Mapping[str, str | None]
) -> dict[str, str | None]:
    name = local_name(element)
    if name == "Component":
        return {**context, COMPONENT_ID: element.get("Id")}
    if name == "ServiceInstall":
        return {
            **context,
            SERVICE_INSTALL_NAME: element.get("Name"),
            SERVICE_INSTALL_COMPONENT_ID: context.get(COMPONENT_ID),
        }
    return dict(context)


def compile_document(
    root: etree._Element,
    session: CompilationSession,
    compiler: HttpCompiler | None = None,
) -> CompilationSession:
    """Compile every HTTP extension element under root into session.

    Returns:
        The same session, for chaining.
    """
    compiler = compiler if compiler is not None else HttpCompiler(session)

    def walk(parent: etree._Element, context: Mapping[str, str | None]) -> None:
        for child in iter_child_elements(parent):
            namespace, _ = split_name(child.tag)
            if namespace == compiler.namespace:
                compiler.parse_element(parent, child, context)
                continue
            walk(child, _context_for(child, context))

    walk(root, _context_for(root, {}))
    logger.debug(
        "Compiled document: %d rows, %d references, %d messages",
        len(session.rows),
        len(session.references),
        len(session.messages),
    )
    return session
