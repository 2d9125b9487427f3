"""Compiler for the HTTP extension namespace.

Translates UrlReservation elements (and their UrlAce children) into
WixHttpUrlReservation / WixHttpUrlAce rows plus references onto the
scheduling custom actions for the target platform.

Key types:
    HttpCompiler — dispatcher + reservation/ACE assemblers over a CompilerCore

Per UrlReservation the assembler moves through:
    collecting attributes → collecting children → validating → emitting | suppressed

Design decisions:
    - Everything is reported, nothing is raised: a malformed element only
      suppresses its own output, and siblings are still compiled.
    - Emission is gated on the session-wide error flag, not on this element's
      errors: a compilation with any error anywhere produces no rows.
    - The reservation id is derived before children are walked because every
      UrlAce row needs it as its back-reference.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Mapping

from http_extension import messages
from http_extension.attributes import AttributeExtractor, local_name, source_position
from http_extension.identifiers import derive
from http_extension.interfaces import CompilerCore
from http_extension.resolver import EnumerationKind, resolve
from http_extension.types import (
    CUSTOM_ACTION_TABLE,
    HTTP_NAMESPACE,
    SERVICE_PRINCIPAL_PREFIX,
    AceRights,
    ConflictMode,
    Identifier,
    IdentifierKind,
    UrlAceRow,
    UrlReservationRow,
    custom_actions_for,
)

logger = logging.getLogger(__name__)

# Context keys supplied by the host for the enclosing element.
COMPONENT_ID = "ComponentId"
SERVICE_INSTALL_COMPONENT_ID = "ServiceInstallComponentId"
SERVICE_INSTALL_NAME = "ServiceInstallName"


def ambient_principal(service_install_name: str | None) -> str | None:
    """Virtual service account for a service, or None when the name is absent or empty."""
    if not service_install_name:
        return None
    return f"{SERVICE_PRINCIPAL_PREFIX}{service_install_name}"


def _origin(identifier: Identifier) -> str:
    return "derived" if identifier.generated else "authored"


class HttpCompiler:
    """Compiles HTTP extension elements into table rows.

    Usage:
        session = CompilationSession(platform=Platform.X64)
        compiler = HttpCompiler(session)
        compiler.parse_element(component, url_reservation, {"ComponentId": "MyComp"})
        session.rows_for(URL_RESERVATION_TABLE)
    """

    namespace = HTTP_NAMESPACE

    def __init__(self, core: CompilerCore) -> None:
        self._core = core
        self._extractor = AttributeExtractor(core, self.namespace)

    # ── Dispatcher ────────────────────────────────────────────────────────────

    def parse_element(
        self,
        parent: ET.Element,
        element: ET.Element,
        context: Mapping[str, str | None],
    ) -> None:
        """Compile one extension element nested under a host element.

        Args:
            parent: The enclosing host element (Component or ServiceInstall).
            element: The extension element to compile.
            context: Host values for the parent, keyed by COMPONENT_ID,
                SERVICE_INSTALL_COMPONENT_ID and SERVICE_INSTALL_NAME.
                Missing keys read as None.
        """
        parent_name = local_name(parent)
        if parent_name == "ServiceInstall":
            component_id = context.get(SERVICE_INSTALL_COMPONENT_ID)
            principal = ambient_principal(context.get(SERVICE_INSTALL_NAME))
        elif parent_name == "Component":
            component_id = context.get(COMPONENT_ID)
            principal = None
        else:
            self._unexpected_element(parent, element)
            return

        if local_name(element) == "UrlReservation":
            logger.debug(
                "Compiling UrlReservation under %s (component=%r, principal=%r)",
                parent_name,
                component_id,
                principal,
            )
            self._parse_url_reservation(element, component_id, principal)
        else:
            self._unexpected_element(parent, element)

    def _unexpected_element(self, parent: ET.Element, element: ET.Element) -> None:
        self._core.on_message(
            messages.unexpected_element(
                source_position(element), local_name(parent), local_name(element)
            )
        )

    # ── UrlReservation ────────────────────────────────────────────────────────

    def _parse_url_reservation(
        self,
        node: ET.Element,
        component_id: str | None,
        security_principal: str | None,
    ) -> UrlReservationRow | None:
        """Compile a UrlReservation element.

        Args:
            node: The UrlReservation element.
            component_id: Component that owns the reservation.
            security_principal: Ambient principal inherited by UrlAce children
                (None when nested directly under a Component).

        Returns:
            The emitted row, or None when emission was suppressed.
        """
        position = source_position(node)
        name = local_name(node)
        identifier: Identifier | None = None
        handle_existing = ConflictMode.REPLACE
        sddl: str | None = None
        url: str | None = None
        found_ace = False

        def on_id(value: str) -> None:
            nonlocal identifier
            identifier = self._extractor.read_identifier(node, "Id", value)

        def on_handle_existing(value: str) -> None:
            nonlocal handle_existing
            token = self._extractor.read_value(node, "HandleExisting", value)
            if token is not None:
                handle_existing, _ = resolve(
                    EnumerationKind.CONFLICT_MODE,
                    token,
                    sink=self._core,
                    position=position,
                    element_name=name,
                    attribute_name="HandleExisting",
                    default=handle_existing,
                )

        def on_sddl(value: str) -> None:
            nonlocal sddl
            sddl = self._extractor.read_value(node, "Sddl", value)

        def on_url(value: str) -> None:
            nonlocal url
            url = self._extractor.read_value(node, "Url", value)

        self._extractor.extract(
            node,
            {
                "Id": on_id,
                "HandleExisting": on_handle_existing,
                "Sddl": on_sddl,
                "Url": on_url,
            },
        )

        if identifier is None:
            identifier = derive(
                IdentifierKind.URL_RESERVATION, component_id, security_principal, url
            )
        reservation_id = identifier.id

        def on_url_ace(child: ET.Element) -> None:
            nonlocal found_ace
            if sddl is not None:
                self._core.on_message(
                    messages.illegal_parent_attribute_when_nested(
                        position, "UrlReservation", "Sddl", "UrlAce"
                    )
                )
                return
            found_ace = True
            self._parse_url_ace(child, reservation_id, security_principal)

        self._extractor.extract_children(node, {"UrlAce": on_url_ace})

        if url is None:
            self._core.on_message(messages.expected_attribute(position, name, "Url"))

        if sddl is None and not found_ace:
            self._core.on_message(messages.no_security_specified(position))

        if self._core.encountered_error:
            logger.debug(
                "Suppressed UrlReservation %s (%s id): errors reported",
                reservation_id,
                _origin(identifier),
            )
            return None

        row = UrlReservationRow(
            id=reservation_id,
            handle_existing=handle_existing,
            sddl=sddl,
            url=url,
            component_id=component_id,
        )
        self._core.add_row(position, row)

        platform = self._core.current_platform
        for action in custom_actions_for(platform):
            self._core.create_simple_reference(position, CUSTOM_ACTION_TABLE, action)
        logger.debug(
            "Emitted UrlReservation %s (%s id) for %s",
            reservation_id,
            _origin(identifier),
            platform.value,
        )
        return row

    # ── UrlAce ────────────────────────────────────────────────────────────────

    def _parse_url_ace(
        self,
        node: ET.Element,
        url_reservation_id: str,
        default_security_principal: str | None,
    ) -> UrlAceRow | None:
        """Compile a UrlAce element nested under a UrlReservation.

        Returns:
            The emitted row, or None when emission was suppressed.
        """
        position = source_position(node)
        name = local_name(node)
        identifier: Identifier | None = None
        security_principal = default_security_principal
        rights = AceRights.ALL
        rights_token: str | None = None

        def on_id(value: str) -> None:
            nonlocal identifier
            identifier = self._extractor.read_identifier(node, "Id", value)

        def on_security_principal(value: str) -> None:
            nonlocal security_principal
            security_principal = self._extractor.read_value(node, "SecurityPrincipal", value)

        def on_rights(value: str) -> None:
            nonlocal rights, rights_token
            rights_token = self._extractor.read_value(node, "Rights", value)
            if rights_token is not None:
                rights, _ = resolve(
                    EnumerationKind.RIGHTS,
                    rights_token,
                    sink=self._core,
                    position=position,
                    element_name=name,
                    attribute_name="Rights",
                    default=rights,
                )

        self._extractor.extract(
            node,
            {
                "Id": on_id,
                "SecurityPrincipal": on_security_principal,
                "Rights": on_rights,
            },
        )

        if identifier is None:
            identifier = derive(
                IdentifierKind.URL_ACE, url_reservation_id, security_principal, rights_token
            )

        # UrlAce has no children of its own; extensions may still nest here.
        self._extractor.extract_children(node)

        if security_principal is None:
            self._core.on_message(
                messages.expected_attribute(position, name, "SecurityPrincipal")
            )

        if self._core.encountered_error:
            logger.debug(
                "Suppressed UrlAce %s (%s id): errors reported", identifier.id, _origin(identifier)
            )
            return None

        row = UrlAceRow(
            id=identifier.id,
            url_reservation_id=url_reservation_id,
            security_principal=security_principal,
            rights=rights,
        )
        self._core.add_row(position, row)
        logger.debug(
            "Emitted UrlAce %s (%s id) under %s", row.id, _origin(identifier), url_reservation_id
        )
        return row
