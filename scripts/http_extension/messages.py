"""Diagnostics reported by the HTTP compiler extension.

Diagnostics are values, not exceptions: the compiler reports every problem
it finds through the host's message sink and keeps walking the tree, so one
compilation surfaces all of its errors.

Key types:
    Severity    — ERROR or WARNING; only errors suppress output
    MessageKind — closed set of diagnostic kinds
    Message     — frozen dataclass: kind, severity, position, args, text

One factory function per kind builds the Message with its formatted text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from http_extension.types import MAX_IDENTIFIER_LENGTH, SourcePosition


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class MessageKind(str, Enum):
    """Diagnostic kinds, grouped by the error taxonomy.

    Structural: UNEXPECTED_ELEMENT, UNEXPECTED_ATTRIBUTE
    Value:      ILLEGAL_ATTRIBUTE_VALUE, ILLEGAL_EMPTY_ATTRIBUTE_VALUE,
                ILLEGAL_IDENTIFIER, IDENTIFIER_TOO_LONG
    Cardinality: EXPECTED_ATTRIBUTE, NO_SECURITY_SPECIFIED
    Nesting:    ILLEGAL_PARENT_ATTRIBUTE_WHEN_NESTED
    """

    UNEXPECTED_ELEMENT = "UnexpectedElement"
    UNEXPECTED_ATTRIBUTE = "UnexpectedAttribute"
    ILLEGAL_ATTRIBUTE_VALUE = "IllegalAttributeValue"
    ILLEGAL_EMPTY_ATTRIBUTE_VALUE = "IllegalEmptyAttributeValue"
    ILLEGAL_IDENTIFIER = "IllegalIdentifier"
    IDENTIFIER_TOO_LONG = "IdentifierTooLong"
    EXPECTED_ATTRIBUTE = "ExpectedAttribute"
    NO_SECURITY_SPECIFIED = "NoSecuritySpecified"
    ILLEGAL_PARENT_ATTRIBUTE_WHEN_NESTED = "IllegalParentAttributeWhenNested"


@dataclass(frozen=True)
class Message:
    """A single diagnostic.

    args holds the raw values the text was formatted from, so callers can
    assert on them without parsing the text.
    """

    kind: MessageKind
    severity: Severity
    position: SourcePosition
    text: str
    args: tuple[str | None, ...] = field(default_factory=tuple)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        return f"{self.position}: {self.severity.value} {self.kind.value}: {self.text}"


# ─── Factories ────────────────────────────────────────────────────────────────


def unexpected_element(position: SourcePosition, parent: str, child: str) -> Message:
    return Message(
        kind=MessageKind.UNEXPECTED_ELEMENT,
        severity=Severity.ERROR,
        position=position,
        text=f"The {parent} element contains an unexpected child element '{child}'.",
        args=(parent, child),
    )


def unexpected_attribute(position: SourcePosition, element: str, attribute: str) -> Message:
    return Message(
        kind=MessageKind.UNEXPECTED_ATTRIBUTE,
        severity=Severity.ERROR,
        position=position,
        text=f"The {element} element contains an unexpected attribute '{attribute}'.",
        args=(element, attribute),
    )


def illegal_attribute_value(
    position: SourcePosition,
    element: str,
    attribute: str,
    value: str,
    legal_values: tuple[str, ...],
) -> Message:
    legal = ", ".join(legal_values)
    return Message(
        kind=MessageKind.ILLEGAL_ATTRIBUTE_VALUE,
        severity=Severity.ERROR,
        position=position,
        text=(
            f"The {element}/@{attribute} attribute's value, '{value}', "
            f"is not one of the legal options: {legal}."
        ),
        args=(element, attribute, value, *legal_values),
    )


def illegal_empty_attribute_value(
    position: SourcePosition, element: str, attribute: str
) -> Message:
    return Message(
        kind=MessageKind.ILLEGAL_EMPTY_ATTRIBUTE_VALUE,
        severity=Severity.ERROR,
        position=position,
        text=(
            f"The {element}/@{attribute} attribute's value cannot be an empty string. "
            f"If a value is not required, simply remove the entire attribute."
        ),
        args=(element, attribute),
    )


def illegal_identifier(
    position: SourcePosition, element: str, attribute: str, value: str
) -> Message:
    return Message(
        kind=MessageKind.ILLEGAL_IDENTIFIER,
        severity=Severity.ERROR,
        position=position,
        text=(
            f"The {element}/@{attribute} attribute's value, '{value}', is not a legal "
            f"identifier. Identifiers may contain ASCII characters A-Z, a-z, digits, "
            f"underscores (_), or periods (.). Every identifier must begin with either "
            f"a letter or an underscore."
        ),
        args=(element, attribute, value),
    )


def identifier_too_long(
    position: SourcePosition, element: str, attribute: str, value: str
) -> Message:
    return Message(
        kind=MessageKind.IDENTIFIER_TOO_LONG,
        severity=Severity.WARNING,
        position=position,
        text=(
            f"The {element}/@{attribute} attribute's value, '{value}', is {len(value)} "
            f"characters long. Identifiers should not be longer than "
            f"{MAX_IDENTIFIER_LENGTH} characters."
        ),
        args=(element, attribute, value),
    )


def expected_attribute(position: SourcePosition, element: str, attribute: str) -> Message:
    return Message(
        kind=MessageKind.EXPECTED_ATTRIBUTE,
        severity=Severity.ERROR,
        position=position,
        text=f"The {element}/@{attribute} attribute was not found; it is required.",
        args=(element, attribute),
    )


def no_security_specified(position: SourcePosition) -> Message:
    return Message(
        kind=MessageKind.NO_SECURITY_SPECIFIED,
        severity=Severity.ERROR,
        position=position,
        text=(
            "The UrlReservation element requires either the Sddl attribute "
            "or at least one child UrlAce element."
        ),
    )


def illegal_parent_attribute_when_nested(
    position: SourcePosition, parent: str, attribute: str, child: str
) -> Message:
    return Message(
        kind=MessageKind.ILLEGAL_PARENT_ATTRIBUTE_WHEN_NESTED,
        severity=Severity.ERROR,
        position=position,
        text=(
            f"The {parent}/@{attribute} attribute cannot be specified when "
            f"a {child} element is nested underneath the {parent} element."
        ),
        args=(parent, attribute, child),
    )
