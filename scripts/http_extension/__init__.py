"""HTTP compiler extension — public API.

Compiles UrlReservation / UrlAce elements of the
http://wixtoolset.org/schemas/v4/wxs/http namespace into typed table rows.

Public API (re-exported from submodules):

Enums:
    ConflictMode    — UrlReservation/@HandleExisting: REPLACE, IGNORE, FAIL
    AceRights       — UrlAce/@Rights: ALL, DELEGATE, REGISTER (generic access masks)
    Platform        — x86, x64, ia64, arm
    IdentifierKind  — derived-identifier tags: url, ace
    EnumerationKind — token enumerations known to the resolver
    Severity        — error, warning
    MessageKind     — diagnostic kinds

Frozen Dataclasses:
    UrlReservationRow — WixHttpUrlReservation row
    UrlAceRow         — WixHttpUrlAce row
    SimpleReference   — dependency edge onto a named row
    SourcePosition    — file/line/element attribution
    Identifier        — authored or derived element id
    Message           — a single diagnostic

Compiler (from compiler.py):
    HttpCompiler      — dispatcher + reservation/ACE assemblers

Building Blocks:
    AttributeExtractor — attribute/child dispatch over ElementTree elements
    resolve            — token → enumeration code with report-and-default
    derive             — deterministic identifier from contextual parts

Host Contract (runtime_checkable Protocols, from interfaces.py):
    MessageSink, RecordStore, ReferenceStore, PlatformQuery,
    ExtensionHandler, CompilerCore

Reference Host:
    CompilationSession — in-memory CompilerCore (session.py)
    load_document, compile_document, DocumentLoadError — driver (host.py)
"""

from http_extension.attributes import (
    AttributeExtractor,
    source_position,
    split_name,
)
from http_extension.compiler import HttpCompiler
from http_extension.host import (
    DocumentLoadError,
    compile_document,
    load_document,
)
from http_extension.identifiers import derive, is_legal_identifier
from http_extension.interfaces import (
    CompilerCore,
    ExtensionHandler,
    MessageSink,
    PlatformQuery,
    RecordStore,
    ReferenceStore,
)
from http_extension.messages import Message, MessageKind, Severity
from http_extension.resolver import EnumerationKind, resolve
from http_extension.session import CompilationSession
from http_extension.types import (
    CUSTOM_ACTION_TABLE,
    HTTP_NAMESPACE,
    URL_ACE_TABLE,
    URL_RESERVATION_TABLE,
    AceRights,
    ConflictMode,
    Identifier,
    IdentifierKind,
    Platform,
    SimpleReference,
    SourcePosition,
    UrlAceRow,
    UrlReservationRow,
)

__all__ = [
    # Enums
    "ConflictMode",
    "AceRights",
    "Platform",
    "IdentifierKind",
    "EnumerationKind",
    "Severity",
    "MessageKind",
    # Frozen dataclasses
    "UrlReservationRow",
    "UrlAceRow",
    "SimpleReference",
    "SourcePosition",
    "Identifier",
    "Message",
    # Constants
    "HTTP_NAMESPACE",
    "URL_RESERVATION_TABLE",
    "URL_ACE_TABLE",
    "CUSTOM_ACTION_TABLE",
    # Compiler
    "HttpCompiler",
    # Building blocks
    "AttributeExtractor",
    "source_position",
    "split_name",
    "resolve",
    "derive",
    "is_legal_identifier",
    # Host contract
    "MessageSink",
    "RecordStore",
    "ReferenceStore",
    "PlatformQuery",
    "ExtensionHandler",
    "CompilerCore",
    # Reference host
    "CompilationSession",
    "DocumentLoadError",
    "load_document",
    "compile_document",
]
