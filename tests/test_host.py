"""Tests for http_extension.host — document loading and routing."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from http_extension.host import DocumentLoadError, compile_document, load_document
from http_extension.messages import MessageKind
from http_extension.session import CompilationSession
from http_extension.types import URL_ACE_TABLE, URL_RESERVATION_TABLE, Platform

PRODUCT_WXS = textwrap.dedent(
    """\
    <?xml version="1.0" encoding="utf-8"?>
    <Wix xmlns="http://wixtoolset.org/schemas/v4/wxs"
         xmlns:http="http://wixtoolset.org/schemas/v4/wxs/http">
      <Package Name="Sample" Version="1.0.0.0">
        <Component Id="WebComp">
          <!-- reservation owned by the component -->
          <http:UrlReservation Id="WebRes" Url="http://+:80/web/" Sddl="D:(A;;GX;;;NS)" />
        </Component>
        <Component Id="SvcComp">
          <ServiceInstall Name="Svc1">
            <http:UrlReservation Url="http://+:8080/svc/">
              <http:UrlAce Rights="register" />
            </http:UrlReservation>
          </ServiceInstall>
        </Component>
      </Package>
    </Wix>
    """
)


def _write(tmp_path: Path, text: str, name: str = "Product.wxs") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadDocument:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentLoadError, match="not found"):
            load_document(tmp_path / "absent.wxs")

    def test_malformed_xml(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentLoadError, match="Malformed XML"):
            load_document(_write(tmp_path, "<Wix><Component></Wix>"))

    def test_root_and_lines(self, tmp_path: Path) -> None:
        root = load_document(_write(tmp_path, PRODUCT_WXS))
        assert root.tag == "{http://wixtoolset.org/schemas/v4/wxs}Wix"
        # Single-line start tags only: libxml2 versions disagree on which
        # line a multi-line start tag reports.
        component = next(root.iter("{http://wixtoolset.org/schemas/v4/wxs}Component"))
        assert component.get("Id") == "WebComp"
        assert component.sourceline == 5
        reservation = next(root.iter("{http://wixtoolset.org/schemas/v4/wxs/http}UrlReservation"))
        assert reservation.sourceline == 7


class TestCompileDocument:
    def test_compiles_both_host_contexts(self, tmp_path: Path) -> None:
        session = compile_document(load_document(_write(tmp_path, PRODUCT_WXS)), CompilationSession())

        assert session.messages == []
        reservations = session.rows_for(URL_RESERVATION_TABLE)
        assert [(r.id, r.component_id) for r in reservations][0] == ("WebRes", "WebComp")
        assert reservations[1].component_id == "SvcComp"

        ace = session.rows_for(URL_ACE_TABLE)[0]
        assert ace.security_principal == "NT SERVICE\\Svc1"
        assert ace.url_reservation_id == reservations[1].id

    def test_diagnostics_carry_file_and_line(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            textwrap.dedent(
                """\
                <Wix xmlns:http="http://wixtoolset.org/schemas/v4/wxs/http">
                  <Component Id="C">
                    <http:UrlReservation Url="http://+:80/" />
                  </Component>
                </Wix>
                """
            ),
        )
        session = compile_document(load_document(path), CompilationSession())

        assert [m.kind for m in session.messages] == [MessageKind.NO_SECURITY_SPECIFIED]
        position = session.messages[0].position
        assert position.line == 3
        assert position.file is not None and position.file.endswith("Product.wxs")

    def test_extension_element_outside_host_is_unexpected(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            '<Wix xmlns:http="http://wixtoolset.org/schemas/v4/wxs/http">'
            '<Directory Id="D"><http:UrlReservation Url="http://+:80/" Sddl="D:" /></Directory>'
            "</Wix>",
        )
        session = compile_document(load_document(path), CompilationSession())
        assert [m.kind for m in session.messages] == [MessageKind.UNEXPECTED_ELEMENT]
        assert session.rows == []

    def test_platform_flows_to_references(self, tmp_path: Path) -> None:
        session = compile_document(
            load_document(_write(tmp_path, PRODUCT_WXS)), CompilationSession(platform=Platform.ARM)
        )
        assert all(ref.name.endswith("_ARM") for ref in session.references)
        assert len(session.references) == 2
