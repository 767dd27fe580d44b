"""Tests for certificate chain assembly."""

import pytest

from cert_chain import append_cert_byte, append_root_certs
from cert_errors import FileReadFailure

CERT = b"-----BEGIN CERTIFICATE-----\nleaf\n-----END CERTIFICATE-----"
ROOT = b"-----BEGIN CERTIFICATE-----\nroot\n-----END CERTIFICATE-----\n"


class TestAppendCertByte:
    def test_cert_without_trailing_newline(self):
        assert append_cert_byte(CERT, ROOT) == CERT + b"\n" + ROOT

    def test_cert_with_trailing_newline(self):
        assert append_cert_byte(CERT + b"\n", ROOT) == CERT + b"\n" + ROOT

    def test_only_one_newline_trimmed(self):
        assert append_cert_byte(CERT + b"\n\n", ROOT) == CERT + b"\n\n" + ROOT

    def test_empty_cert(self):
        assert append_cert_byte(b"", ROOT) == ROOT

    def test_empty_root(self):
        assert append_cert_byte(CERT, b"") == CERT + b"\n"

    def test_inputs_not_mutated(self):
        cert = bytearray(CERT + b"\n")
        root = bytearray(ROOT)
        append_cert_byte(cert, root)
        assert cert == bytearray(CERT + b"\n")
        assert root == bytearray(ROOT)


class TestAppendRootCerts:
    def test_empty_path(self):
        assert append_root_certs(CERT, "") is CERT

    def test_missing_file(self, tmp_path):
        assert append_root_certs(CERT, str(tmp_path / "missing.pem")) == CERT

    def test_reads_root_file(self, tmp_path):
        root_file = tmp_path / "root.pem"
        root_file.write_bytes(ROOT)
        assert append_root_certs(CERT + b"\n", str(root_file)) == CERT + b"\n" + ROOT

    def test_empty_root_file(self, tmp_path):
        root_file = tmp_path / "root.pem"
        root_file.write_bytes(b"")
        assert append_root_certs(CERT, str(root_file)) == CERT

    def test_empty_and_missing_root_file_agree(self, tmp_path):
        root_file = tmp_path / "root.pem"
        root_file.write_bytes(b"")
        missing = str(tmp_path / "missing.pem")
        assert append_root_certs(CERT, str(root_file)) == append_root_certs(CERT, missing)

    def test_unreadable_path(self, tmp_path):
        with pytest.raises(FileReadFailure) as excinfo:
            append_root_certs(CERT, str(tmp_path))
        assert isinstance(excinfo.value.__cause__, OSError)
