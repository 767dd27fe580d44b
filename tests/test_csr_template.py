"""Tests for CSR template construction."""

import logging

import pytest
from cryptography import x509
from cryptography.x509.oid import NameOID

import csr_generator
from cert_errors import ExtensionBuildFailure
from cert_options import CertOptions
from csr_generator import build_csr_template
from san_extension import CommonNameResult


def _attrs(template, oid):
    return [a.value for a in template.subject.get_attributes_for_oid(oid)]


class TestCSRTemplate:
    def test_empty_options(self):
        template = build_csr_template(CertOptions())
        assert len(template.subject) == 0
        assert template.extensions == ()

    def test_org_only(self):
        template = build_csr_template(CertOptions(org="Acme"))
        assert _attrs(template, NameOID.ORGANIZATION_NAME) == ["Acme"]
        assert template.extensions == ()

    def test_hosts_add_single_san_extension(self):
        template = build_csr_template(CertOptions(host=("svc.acme.local", "10.1.2.3")))
        assert len(template.extensions) == 1
        san = template.extensions[0].value
        assert isinstance(san, x509.SubjectAlternativeName)
        assert san.get_values_for_type(x509.DNSName) == ["svc.acme.local"]
        assert _attrs(template, NameOID.COMMON_NAME) == []

    def test_dual_use_sets_common_name(self):
        template = build_csr_template(
            CertOptions(org="Acme", host=("svc.acme.local",), is_dual_use=True)
        )
        assert _attrs(template, NameOID.COMMON_NAME) == ["svc.acme.local"]
        assert _attrs(template, NameOID.ORGANIZATION_NAME) == ["Acme"]

    def test_dual_use_without_hosts(self):
        template = build_csr_template(CertOptions(is_dual_use=True))
        assert _attrs(template, NameOID.COMMON_NAME) == []
        assert template.extensions == ()

    def test_dual_use_failure_is_logged_not_raised(self, caplog):
        long_host = "a" * 70 + ".acme.local"
        with caplog.at_level(logging.ERROR, logger="csr_generator"):
            template = build_csr_template(CertOptions(host=(long_host,), is_dual_use=True))
        assert _attrs(template, NameOID.COMMON_NAME) == []
        assert len(template.extensions) == 1
        assert "omitting CN" in caplog.text

    def test_dual_use_deriver_result_is_used(self, monkeypatch):
        monkeypatch.setattr(
            csr_generator, "dual_use_common_name", lambda hosts: CommonNameResult("derived.cn")
        )
        template = build_csr_template(CertOptions(host=("svc.acme.local",), is_dual_use=True))
        assert _attrs(template, NameOID.COMMON_NAME) == ["derived.cn"]

    def test_extension_failure_propagates(self):
        with pytest.raises(ExtensionBuildFailure):
            build_csr_template(CertOptions(host=("svc.acme.local", "")))
