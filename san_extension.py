"""
Subject Alternative Name helpers

Builds the SAN extension for a list of hosts and derives the legacy
Common Name used by dual-use certificates.
"""

import ipaddress
from typing import NamedTuple, Optional

from cryptography import x509

from cert_errors import ExtensionBuildFailure

# ub-common-name from RFC 5280
MAX_COMMON_NAME_LENGTH = 64


class CommonNameResult(NamedTuple):
    common_name: Optional[str]
    warning: Optional[str] = None


def _general_name(host):
    try:
        return x509.IPAddress(ipaddress.ip_address(host))
    except ValueError:
        pass
    if "://" in host:
        return x509.UniformResourceIdentifier(host)
    return x509.DNSName(host)


def build_subject_alt_name_extension(hosts):
    """Return a critical SAN extension holding every host."""
    san_list = []
    for host in hosts:
        if not host:
            raise ExtensionBuildFailure("empty host in subject alternative name list")
        try:
            san_list.append(_general_name(host))
        except (ValueError, TypeError) as e:
            raise ExtensionBuildFailure(f"invalid subject alternative name {host!r} ({e})") from e

    san = x509.SubjectAlternativeName(san_list)
    return x509.Extension(san.oid, True, san)


def dual_use_common_name(hosts):
    """Derive a Common Name from the first host."""
    if not hosts or not hosts[0]:
        return CommonNameResult(None, "no host to derive a common name from")
    cn = hosts[0]
    if len(cn) > MAX_COMMON_NAME_LENGTH:
        return CommonNameResult(None, f"CN ({cn}) too long")
    return CommonNameResult(cn)
