"""
Certificate Chain Assembly

Appends root certificates to a PEM certificate (chain). The PEM blocks are
treated as opaque text; nothing here parses or verifies them.
"""

import logging
from enum import Enum

from cert_errors import FileReadFailure

logger = logging.getLogger(__name__)


class RootRead(Enum):
    CONTENT = "content"
    ABSENT = "absent"


def _read_root_certs(root_cert_file):
    """Return (RootRead, bytes); read errors other than absence raise."""
    try:
        with open(root_cert_file, "rb") as f:
            return RootRead.CONTENT, f.read()
    except FileNotFoundError:
        return RootRead.ABSENT, b""
    except OSError as e:
        raise FileReadFailure(f"failed to read root certificates ({e})") from e


def append_root_certs(pem_cert, root_cert_file):
    """Append the root certificates in root_cert_file to pem_cert."""
    if not root_cert_file:
        return pem_cert

    logger.debug("append root certificates from %s", root_cert_file)
    outcome, cert_bytes = _read_root_certs(root_cert_file)
    if outcome is RootRead.ABSENT:
        logger.debug("root certificate file %s does not exist, nothing appended", root_cert_file)
        return pem_cert
    if not cert_bytes:
        logger.debug("root certificate file %s is empty, nothing appended", root_cert_file)
        return pem_cert
    return append_cert_byte(pem_cert, cert_bytes)


def append_cert_byte(pem_cert, root_cert):
    """
    Append root_cert to an existing certificate chain.

    A non-empty pem_cert always ends up separated from root_cert by exactly
    one newline. An empty pem_cert yields root_cert unchanged.
    """
    root_certs = b""
    if pem_cert:
        root_certs = bytes(pem_cert)
        if root_certs.endswith(b"\n"):
            root_certs = root_certs[:-1]
        root_certs += b"\n"
    return root_certs + bytes(root_cert)
