#!/usr/bin/env python3
"""
CSR Generator

Generates a private key and a Certificate Signing Request (CSR) for it,
following the algorithm and key size policy given in CertOptions.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from cert_errors import (
    EncodingFailure,
    ExtensionBuildFailure,
    InvalidKeySize,
    KeyGenerationFailure,
    SigningFailure,
    UnsupportedAlgorithm,
)
from cert_options import ECDSA_SIG_ALG, MINIMUM_RSA_KEY_SIZE, P384_CURVE
from san_extension import build_subject_alt_name_extension, dual_use_common_name

logger = logging.getLogger(__name__)


class KeyAlgorithm(Enum):
    RSA = "rsa"
    EC = "ec"


@dataclass(frozen=True)
class KeyMaterial:
    """A generated private key plus the hash its CSR is signed with."""
    algorithm: KeyAlgorithm
    private_key: object
    signature_hash: hashes.HashAlgorithm

    def public_key(self):
        return self.private_key.public_key()


@dataclass(frozen=True)
class CSRTemplate:
    subject: x509.Name = field(default_factory=lambda: x509.Name([]))
    extensions: Tuple[x509.Extension, ...] = ()


def _validate_rsa_key_size(key_size, minimum):
    if key_size < minimum:
        raise InvalidKeySize(minimum, key_size)


def generate_key(options, minimum_rsa_key_size=MINIMUM_RSA_KEY_SIZE):
    """
    Generate the private key requested by the options.

    An EC key is generated when an EC signature algorithm is set,
    otherwise an RSA key of options.rsa_key_size bits.

    Args:
        options: CertOptions for the request
        minimum_rsa_key_size: Smallest RSA key size accepted

    Returns:
        KeyMaterial holding the new key
    """
    if options.ec_sig_alg:
        if options.ec_sig_alg != ECDSA_SIG_ALG:
            raise UnsupportedAlgorithm(
                "csr cert generation fails due to unsupported EC signature algorithm "
                f"({options.ec_sig_alg})"
            )
        if options.ec_curve == P384_CURVE:
            curve, signature_hash = ec.SECP384R1(), hashes.SHA384()
        else:
            curve, signature_hash = ec.SECP256R1(), hashes.SHA256()
        try:
            private_key = ec.generate_private_key(curve)
        except Exception as e:
            raise KeyGenerationFailure(f"EC key generation failed ({e})") from e
        logger.debug("Generated EC private key on curve %s", curve.name)
        return KeyMaterial(KeyAlgorithm.EC, private_key, signature_hash)

    _validate_rsa_key_size(options.rsa_key_size, minimum_rsa_key_size)
    try:
        private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=options.rsa_key_size
        )
    except Exception as e:
        raise KeyGenerationFailure(f"RSA key generation failed ({e})") from e
    logger.debug("Generated %d bit RSA private key", options.rsa_key_size)
    return KeyMaterial(KeyAlgorithm.RSA, private_key, hashes.SHA256())


def build_csr_template(options):
    """Build the subject and extensions of a CSR from the options."""
    org = None
    common_name = None
    extensions = ()

    if options.org:
        org = options.org

    hosts = options.host
    if hosts:
        extensions = (build_subject_alt_name_extension(hosts),)
        if options.is_dual_use:
            result = dual_use_common_name(hosts)
            if result.warning:
                # log and continue
                logger.error("dual-use failed for CSR template - omitting CN (%s)", result.warning)
            else:
                common_name = result.common_name

    # Create certificate subject
    subject_components = []
    if org:
        subject_components.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, org))
    if common_name:
        subject_components.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))

    return CSRTemplate(x509.Name(subject_components), extensions)


def sign_csr(template, key_material, use_pkcs8=False):
    """
    Sign a CSR template and PEM encode the request and its private key.

    Args:
        template: CSRTemplate to sign
        key_material: KeyMaterial from generate_key
        use_pkcs8: Encode the private key as PKCS8 instead of the
            algorithm specific OpenSSL format

    Returns:
        (csr_pem, private_key_pem) as bytes
    """
    # Build CSR
    builder = x509.CertificateSigningRequestBuilder().subject_name(template.subject)
    for extension in template.extensions:
        builder = builder.add_extension(extension.value, critical=extension.critical)

    # Sign CSR with private key
    try:
        csr = builder.sign(key_material.private_key, key_material.signature_hash)
    except Exception as e:
        raise SigningFailure(f"CSR creation failed ({e})") from e

    if use_pkcs8:
        key_format = serialization.PrivateFormat.PKCS8
    else:
        key_format = serialization.PrivateFormat.TraditionalOpenSSL

    try:
        csr_pem = csr.public_bytes(serialization.Encoding.PEM)
        key_pem = key_material.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=key_format,
            encryption_algorithm=serialization.NoEncryption()
        )
    except Exception as e:
        raise EncodingFailure(f"PEM encoding failed ({e})") from e

    return csr_pem, key_pem


def gen_csr(options):
    """Generate a PEM encoded CSR and private key for the options."""
    key_material = generate_key(options)
    try:
        template = build_csr_template(options)
    except ExtensionBuildFailure as e:
        raise ExtensionBuildFailure(f"CSR template creation failed ({e})") from e
    return sign_csr(template, key_material, options.pkcs8_key)
