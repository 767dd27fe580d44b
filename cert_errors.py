"""Errors raised while generating CSRs and assembling certificate chains."""


class CertificateError(Exception):
    """Base class for CSR and chain errors."""


class UnsupportedAlgorithm(CertificateError):
    """The requested EC signature algorithm is not supported."""


class InvalidKeySize(CertificateError):
    """The requested RSA key size is below the minimum."""

    def __init__(self, minimum, requested):
        self.minimum = minimum
        self.requested = requested
        super().__init__(
            f"requested key size does not meet the minimum required size of "
            f"{minimum} (requested: {requested})"
        )


class KeyGenerationFailure(CertificateError):
    pass


class ExtensionBuildFailure(CertificateError):
    pass


class SigningFailure(CertificateError):
    pass


class EncodingFailure(CertificateError):
    pass


class FileReadFailure(CertificateError):
    pass
