"""Certificate issuing components for devcert.

This module provides:
- RSA key generation
- Self-signed X.509 certificate generation and signing
- PEM serialization and key/certificate consistency checks
- Output directory and file storage
"""

from devcert.issuer.certificate_generator import (
    CertificateGenerationError,
    CertificateGenerator,
    GeneratedCertificate,
)
from devcert.issuer.errors import IssuanceError
from devcert.issuer.key_generator import KeyGenerationError, KeyGenerator
from devcert.issuer.storage import ArtifactStorage, DirectoryCreationError, FileWriteError

__all__ = [
    "ArtifactStorage",
    "CertificateGenerationError",
    "CertificateGenerator",
    "DirectoryCreationError",
    "FileWriteError",
    "GeneratedCertificate",
    "IssuanceError",
    "KeyGenerationError",
    "KeyGenerator",
]
