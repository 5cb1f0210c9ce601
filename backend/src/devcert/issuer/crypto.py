"""Cryptographic utilities for certificate operations.

Provides PEM serialization, thumbprint computation and key/certificate
consistency checks.
"""

import hashlib
import logging

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)


class CryptoError(Exception):
    """Raised when a cryptographic operation fails."""

    pass


def private_key_to_pem(private_key: rsa.RSAPrivateKey) -> str:
    """Serialize a private key as unencrypted PKCS#8 PEM."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


def certificate_to_pem(certificate: x509.Certificate) -> str:
    """Serialize a certificate as PEM."""
    return certificate.public_bytes(serialization.Encoding.PEM).decode("utf-8")


def compute_thumbprint(cert_pem: str) -> str:
    """Compute SHA-256 thumbprint of a certificate.

    Args:
        cert_pem: Certificate in PEM format.

    Returns:
        Lowercase hexadecimal SHA-256 thumbprint.

    Raises:
        CryptoError: If thumbprint computation fails.
    """
    try:
        cert = x509.load_pem_x509_certificate(cert_pem.encode("utf-8"))
        der_bytes = cert.public_bytes(serialization.Encoding.DER)
        return hashlib.sha256(der_bytes).hexdigest().lower()
    except Exception as e:
        raise CryptoError(f"Failed to compute certificate thumbprint: {e}") from e


def public_key_matches(cert_pem: str, key_pem: str) -> bool:
    """Check that a certificate carries the public half of a private key.

    Args:
        cert_pem: Certificate in PEM format.
        key_pem: Unencrypted private key in PEM format.

    Raises:
        CryptoError: If either PEM cannot be parsed.
    """
    try:
        cert = x509.load_pem_x509_certificate(cert_pem.encode("utf-8"))
        private_key = serialization.load_pem_private_key(key_pem.encode("utf-8"), password=None)
    except Exception as e:
        raise CryptoError(f"Failed to load key material: {e}") from e

    spki = serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    return cert.public_key().public_bytes(*spki) == private_key.public_key().public_bytes(*spki)
