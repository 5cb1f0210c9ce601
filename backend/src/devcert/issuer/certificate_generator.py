"""Self-signed X.509 certificate generation for local TLS.

Builds a server certificate for a development host and signs it with its
own key.
"""

import ipaddress
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from opentelemetry import trace

from devcert.issuer.crypto import (
    certificate_to_pem,
    compute_thumbprint,
    private_key_to_pem,
    public_key_matches,
)
from devcert.issuer.errors import IssuanceError
from devcert.metrics import issuer_metrics

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class CertificateGenerationError(IssuanceError):
    """Raised when certificate generation fails."""

    step = "generate_certificate"
    description = "Certificate generation"


@dataclass
class GeneratedCertificate:
    """Result of certificate generation."""

    certificate_pem: str
    private_key_pem: str
    serial_number: str
    thumbprint: str
    not_before: datetime
    not_after: datetime


def parse_subject_alt_name(entry: str) -> x509.GeneralName:
    """Parse a SAN entry such as ``DNS:localhost`` or ``IP:127.0.0.1``.

    Raises:
        CertificateGenerationError: If the entry is malformed.
    """
    kind, sep, value = entry.strip().partition(":")
    kind = kind.strip().upper()
    value = value.strip()

    if not sep or not value:
        raise CertificateGenerationError(
            f"Invalid subject alternative name {entry!r}: expected DNS:<name> or IP:<address>"
        )

    if kind == "DNS":
        try:
            return x509.DNSName(value)
        except ValueError as e:
            # Internationalized names must be given in A-label (punycode) form
            raise CertificateGenerationError(
                f"Invalid DNS name in subject alternative name {entry!r}: {e}"
            ) from e
    if kind == "IP":
        try:
            return x509.IPAddress(ipaddress.ip_address(value))
        except ValueError as e:
            raise CertificateGenerationError(
                f"Invalid IP address in subject alternative name {entry!r}"
            ) from e

    raise CertificateGenerationError(
        f"Unsupported subject alternative name type {kind!r} in {entry!r}"
    )


class CertificateGenerator:
    """Generates self-signed X.509 server certificates.

    Certificate attributes:
    - Subject / Issuer: CN=<common_name>
    - Validity: now() to now() + validity_days, whole seconds
    - Subject Alternative Name: configured DNS / IP entries
    - Key Usage: Digital Signature, Key Encipherment
    - Extended Key Usage: Server Authentication
    """

    # Configuration
    DEFAULT_VALIDITY_DAYS = 365
    DEFAULT_COMMON_NAME = "localhost"
    DEFAULT_SUBJECT_ALT_NAMES = ("DNS:localhost", "IP:127.0.0.1")

    def generate(
        self,
        private_key: rsa.RSAPrivateKey,
        common_name: str = DEFAULT_COMMON_NAME,
        subject_alt_names: list[str] | tuple[str, ...] = DEFAULT_SUBJECT_ALT_NAMES,
        validity_days: int | None = None,
    ) -> GeneratedCertificate:
        """Generate a certificate signed by ``private_key``.

        Args:
            private_key: Key whose public half the certificate binds.
            common_name: Subject common name.
            subject_alt_names: SAN entries in ``DNS:`` / ``IP:`` form.
            validity_days: Certificate validity in days (default 365).

        Returns:
            GeneratedCertificate with both PEM artifacts and details.

        Raises:
            CertificateGenerationError: If inputs are malformed or signing fails.
        """
        with tracer.start_as_current_span("CertificateGenerator.generate") as span:
            span.set_attribute("common_name", common_name)

            start_time = time.time()

            if validity_days is None:
                validity_days = self.DEFAULT_VALIDITY_DAYS

            try:
                if validity_days < 1:
                    raise CertificateGenerationError(
                        f"Certificate validity must be at least 1 day, got {validity_days}"
                    )
                if not common_name or not common_name.strip():
                    raise CertificateGenerationError("Common name must not be empty")

                general_names = [parse_subject_alt_name(entry) for entry in subject_alt_names]
            except CertificateGenerationError as e:
                logger.error(
                    "certificate_input_rejected",
                    extra={"common_name": common_name, "error": str(e)},
                )
                raise

            span.set_attribute("validity_days", validity_days)
            span.set_attribute("subject_alt_names", list(subject_alt_names))

            try:
                # Upper 64 bits of a UUID, always positive
                serial_number = uuid.uuid4().int >> 64
                serial_str = format(serial_number, "016x")

                span.set_attribute("serial", serial_str)

                # X.509 times carry whole seconds only
                not_before = datetime.now(timezone.utc).replace(microsecond=0)
                not_after = not_before + timedelta(days=validity_days)

                subject = issuer = x509.Name(
                    [
                        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
                    ]
                )

                cert_builder = (
                    x509.CertificateBuilder()
                    .subject_name(subject)
                    .issuer_name(issuer)
                    .public_key(private_key.public_key())
                    .serial_number(serial_number)
                    .not_valid_before(not_before)
                    .not_valid_after(not_after)
                    .add_extension(
                        x509.BasicConstraints(ca=False, path_length=None),
                        critical=True,
                    )
                    .add_extension(
                        x509.KeyUsage(
                            digital_signature=True,
                            key_encipherment=True,
                            key_cert_sign=False,
                            crl_sign=False,
                            content_commitment=False,
                            data_encipherment=False,
                            key_agreement=False,
                            encipher_only=False,
                            decipher_only=False,
                        ),
                        critical=True,
                    )
                    .add_extension(
                        x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]),
                        critical=False,
                    )
                    .add_extension(
                        x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
                        critical=False,
                    )
                )
                if general_names:
                    cert_builder = cert_builder.add_extension(
                        x509.SubjectAlternativeName(general_names),
                        critical=False,
                    )

                certificate = cert_builder.sign(private_key, hashes.SHA256())

                cert_pem = certificate_to_pem(certificate)
                key_pem = private_key_to_pem(private_key)

                if not public_key_matches(cert_pem, key_pem):
                    raise CertificateGenerationError(
                        "Certificate public key does not match the private key"
                    )

                thumbprint = compute_thumbprint(cert_pem)

                generation_time = time.time() - start_time
                issuer_metrics.record_certificate_generated(generation_time)

                logger.info(
                    "certificate_generated",
                    extra={
                        "common_name": common_name,
                        "serial": serial_str,
                        "not_after": not_after.isoformat(),
                        "duration_seconds": generation_time,
                    },
                )

                return GeneratedCertificate(
                    certificate_pem=cert_pem,
                    private_key_pem=key_pem,
                    serial_number=serial_str,
                    thumbprint=thumbprint,
                    not_before=not_before,
                    not_after=not_after,
                )

            except CertificateGenerationError as e:
                logger.error(
                    "certificate_generation_failed",
                    extra={"common_name": common_name, "error": str(e)},
                )
                raise
            except Exception as e:
                logger.error(
                    "certificate_generation_failed",
                    extra={"common_name": common_name, "error": str(e)},
                )
                raise CertificateGenerationError(f"Failed to generate certificate: {e}") from e
