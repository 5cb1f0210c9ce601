"""Issuance service: produces a development key and self-signed certificate."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from opentelemetry import trace

from devcert.issuer import (
    ArtifactStorage,
    CertificateGenerator,
    GeneratedCertificate,
    IssuanceError,
    KeyGenerator,
)
from devcert.metrics import issuer_metrics

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class IssuanceOptions:
    """Inputs for one issuance. Key and certificate paths default into output_dir."""

    output_dir: Path = Path("certs")
    key_path: Path | None = None
    cert_path: Path | None = None
    common_name: str = CertificateGenerator.DEFAULT_COMMON_NAME
    subject_alt_names: list[str] = field(
        default_factory=lambda: list(CertificateGenerator.DEFAULT_SUBJECT_ALT_NAMES)
    )
    validity_days: int = CertificateGenerator.DEFAULT_VALIDITY_DAYS
    key_size_bits: int = KeyGenerator.DEFAULT_KEY_SIZE

    def __post_init__(self) -> None:
        self.output_dir = Path(self.output_dir)

    @property
    def key_file(self) -> Path:
        return Path(self.key_path) if self.key_path else self.output_dir / "key.pem"

    @property
    def cert_file(self) -> Path:
        return Path(self.cert_path) if self.cert_path else self.output_dir / "cert.pem"


@dataclass
class IssuanceResult:
    """Paths written by an issuance and the generated certificate details."""

    key_path: Path
    cert_path: Path
    certificate: GeneratedCertificate


class CertificateIssuer:
    """Creates the output directory, generates the key pair and certificate,
    and writes both files.

    Every step is fatal: the first failure propagates as an IssuanceError
    subclass and nothing after it runs.
    """

    def __init__(
        self,
        options: IssuanceOptions,
        storage: ArtifactStorage | None = None,
    ) -> None:
        self.options = options
        self.storage = storage or ArtifactStorage()
        self.key_generator = KeyGenerator(options.key_size_bits)
        self.certificate_generator = CertificateGenerator()

    def issue(self) -> IssuanceResult:
        """Run the issuance sequence.

        Returns:
            IssuanceResult with the written paths.

        Raises:
            DirectoryCreationError, KeyGenerationError,
            CertificateGenerationError, FileWriteError.
        """
        opts = self.options
        key_path = opts.key_file
        cert_path = opts.cert_file

        with tracer.start_as_current_span("CertificateIssuer.issue") as span:
            span.set_attribute("output_dir", str(opts.output_dir))

            try:
                self.storage.ensure_directory(opts.output_dir)
                for parent in {key_path.parent, cert_path.parent}:
                    if parent != opts.output_dir:
                        self.storage.ensure_directory(parent)

                private_key = self.key_generator.generate()

                generated = self.certificate_generator.generate(
                    private_key,
                    common_name=opts.common_name,
                    subject_alt_names=opts.subject_alt_names,
                    validity_days=opts.validity_days,
                )

                self.storage.write_pair(
                    key_path,
                    generated.private_key_pem,
                    cert_path,
                    generated.certificate_pem,
                )
            except IssuanceError as e:
                span.set_attribute("failed_step", e.step)
                issuer_metrics.record_issuance_failed(e.step)
                raise

            issuer_metrics.record_certificate_issued()

            logger.info(
                "certificate_issued",
                extra={
                    "key_path": str(key_path),
                    "cert_path": str(cert_path),
                    "serial": generated.serial_number,
                    "thumbprint": generated.thumbprint,
                },
            )

            return IssuanceResult(
                key_path=key_path,
                cert_path=cert_path,
                certificate=generated,
            )
