"""OpenTelemetry metrics for certificate issuance."""

from opentelemetry import metrics

# Get meter for the issuer
meter = metrics.get_meter("devcert")

certificates_issued_total = meter.create_counter(
    name="devcert_certificates_issued_total",
    description="Total key/certificate pairs written",
    unit="1",
)

issuance_failures_total = meter.create_counter(
    name="devcert_issuance_failures_total",
    description="Total failed issuance attempts by step",
    unit="1",
)

key_generation_duration = meter.create_histogram(
    name="devcert_key_generation_duration_seconds",
    description="RSA key generation duration in seconds",
    unit="s",
)

certificate_generation_duration = meter.create_histogram(
    name="devcert_certificate_generation_duration_seconds",
    description="Certificate build and signing duration in seconds",
    unit="s",
)


class IssuerMetrics:
    """Facade for issuer metrics with proper labels."""

    def record_key_generated(self, key_size: int, duration_seconds: float) -> None:
        """Record key generation. Labels: key_size=<bits>"""
        key_generation_duration.record(duration_seconds, {"key_size": key_size})

    def record_certificate_generated(self, duration_seconds: float) -> None:
        certificate_generation_duration.record(duration_seconds)

    def record_certificate_issued(self) -> None:
        """Record a completed issuance (both files written)."""
        certificates_issued_total.add(1)

    def record_issuance_failed(self, step: str) -> None:
        """Record a failed issuance. Labels: step=create_directory|generate_key|..."""
        issuance_failures_total.add(1, {"step": step})


# Singleton instance
issuer_metrics = IssuerMetrics()
