"""Command line entry point: issue a self-signed certificate for local TLS."""

import argparse
import logging
import sys
from pathlib import Path

from shared.config import Settings, settings
from shared.logging import setup_logging
from shared.telemetry import setup_telemetry

from devcert.issuer import IssuanceError
from devcert.services.issuance_service import CertificateIssuer, IssuanceOptions, IssuanceResult

logger = logging.getLogger(__name__)

PRODUCTION_ADVISORY = (
    "WARNING: Self-signed certificates are for development only!\n"
    "   Production: use a certificate authority such as Let's Encrypt"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devcert",
        description="Generate a private key and self-signed TLS certificate for local development.",
    )
    parser.add_argument("--out-dir", type=Path, help="Directory to write into (default: certs)")
    parser.add_argument("--key-path", type=Path, help="Private key path (default: <out-dir>/key.pem)")
    parser.add_argument(
        "--cert-path", type=Path, help="Certificate path (default: <out-dir>/cert.pem)"
    )
    parser.add_argument("--common-name", help="Subject common name (default: localhost)")
    parser.add_argument(
        "--san",
        action="append",
        metavar="ENTRY",
        help="Subject alternative name as DNS:<name> or IP:<address>; repeat for more. "
        "Replaces the default DNS:localhost, IP:127.0.0.1",
    )
    parser.add_argument("--days", type=int, help="Validity period in days (default: 365)")
    parser.add_argument("--key-bits", type=int, help="RSA key size in bits (default: 4096)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: from LOG_LEVEL)",
    )
    return parser


def build_options(args: argparse.Namespace, config: Settings) -> IssuanceOptions:
    """Merge command line flags over configured defaults."""
    output_dir = args.out_dir if args.out_dir is not None else Path(config.CERT_OUTPUT_DIR)
    return IssuanceOptions(
        output_dir=output_dir,
        key_path=args.key_path or output_dir / config.CERT_KEY_FILENAME,
        cert_path=args.cert_path or output_dir / config.CERT_CERT_FILENAME,
        common_name=args.common_name if args.common_name is not None else config.CERT_COMMON_NAME,
        subject_alt_names=args.san if args.san is not None else config.subject_alt_names,
        validity_days=args.days if args.days is not None else config.CERT_VALIDITY_DAYS,
        key_size_bits=args.key_bits if args.key_bits is not None else config.CERT_KEY_SIZE,
    )


def _print_summary(result: IssuanceResult) -> None:
    print("Certificates generated:")
    print(f"   - {result.key_path} (private key)")
    print(f"   - {result.cert_path} (certificate)")
    print("")
    print(PRODUCTION_ADVISORY)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    setup_telemetry()

    options = build_options(args, settings)
    logger.debug(
        "issuance_options",
        extra={"output_dir": str(options.output_dir), "key_size": options.key_size_bits},
    )

    print("Generating TLS certificates...")
    try:
        result = CertificateIssuer(options).issue()
    except IssuanceError as e:
        print(f"Error: {e.description} failed: {e}", file=sys.stderr)
        return 1

    _print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
