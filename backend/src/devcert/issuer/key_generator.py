"""RSA key generation for development certificates."""

import logging
import time

from cryptography.hazmat.primitives.asymmetric import rsa
from opentelemetry import trace

from devcert.issuer.errors import IssuanceError
from devcert.metrics import issuer_metrics

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class KeyGenerationError(IssuanceError):
    """Raised when the private key cannot be generated."""

    step = "generate_key"
    description = "Private key generation"


class KeyGenerator:
    """Generates RSA private keys.

    Failures are not retried: a broken entropy source or crypto backend
    does not recover between attempts.
    """

    # Configuration
    PUBLIC_EXPONENT = 65537
    MIN_KEY_SIZE = 2048
    DEFAULT_KEY_SIZE = 4096

    def __init__(self, key_size: int | None = None) -> None:
        self.key_size = self.DEFAULT_KEY_SIZE if key_size is None else key_size

    def generate(self) -> rsa.RSAPrivateKey:
        """Generate a new RSA private key.

        Returns:
            The generated private key.

        Raises:
            KeyGenerationError: If the size is too small or the backend fails.
        """
        with tracer.start_as_current_span("KeyGenerator.generate") as span:
            span.set_attribute("key_size", self.key_size)

            if self.key_size < self.MIN_KEY_SIZE:
                logger.error(
                    "key_size_rejected",
                    extra={"key_size": self.key_size, "min_key_size": self.MIN_KEY_SIZE},
                )
                raise KeyGenerationError(
                    f"RSA key size must be at least {self.MIN_KEY_SIZE} bits, got {self.key_size}"
                )

            start_time = time.time()
            try:
                private_key = rsa.generate_private_key(
                    public_exponent=self.PUBLIC_EXPONENT,
                    key_size=self.key_size,
                )
            except Exception as e:
                logger.error(
                    "key_generation_failed",
                    extra={"key_size": self.key_size, "error": str(e)},
                )
                raise KeyGenerationError(f"Failed to generate RSA key: {e}") from e

            generation_time = time.time() - start_time
            issuer_metrics.record_key_generated(self.key_size, generation_time)

            logger.info(
                "key_generated",
                extra={"algorithm": f"RSA-{self.key_size}", "duration_seconds": generation_time},
            )
            return private_key
