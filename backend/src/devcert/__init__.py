"""devcert: self-signed TLS certificates for local development."""

__version__ = "0.1.0"
