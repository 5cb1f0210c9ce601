"""Base error for the issuance steps."""


class IssuanceError(Exception):
    """Raised when a step of certificate issuance fails.

    Attributes:
        step: Machine name of the failing step.
        description: Human-readable name of the step for console output.
    """

    step = "issue"
    description = "Certificate issuance"
