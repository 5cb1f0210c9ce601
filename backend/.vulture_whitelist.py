from backend.src.devcert import __version__
from backend.src.devcert.issuer.certificate_generator import GeneratedCertificate
from backend.src.devcert.services.issuance_service import IssuanceResult
from backend.src.shared.config import Settings

# Pydantic Settings
Settings.model_config
Settings.APP_ENV

# Result fields read by callers and tests
GeneratedCertificate.not_before
GeneratedCertificate.not_after
IssuanceResult.certificate

# Package metadata
__version__
