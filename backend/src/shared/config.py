from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    APP_NAME: str = "devcert"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "WARNING"

    # Export logs, spans and metrics to the console via OpenTelemetry
    TELEMETRY_CONSOLE: bool = False

    # Certificate issuance defaults
    CERT_OUTPUT_DIR: str = "certs"
    CERT_KEY_FILENAME: str = "key.pem"
    CERT_CERT_FILENAME: str = "cert.pem"
    CERT_COMMON_NAME: str = "localhost"
    CERT_SUBJECT_ALT_NAMES: str = "DNS:localhost,IP:127.0.0.1"
    CERT_VALIDITY_DAYS: int = 365
    CERT_KEY_SIZE: int = 4096

    @property
    def subject_alt_names(self) -> list[str]:
        """Configured SAN entries as a list."""
        return [s.strip() for s in self.CERT_SUBJECT_ALT_NAMES.split(",") if s.strip()]


settings = Settings()
