import os
from dataclasses import dataclass


class Config:
    """Base configuration. Shared across all environments."""

    # --- Required ---
    SECRET_KEY = os.environ.get("SECRET_KEY")

    # Handle DATABASE_URL: some PaaS providers (Railway, Heroku) use
    # "postgres://" which SQLAlchemy 1.4+ doesn't accept.
    _db_url = os.environ.get("DATABASE_URL", "")
    if _db_url.startswith("postgres://"):
        _db_url = _db_url.replace("postgres://", "postgresql://", 1)
    SQLALCHEMY_DATABASE_URI = _db_url or None

    # --- CRM (GoHighLevel / LeadConnector) ---
    # Missing API key or location ID disables the CRM integration.
    GHL_API_URL = os.environ.get("GHL_API_URL", "https://services.leadconnectorhq.com")
    GHL_API_KEY = os.environ.get("GHL_API_KEY")
    GHL_API_VERSION = os.environ.get("GHL_API_VERSION", "2021-07-28")
    GHL_LOCATION_ID = os.environ.get("GHL_LOCATION_ID")
    GHL_PIPELINE_ID = os.environ.get("GHL_PIPELINE_ID")          # opportunities skipped when unset
    GHL_STAGE_NEW_LEAD = os.environ.get("GHL_STAGE_NEW_LEAD")
    GHL_CALENDAR_ID = os.environ.get("GHL_CALENDAR_ID")          # appointments skipped when unset
    OPPORTUNITY_BRAND = os.environ.get("OPPORTUNITY_BRAND", "Advanced Marketing")

    # --- Payment links (Airwallex) ---
    AIRWALLEX_API_URL = os.environ.get("AIRWALLEX_API_URL", "https://api.airwallex.com")
    AIRWALLEX_CLIENT_ID = os.environ.get("AIRWALLEX_CLIENT_ID")
    AIRWALLEX_API_KEY = os.environ.get("AIRWALLEX_API_KEY")
    CONSULTATION_FEE = int(os.environ.get("CONSULTATION_FEE", 100))
    CONSULTATION_CURRENCY = os.environ.get("CONSULTATION_CURRENCY", "USD")

    # --- Outbound HTTP ---
    HTTP_TIMEOUT = int(os.environ.get("HTTP_TIMEOUT", 30))

    # --- SQLAlchemy ---
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    @staticmethod
    def validate():
        """Fail fast if required env vars are missing."""
        required = ["DATABASE_URL"]
        missing = [v for v in required if not os.environ.get(v)]
        if missing:
            raise RuntimeError(
                f"Missing required environment variables: {', '.join(missing)}"
            )


class DevConfig(Config):
    """Local development."""

    DEBUG = True


class TestConfig(Config):
    """Testing — in-memory SQLite, fake integration credentials."""

    TESTING = True
    DEBUG = True
    SECRET_KEY = "test-secret-key-not-for-production"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    GHL_API_URL = "https://crm.test"
    GHL_API_KEY = "pit-test-fake"
    GHL_LOCATION_ID = "loc_test"
    GHL_PIPELINE_ID = "pipe_test"
    GHL_STAGE_NEW_LEAD = "stage_test"
    GHL_CALENDAR_ID = "cal_test"
    AIRWALLEX_API_URL = "https://pay.test"
    AIRWALLEX_CLIENT_ID = "client_test"
    AIRWALLEX_API_KEY = "key_test"
    CONSULTATION_FEE = 100
    CONSULTATION_CURRENCY = "USD"
    RATELIMIT_ENABLED = False  # disable rate limiting in tests

    @staticmethod
    def validate():
        """Skip validation in test mode — everything is hardcoded."""
        pass


class ProdConfig(Config):
    """Production."""

    DEBUG = False


config_by_name = {
    "development": DevConfig,
    "production": ProdConfig,
    "testing": TestConfig,
}


@dataclass(frozen=True)
class IntegrationSettings:
    """Explicit integration settings handed to services and API clients.

    Built from the Flask config at request time. An integration whose
    credentials are absent is disabled; it never fails the request.
    """

    crm_api_url: str
    crm_api_key: str | None
    crm_api_version: str
    crm_location_id: str | None
    crm_pipeline_id: str | None
    crm_pipeline_stage_id: str | None
    crm_calendar_id: str | None
    opportunity_brand: str
    payment_api_url: str
    payment_client_id: str | None
    payment_api_key: str | None
    consultation_fee: int
    consultation_currency: str
    http_timeout: int

    @classmethod
    def from_config(cls, config):
        return cls(
            crm_api_url=(config.get("GHL_API_URL") or "").rstrip("/"),
            crm_api_key=config.get("GHL_API_KEY"),
            crm_api_version=config.get("GHL_API_VERSION", "2021-07-28"),
            crm_location_id=config.get("GHL_LOCATION_ID"),
            crm_pipeline_id=config.get("GHL_PIPELINE_ID"),
            crm_pipeline_stage_id=config.get("GHL_STAGE_NEW_LEAD"),
            crm_calendar_id=config.get("GHL_CALENDAR_ID"),
            opportunity_brand=config.get("OPPORTUNITY_BRAND", "Advanced Marketing"),
            payment_api_url=(config.get("AIRWALLEX_API_URL") or "").rstrip("/"),
            payment_client_id=config.get("AIRWALLEX_CLIENT_ID"),
            payment_api_key=config.get("AIRWALLEX_API_KEY"),
            consultation_fee=int(config.get("CONSULTATION_FEE", 100)),
            consultation_currency=config.get("CONSULTATION_CURRENCY", "USD"),
            http_timeout=int(config.get("HTTP_TIMEOUT", 30)),
        )

    @property
    def crm_enabled(self) -> bool:
        return bool(self.crm_api_key and self.crm_location_id)

    @property
    def pipeline_enabled(self) -> bool:
        return self.crm_enabled and bool(self.crm_pipeline_id)

    @property
    def calendar_enabled(self) -> bool:
        return self.crm_enabled and bool(self.crm_calendar_id)

    @property
    def payments_enabled(self) -> bool:
        return bool(self.payment_client_id and self.payment_api_key)
