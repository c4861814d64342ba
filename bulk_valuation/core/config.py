import os
from pydantic import BaseModel

class Settings(BaseModel):
    # Basic
    ENV: str = os.getenv("ENV", "dev")

    # Upstream valuation API
    DATANEST_BASE_URL: str = os.getenv("DATANEST_BASE_URL", "https://api.datanestai.net")
    DATANEST_API_KEY: str | None = os.getenv("DATANEST_API_KEY")
    VALUATION_PROVIDER: str = os.getenv("VALUATION_PROVIDER", "http")  # http | mock

    # Bulk batches
    BATCH_MAX_ROWS: int = int(os.getenv("BATCH_MAX_ROWS", "10000"))
    BATCH_TIMEOUT_SECONDS: float = float(os.getenv("BATCH_TIMEOUT_SECONDS", "55"))
    BATCH_CONCURRENCY: int = int(os.getenv("BATCH_CONCURRENCY", "1"))  # 1 = strictly sequential

    # Single-record proxies
    LOOKUP_TIMEOUT_SECONDS: float = float(os.getenv("LOOKUP_TIMEOUT_SECONDS", "60"))
    REPORT_TIMEOUT_SECONDS: float = float(os.getenv("REPORT_TIMEOUT_SECONDS", "65"))
    ARTIFACT_TIMEOUT_SECONDS: float = float(os.getenv("ARTIFACT_TIMEOUT_SECONDS", "60"))

    # Security (inbound)
    API_KEY: str | None = os.getenv("API_KEY")
    RATE_LIMIT_RPM: int = int(os.getenv("RATE_LIMIT_RPM", "60"))

    # CORS
    ALLOW_ORIGINS: str = os.getenv("ALLOW_ORIGINS", "*")

    # Metrics
    PROMETHEUS_ENABLED: bool = os.getenv("PROMETHEUS_ENABLED", "true").lower() == "true"

settings = Settings()
