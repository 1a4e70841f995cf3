import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # Remote collaborators (fixed endpoint addresses)
    VERIFY_ORDER_URL: str = os.getenv("VERIFY_ORDER_URL", "http://localhost:8080/api/verify-order")
    CLAIM_TICKET_URL: str = os.getenv("CLAIM_TICKET_URL", "http://localhost:8080/api/claim-ticket")
    REQUEST_TIMEOUT_SEC: float = float(os.getenv("REQUEST_TIMEOUT_SEC", "10.0"))
    # "json" (default) or "multipart": same keys, sent as multipart form fields
    CLAIM_ENCODING: str = os.getenv("CLAIM_ENCODING", "json").lower()

    # Entry sessions live in process memory only
    SESSION_IDLE_TIMEOUT_SEC: int = int(os.getenv("SESSION_IDLE_TIMEOUT_SEC", "1800"))
    MAX_SESSIONS: int = int(os.getenv("MAX_SESSIONS", "10000"))

    # Telemetry counters (best-effort, never on the workflow path)
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    METRICS_ENABLED: bool = os.getenv("METRICS_ENABLED", "true").lower() == "true"

    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

settings = Settings()
