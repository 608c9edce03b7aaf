import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """Application settings loaded from TOML configuration files.

    Load order (each layer overrides the previous):
        1. config_path    - base settings (committed to git)
        2. secrets_path   - sensitive overrides such as MONGODB_URL credentials (gitignored)
        3. override_path  - per-deployment overrides

    Usage:
        Settings()                                 # config.toml + secrets
        Settings(config_path="config.test.toml")   # test config
    """

    model_config = ConfigDict(extra="forbid")

    def __init__(
        self,
        config_path: str = "config.toml",
        override_path: str | None = None,
        secrets_path: str = "secrets.toml",
    ) -> None:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        if Path(secrets_path).is_file():
            with open(secrets_path, "rb") as f:
                data |= tomllib.load(f)
        if override_path:
            with open(override_path, "rb") as f:
                data |= tomllib.load(f)
        super().__init__(**data)

    PROJECT_NAME: str = "suiteflow"
    DATABASE_NAME: str = "suiteflow_db"
    API_V1_STR: str = "/api/v1"
    MONGODB_URL: str = "mongodb://mongo:27017/suiteflow"

    TESTING: bool = False

    # Work queue
    KAFKA_BOOTSTRAP_SERVERS: str = "kafka:29092"
    KAFKA_TOPIC_PREFIX: str = ""
    EXECUTION_QUEUE_TOPIC: str = "test-executions"

    # Artifacts
    ARTIFACT_BASE_URL: str = "http://localhost:9000/artifacts"
    ARTIFACT_URL_TTL_SECONDS: int = Field(default=3600, gt=0)

    # History paging
    HISTORY_DEFAULT_LIMIT: int = Field(default=50, ge=1)
    HISTORY_MAX_LIMIT: int = Field(default=100, ge=1)

    # Upper bound on test cases fanned out by a single suite trigger
    SUITE_MAX_MEMBERS: int = Field(default=500, ge=1)

    # Service metadata / OpenTelemetry
    ENABLE_TRACING: bool = True
    SERVICE_NAME: str = "suiteflow"
    SERVICE_VERSION: str = "1.0.0"
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None

    LOG_LEVEL: str = Field(default="DEBUG", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    @property
    def execution_topic(self) -> str:
        return f"{self.KAFKA_TOPIC_PREFIX}{self.EXECUTION_QUEUE_TOPIC}"
