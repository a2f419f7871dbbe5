"""SafeLink Server Configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    server_name: str = "SafeLink Server"
    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False
    log_level: str = "INFO"

    # Paths
    data_dir: Path = Path.home() / "safelink" / "data"

    # Database
    db_path: Path = Path.home() / "safelink" / "data" / "safelink.db"

    # Pairing
    pairing_code_length: int = 6
    pairing_code_ttl_hours: int = 24
    pairing_code_max_attempts: int = 5  # retries on code collision
    pasted_codes_limit: int = 50

    # Push notifications
    push_enabled: bool = True
    push_api_url: str = "https://exp.host/--/api/v2/push/send"
    push_timeout_seconds: float = 10.0
    firebase_credentials_path: Optional[Path] = None  # service account JSON

    model_config = {"env_prefix": "SAFELINK_"}

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_dirs()
