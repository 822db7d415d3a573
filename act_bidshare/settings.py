import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

@dataclass(frozen=True)
class Settings:
    # Mode: mock | live
    mode: str

    # Live: path to google-ads.yaml
    google_ads_config: str

    # Mock account (DuckDB file)
    mock_db_path: str
    mock_seed: int

    # Logging (read by setup_logging)
    log_level: str
    log_dir: str

def get_settings(env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file)  # reads .env if present; never overrides the real environment

    mode = os.getenv("BIDSHARE_MODE", "mock").strip().lower()

    return Settings(
        mode=mode,
        google_ads_config=os.getenv("GOOGLE_ADS_CONFIG", "./secrets/google-ads.yaml"),
        mock_db_path=os.getenv("BIDSHARE_MOCK_DB", "./bidshare_mock.duckdb"),
        mock_seed=int(os.getenv("MOCK_SEED", "42")),
        log_level=os.getenv("BIDSHARE_LOG_LEVEL", "INFO").strip().upper(),
        log_dir=os.getenv("BIDSHARE_LOG_DIR", "logs"),
    )
