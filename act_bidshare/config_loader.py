from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from .config_models import ClientConfig, parse_client_config
from .errors import ConfigError
from .logging_config import setup_logging

logger = setup_logging(__name__)


def load_client_config(path: str | Path) -> ClientConfig:
    """
    Load and validate a client config, e.g.:

    client_name: "Test_Client_001"
    google_ads:
      customer_id: "737-284-4356"
    bid_to_impression_share:
      use_absolute_top: true
      target_impression_share: 0.8
      tolerance: 0.05
      bid_adjustment_coefficient: 1.05
      statistics_window_days: 7
      skip_if_zero_impressions: true
      max_bid: 35.00
      min_bid: 5.15
      use_reference_cpc_floor: false

    Raises ConfigError on a missing file, malformed YAML or invalid values.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Client config not found: {p}")

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Client config is not valid YAML: {p}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Client config YAML must be a mapping/object at top level.")

    try:
        cfg = parse_client_config(data)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(loc) for loc in err['loc']) or '(root)'}: {err['msg']}"
            for err in e.errors()
        ]
        logger.error(f"Config validation failed: {len(problems)} errors")
        for problem in problems:
            logger.error(f"  - {problem}")
        raise ConfigError(f"Invalid client config: {p}", problems) from e

    logger.info(f"Loaded client config {cfg.client_name} (customer_id={cfg.customer_id})")
    return cfg
