"""
Bid to Impression Share for Ads Control Tower

Raises or lowers keyword CPC bids so each keyword's impression share
moves toward a target band:
- Keywords below target - tolerance get bid * coefficient
- Keywords above target + tolerance get bid / coefficient
- Bids stay within [min_bid, max_bid]
"""

__version__ = "2.1.0"

from .adjuster import BidAdjuster
from .config_models import BidShareConfig, ClientConfig
from .errors import ConfigError, KeywordSourceError
from .keyword_source import AccountKeyword, InMemoryKeywordSource, KeywordSelection, KeywordSource
from .models import BidChange, Direction, ImpressionShareMetric, KeywordRecord, RunSummary
from .policy import BidPolicy

__all__ = [
    "BidAdjuster",
    "BidShareConfig",
    "ClientConfig",
    "ConfigError",
    "KeywordSourceError",
    "AccountKeyword",
    "InMemoryKeywordSource",
    "KeywordSelection",
    "KeywordSource",
    "BidChange",
    "Direction",
    "ImpressionShareMetric",
    "KeywordRecord",
    "RunSummary",
    "BidPolicy",
]
