from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import ImpressionShareMetric


class GoogleAdsConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    mcc_id: Optional[str] = None
    customer_id: str

    @field_validator("customer_id", mode="before")
    @classmethod
    def customer_id_digits_only(cls, v) -> str:
        v2 = "".join(ch for ch in str(v) if ch.isdigit())
        if not v2:
            raise ValueError("google_ads.customer_id must contain digits")
        return v2


class BidShareConfig(BaseModel):
    """Bid to Impression Share parameters, fixed for the whole run."""
    model_config = ConfigDict(frozen=True)

    # Steer by absolute top impression share instead of search impression share
    use_absolute_top: bool = True
    target_impression_share: float = 0.8
    # No bid changes once within target +/- tolerance
    tolerance: float = 0.05
    bid_adjustment_coefficient: float = 1.05
    # 7 or more is recommended
    statistics_window_days: int = 7
    skip_if_zero_impressions: bool = True
    max_bid: float = 35.00
    min_bid: float = 5.15
    # Raised bids are at least first page CPC (or top of page CPC with absolute top)
    use_reference_cpc_floor: bool = False

    @field_validator("bid_adjustment_coefficient")
    @classmethod
    def coefficient_above_one(cls, v: float) -> float:
        if v <= 1:
            raise ValueError(f"bid_adjustment_coefficient must be > 1 (got {v})")
        return v

    @field_validator("statistics_window_days")
    @classmethod
    def window_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"statistics_window_days must be > 0 (got {v})")
        return v

    @model_validator(mode="after")
    def bid_range_ordered(self) -> "BidShareConfig":
        if self.min_bid > self.max_bid:
            raise ValueError(
                f"min_bid ({self.min_bid}) must not exceed max_bid ({self.max_bid})"
            )
        return self

    @property
    def metric(self) -> ImpressionShareMetric:
        if self.use_absolute_top:
            return ImpressionShareMetric.SEARCH_ABSOLUTE_TOP_IMPRESSION_SHARE
        return ImpressionShareMetric.SEARCH_IMPRESSION_SHARE

    @property
    def lower_threshold(self) -> float:
        return self.target_impression_share - self.tolerance

    @property
    def upper_threshold(self) -> float:
        return self.target_impression_share + self.tolerance


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_name: str
    google_ads: GoogleAdsConfig
    # Overrides the account time zone reported by Google Ads
    timezone: Optional[str] = None
    bid_to_impression_share: BidShareConfig = Field(default_factory=BidShareConfig)

    @field_validator("timezone")
    @classmethod
    def timezone_known(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except ZoneInfoNotFoundError:
            raise ValueError(f"unknown IANA time zone '{v}' (e.g. Europe/London)") from None
        return v

    @property
    def customer_id(self) -> str:
        return self.google_ads.customer_id


def parse_client_config(data: dict) -> ClientConfig:
    # Raises ValidationError if invalid
    return ClientConfig.model_validate(data)
