"""
Bid Adjustment Policy - multiplicative raise/lower clamped to [min_bid, max_bid].

  raise: cpc * coefficient, optionally floored at the reference CPC
         (top of page CPC for absolute top, first page CPC otherwise)
  lower: cpc / coefficient

All values are in currency units (not micros).
"""
from __future__ import annotations

from .config_models import BidShareConfig


class BidPolicy:

    def __init__(self, config: BidShareConfig):
        self.config = config

    def clamp(self, cpc: float) -> float:
        return min(self.config.max_bid, max(self.config.min_bid, cpc))

    def reference_floor(self, first_page_cpc: float, top_of_page_cpc: float) -> float:
        if self.config.use_absolute_top:
            return top_of_page_cpc
        return first_page_cpc

    def raise_cpc(self, cpc: float, first_page_cpc: float, top_of_page_cpc: float) -> float:
        """
        Increase a CPC by the bid adjustment coefficient.

        With use_reference_cpc_floor the new bid is at least the reference CPC.
        The result always lies within [min_bid, max_bid], so a cpc already above
        max_bid comes back lower.
        """
        new_cpc = cpc * self.config.bid_adjustment_coefficient
        if self.config.use_reference_cpc_floor:
            floor = self.reference_floor(first_page_cpc, top_of_page_cpc)
            if new_cpc < floor:
                new_cpc = floor
        return self.clamp(new_cpc)

    def lower_cpc(self, cpc: float) -> float:
        """Decrease a CPC by the bid adjustment coefficient, within [min_bid, max_bid]."""
        return self.clamp(cpc / self.config.bid_adjustment_coefficient)
