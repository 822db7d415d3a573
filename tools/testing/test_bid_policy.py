"""
Bid Adjustment Policy tests.

Covers:
1. Clamp stays within [min_bid, max_bid] and is monotonic
2. Raise / lower by the coefficient (example scenarios A, B, D, E)
3. Boundary cases: cpc already above max_bid / below min_bid
4. Reference CPC floor (first page / top of page)
5. lower(raise(cpc)) returns to cpc inside the range

Run: python tools/testing/test_bid_policy.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from act_bidshare.config_models import BidShareConfig
from act_bidshare.policy import BidPolicy


def make_policy(**overrides) -> BidPolicy:
    params = dict(
        use_absolute_top=True,
        target_impression_share=0.8,
        tolerance=0.05,
        bid_adjustment_coefficient=1.05,
        max_bid=35.00,
        min_bid=5.15,
        use_reference_cpc_floor=False,
    )
    params.update(overrides)
    return BidPolicy(BidShareConfig(**params))


def test_clamp_within_range():
    policy = make_policy()
    for cpc in [-3.0, 0.0, 1.0, 5.15, 5.16, 20.0, 34.99, 35.0, 35.01, 1000.0]:
        clamped = policy.clamp(cpc)
        assert 5.15 <= clamped <= 35.00, f"clamp({cpc}) = {clamped}"


def test_clamp_monotonic():
    policy = make_policy()
    values = [x / 4 for x in range(0, 200)]
    clamped = [policy.clamp(v) for v in values]
    assert all(a <= b for a, b in zip(clamped, clamped[1:]))


def test_clamp_passes_through_inside_range():
    policy = make_policy()
    assert policy.clamp(12.34) == 12.34


def test_raise_scenario_a():
    # metric 0.70, cpc 10.00 -> 10.50
    assert make_policy().raise_cpc(10.00, 0.0, 0.0) == pytest.approx(10.50)


def test_lower_scenario_b():
    # metric 0.92, cpc 10.00 -> ~9.52
    assert make_policy().lower_cpc(10.00) == pytest.approx(9.5238, abs=1e-4)


def test_raise_clamped_to_max_scenario_d():
    # 34.00 * 1.05 = 35.70 -> 35.00
    assert make_policy().raise_cpc(34.00, 0.0, 0.0) == 35.00


def test_lower_clamped_to_min_scenario_e():
    # 5.20 / 1.05 = 4.95 -> 5.15
    assert make_policy().lower_cpc(5.20) == 5.15


def test_raise_never_decreases_inside_range():
    policy = make_policy()
    for cpc in [5.15, 6.0, 10.0, 20.0, 33.0, 35.0]:
        assert policy.raise_cpc(cpc, 0.0, 0.0) >= cpc


def test_raise_above_max_comes_back_down():
    # Bid set by hand above max_bid: raising still clamps it to max_bid
    policy = make_policy()
    new_cpc = policy.raise_cpc(40.00, 0.0, 0.0)
    assert new_cpc == 35.00
    assert new_cpc < 40.00


def test_lower_never_increases_inside_range():
    policy = make_policy()
    for cpc in [5.15, 6.0, 10.0, 20.0, 35.0]:
        assert policy.lower_cpc(cpc) <= cpc


def test_lower_below_min_comes_back_up():
    policy = make_policy()
    new_cpc = policy.lower_cpc(3.00)
    assert new_cpc == 5.15
    assert new_cpc > 3.00


def test_raise_then_lower_round_trip():
    policy = make_policy()
    for cpc in [6.0, 10.0, 17.77, 30.0]:
        assert policy.lower_cpc(policy.raise_cpc(cpc, 0.0, 0.0)) == pytest.approx(cpc)
        assert policy.raise_cpc(policy.lower_cpc(cpc), 0.0, 0.0) == pytest.approx(cpc)


def test_floor_disabled_ignores_reference_cpc():
    policy = make_policy(use_reference_cpc_floor=False)
    assert policy.raise_cpc(10.00, 12.00, 20.00) == pytest.approx(10.50)


def test_floor_absolute_top_uses_top_of_page_cpc():
    policy = make_policy(use_reference_cpc_floor=True, use_absolute_top=True)
    assert policy.raise_cpc(10.00, 12.00, 20.00) == 20.00
    # Already above the floor: plain multiplication
    assert policy.raise_cpc(25.00, 12.00, 20.00) == pytest.approx(26.25)


def test_floor_impression_share_uses_first_page_cpc():
    policy = make_policy(use_reference_cpc_floor=True, use_absolute_top=False)
    assert policy.raise_cpc(10.00, 12.00, 20.00) == 12.00


def test_floor_never_below_top_of_page_cpc():
    policy = make_policy(use_reference_cpc_floor=True, use_absolute_top=True)
    for cpc in [5.15, 8.0, 14.0, 30.0]:
        assert policy.raise_cpc(cpc, 3.0, 15.0) >= 15.0


def test_floor_above_max_bid_is_clamped():
    # Top of page CPC above max_bid: max_bid wins
    policy = make_policy(use_reference_cpc_floor=True, use_absolute_top=True)
    new_cpc = policy.raise_cpc(10.00, 12.00, 50.00)
    assert new_cpc == 35.00
    assert new_cpc < 50.00


def test_lower_ignores_reference_floor():
    policy = make_policy(use_reference_cpc_floor=True, use_absolute_top=True)
    assert policy.lower_cpc(21.00) == pytest.approx(20.00)


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
