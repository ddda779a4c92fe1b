from leadfunnel.services_metrics import pct_or_zero, ratio_or_none, ratio_or_zero


def test_ratio_or_none_guards_empty_denominator():
    assert ratio_or_none(3, 0) is None
    assert ratio_or_none(3, -1) is None
    assert ratio_or_none(3, 2) == 1.5
    assert ratio_or_none(10, 3, 1) == 3.3


def test_zero_fallbacks_and_rounding():
    assert ratio_or_zero(100, 0) == 0.0
    assert ratio_or_zero(1000, 3) == 333.33
    assert pct_or_zero(1, 0) == 0.0
    assert pct_or_zero(2, 3) == 66.7
