"""Unit tests for raw input normalization"""

import pytest
from credit_quoter.domain.models import RateOverride
from credit_quoter.domain.normalizer import (
    RawLoanInput,
    RawOverride,
    normalize,
    normalize_override,
    normalize_request,
    parse_amount,
    parse_term,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("250000", 250000.0),
        ("$250,000.50", 250000.5),
        ("12.5%", 12.5),
        ("1.2.3", 1.23),
        ("-500", -500.0),
        (" 36 ", 36.0),
        (42, 42.0),
        (0.5, 0.5),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", ".", True, float("nan"), float("inf"), "9" * 400])
def test_parse_amount_blank_or_garbage(raw):
    assert parse_amount(raw) is None


def test_parse_term_truncates():
    assert parse_term("36") == 36
    assert parse_term(48.9) == 48
    assert parse_term("") is None


def test_percentage_drives_amount():
    """Default mode: amount derived from percentage"""
    request = normalize_request(
        RawLoanInput(vehicle_value="300,000", down_payment_percentage="20", term_months="36")
    )

    assert request.vehicle_value == 300_000.0
    assert request.down_payment_percentage == 20.0
    assert request.down_payment_amount == pytest.approx(60_000.0)
    assert request.financing_amount == pytest.approx(240_000.0)
    assert request.term_months == 36


def test_amount_drives_percentage_when_edited_last():
    request = normalize_request(
        RawLoanInput(
            vehicle_value=300_000,
            down_payment_percentage=20,
            down_payment_amount="75000",
            last_edited="amount",
        )
    )

    assert request.down_payment_amount == 75_000.0
    assert request.down_payment_percentage == 25.0


def test_derived_percentage_is_rounded_to_two_decimals():
    request = normalize_request(
        RawLoanInput(vehicle_value=300_000, down_payment_amount=10_000, last_edited="amount")
    )

    assert request.down_payment_percentage == 3.33


def test_amount_mode_with_zero_value_gives_zero_percentage():
    request = normalize_request(RawLoanInput(down_payment_amount=5_000, last_edited="amount"))

    assert request.vehicle_value == 0.0
    assert request.down_payment_percentage == 0.0


def test_vehicle_value_sums_listed_prices():
    """Multi-vehicle quote: value is the total of the listed prices"""
    request = normalize_request(
        RawLoanInput(vehicle_prices=["150,000", 100_000, ""], down_payment_percentage=10)
    )

    assert request.vehicle_value == 250_000.0
    assert request.down_payment_amount == pytest.approx(25_000.0)


def test_missing_down_payment_defaults_to_twenty_percent():
    request = normalize_request(RawLoanInput(vehicle_value=200_000))

    assert request.down_payment_percentage == 20.0
    assert request.down_payment_amount == pytest.approx(40_000.0)


def test_only_amount_given_in_percentage_mode():
    request = normalize_request(RawLoanInput(vehicle_value=200_000, down_payment_amount=50_000))

    assert request.down_payment_amount == 50_000.0
    assert request.down_payment_percentage == 25.0


def test_out_of_range_values_are_not_clamped():
    """Validation reports them; normalization leaves them alone"""
    request = normalize_request(RawLoanInput(vehicle_value=100_000, down_payment_percentage=120))

    assert request.down_payment_percentage == 120.0
    assert request.down_payment_amount == pytest.approx(120_000.0)
    assert request.financing_amount < 0


def test_blank_term_is_not_chosen():
    request = normalize_request(RawLoanInput(vehicle_value=100_000, term_months=""))

    assert request.term_months == 0


def test_disabled_toggles_drop_values():
    override = normalize_override(
        RawOverride(use_custom_rate=False, custom_rate="9.5", use_custom_cat=False, custom_cat="12")
    )

    assert override is None


def test_enabled_rate_override():
    override = normalize_override(RawOverride(use_custom_rate=True, custom_rate="9.5%"))

    assert override == RateOverride(nominal_annual_rate=9.5)


def test_override_amounts_and_term():
    override = normalize_override(
        RawOverride(term_months="48", down_payment_amount="$50,000", financing_amount="")
    )

    assert override.term_months == 48
    assert override.down_payment_amount == 50_000.0
    assert override.financing_amount is None


def test_normalize_keeps_only_effective_overrides():
    normalized = normalize(
        RawLoanInput(vehicle_value=300_000, term_months=36),
        {
            1: RawOverride(use_custom_rate=True, custom_rate=10),
            2: RawOverride(custom_rate=10),
        },
    )

    assert list(normalized.overrides) == [1]
    assert normalized.request.term_months == 36
