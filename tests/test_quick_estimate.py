from decimal import Decimal

import pytest

from quote_engine.config import QuickEstimateConfig
from quote_engine.domain.errors import ConfigurationError
from quote_engine.domain.models import (
    HotelGrade,
    MealPlan,
    QuickEstimateInputs,
    SightseeingIntensity,
    TravelerCount,
)
from quote_engine.pricing.quick_estimate import (
    destination_defaults,
    estimate,
    suggest_inputs,
)


def test_four_star_dubai_for_a_couple(couple):
    """4 nights, one room, bed and breakfast, transfers, standard sightseeing."""
    inputs = QuickEstimateInputs(
        hotel_grade=HotelGrade.FOUR_STAR,
        meal_plan=MealPlan.BB,
        sightseeing_intensity=SightseeingIntensity.STANDARD,
        transfers_included=True,
        room_count=1,
    )
    result = estimate("Dubai", 4, couple, inputs)

    assert result.hotel == Decimal("30800")
    assert result.transfers == Decimal("4000")
    assert result.sightseeing == Decimal("8000")
    assert result.total == Decimal("49220")
    assert result.per_person == Decimal("24610")
    assert result.currency == "INR"
    assert result.nights == 4


def test_without_transfers_or_sightseeing(couple):
    inputs = QuickEstimateInputs(
        hotel_grade="3 Star",
        meal_plan="RO",
        sightseeing_intensity="None",
        transfers_included=False,
        room_count=2,
    )
    result = estimate("Goa", 2, couple, inputs)

    assert result.transfers == 0
    assert result.sightseeing == 0
    assert result.total == Decimal("18400")


def test_short_trips_pay_one_full_sightseeing_package():
    inputs = QuickEstimateInputs(transfers_included=False, room_count=0)
    result = estimate("", 2, TravelerCount(adults=1), inputs)
    assert result.sightseeing == Decimal("3000")


def test_long_trips_scale_sightseeing():
    inputs = QuickEstimateInputs(transfers_included=False, room_count=0)
    result = estimate("", 6, TravelerCount(adults=1), inputs)
    assert result.sightseeing == Decimal("6000")


def test_per_person_is_rounded_up():
    inputs = QuickEstimateInputs(room_count=1)
    result = estimate("", 3, TravelerCount(adults=3), inputs)
    assert result.per_person * 3 >= result.total
    assert result.per_person == result.per_person.to_integral_value()


def test_children_count_as_pax_and_infants_do_not():
    inputs = QuickEstimateInputs(
        sightseeing_intensity=SightseeingIntensity.NONE, room_count=0
    )
    with_child = estimate("", 3, TravelerCount(adults=2, children=1), inputs)
    with_infant = estimate("", 3, TravelerCount(adults=2, infants=1), inputs)

    assert with_child.transfers == Decimal("6000")
    assert with_infant.transfers == Decimal("4000")


def test_total_includes_buffer(couple):
    inputs = QuickEstimateInputs(room_count=1)
    result = estimate("Dubai", 4, couple, inputs)
    raw = result.hotel + result.transfers + result.sightseeing
    assert raw * Decimal("1.15") <= result.total < raw * Decimal("1.15") + 1


def test_custom_rate_sheet(couple):
    rates = QuickEstimateConfig(currency="USD", buffer=Decimal("1"))
    inputs = QuickEstimateInputs(
        sightseeing_intensity=SightseeingIntensity.NONE,
        transfers_included=False,
        room_count=1,
    )
    result = estimate("Dubai", 1, couple, inputs, rates=rates)
    assert result.currency == "USD"
    assert result.total == Decimal("7700")


def test_partial_rate_sheet_keeps_default_entries(couple):
    rates = QuickEstimateConfig(base_rates={"4 Star": Decimal("7500")})
    assert rates.base_rates["4 Star"] == Decimal("7500")
    assert rates.base_rates["Luxury"] == Decimal("35000")

    inputs = QuickEstimateInputs(
        sightseeing_intensity=SightseeingIntensity.NONE,
        transfers_included=False,
        room_count=1,
    )
    assert estimate("Dubai", 1, couple, inputs, rates=rates).hotel == Decimal("8250")


def test_missing_rate_sheet_entry(couple):
    rates = QuickEstimateConfig()
    del rates.base_rates["Luxury"]
    inputs = QuickEstimateInputs(hotel_grade=HotelGrade.LUXURY)
    with pytest.raises(ConfigurationError) as exc_info:
        estimate("Dubai", 3, couple, inputs, rates=rates)
    assert exc_info.value.setting_name == "base_rates"


def test_negative_nights(couple):
    with pytest.raises(ValueError):
        estimate("Dubai", -1, couple, QuickEstimateInputs())


@pytest.mark.parametrize(
    "hint, grade, meal, intensity",
    [
        ("Dubai", HotelGrade.FOUR_STAR, MealPlan.BB, SightseeingIntensity.STANDARD),
        ("Dubai Marina", HotelGrade.FOUR_STAR, MealPlan.BB, SightseeingIntensity.STANDARD),
        ("MALDIVES", HotelGrade.FIVE_STAR, MealPlan.AI, SightseeingIntensity.NONE),
        ("Bali", HotelGrade.FOUR_STAR, MealPlan.BB, SightseeingIntensity.STANDARD),
    ],
)
def test_destination_defaults(hint, grade, meal, intensity):
    defaults = destination_defaults(hint)
    assert defaults.hotel_grade is grade
    assert defaults.meal_plan is meal
    assert defaults.sightseeing_intensity is intensity
    assert defaults.transfers_included


def test_suggest_inputs_derives_rooms():
    inputs = suggest_inputs("Maldives", TravelerCount(adults=2, children=3))
    assert inputs.room_count == 2
    assert inputs.meal_plan is MealPlan.AI
