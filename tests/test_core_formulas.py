"""
Unit tests for the core formulas: one-rep max math and the plate solver.
"""

import pytest

from tb3_planner.core.models import (
    Plate,
    PlateInventory,
    PlateLoad,
    default_barbell_inventory,
    default_belt_inventory,
)
from tb3_planner.core.one_rep_max import (
    calculate_one_rep_max,
    calculate_percentage_table,
    calculate_percentage_weight,
    calculate_training_max,
    calculate_working_max,
    round_weight,
)
from tb3_planner.core.plates import (
    calculate_barbell_plates,
    calculate_belt_plates,
    format_weight,
)


class TestOneRepMax:
    """Tests for the Epley estimate."""

    def test_epley_five_reps(self):
        """225 x 5 → 225 * (1 + 5/30) = 262.5."""
        assert calculate_one_rep_max(225, 5) == pytest.approx(262.5)

    def test_single_rep_is_exact(self):
        """A single is the max itself."""
        assert calculate_one_rep_max(315, 1) == 315

    def test_non_positive_inputs_give_zero(self):
        assert calculate_one_rep_max(0, 5) == 0
        assert calculate_one_rep_max(-100, 5) == 0
        assert calculate_one_rep_max(225, 0) == 0

    def test_epley_reference_values(self):
        assert calculate_one_rep_max(200, 5) == pytest.approx(233.33, abs=0.01)
        assert calculate_one_rep_max(135, 10) == pytest.approx(180)

    def test_more_reps_means_higher_max(self):
        assert calculate_one_rep_max(200, 8) > calculate_one_rep_max(200, 3)


class TestTrainingMax:
    """Tests for training / working max."""

    def test_training_max_is_ninety_percent(self):
        assert calculate_training_max(300) == pytest.approx(270)

    def test_working_max_training(self):
        assert calculate_working_max(300, "training") == pytest.approx(270)

    def test_working_max_true(self):
        assert calculate_working_max(300, "true") == 300


class TestRounding:
    """Tests for round_weight (half-up)."""

    def test_rounds_to_nearest_five(self):
        assert round_weight(212, 5) == 210
        assert round_weight(213, 5) == 215

    def test_half_rounds_up(self):
        """212.5 is halfway between 210 and 215 and must go up."""
        assert round_weight(212.5, 5) == 215
        assert round_weight(1.25, 2.5) == 2.5

    def test_quarter_plate_increment(self):
        assert round_weight(212, 2.5) == 212.5

    def test_zero_stays_zero(self):
        assert round_weight(0, 5) == 0
        assert round_weight(0, 2.5) == 0

    def test_non_positive_increment_returns_weight(self):
        assert round_weight(212.3, 0) == 212.3

    def test_result_is_multiple_of_increment(self):
        for w in (101.3, 187.6, 233.33, 49.99):
            r = round_weight(w, 2.5)
            assert (r / 2.5) == pytest.approx(round(r / 2.5))


class TestPercentages:
    """Tests for percentage weights and the lookup table."""

    def test_percentage_weight(self):
        """70% of 300 = 210."""
        assert calculate_percentage_weight(300, 70, 5) == 210

    def test_percentage_weight_rounds(self):
        """85% of 262.5 = 223.125 → 225 at increment 5."""
        assert calculate_percentage_weight(262.5, 85, 5) == 225

    def test_table_has_eight_rows(self):
        table = calculate_percentage_table(300, 5)
        assert [row["percentage"] for row in table] == [65, 70, 75, 80, 85, 90, 95, 100]

    def test_table_weights(self):
        table = calculate_percentage_table(300, 5)
        assert table[0]["weight"] == 195
        assert table[-1]["weight"] == 300

    @pytest.mark.parametrize("increment", [2.5, 5])
    def test_zero_max_table_is_all_zero(self, increment):
        table = calculate_percentage_table(0, increment)
        assert len(table) == 8
        assert all(row["weight"] == 0 for row in table)

    def test_table_is_monotonic(self):
        weights = [row["weight"] for row in calculate_percentage_table(287.5, 2.5)]
        assert weights == sorted(weights)


class TestBarbellGuards:
    """Guard conditions of the barbell solver."""

    def test_zero_weight_not_achievable(self):
        result = calculate_barbell_plates(0, 45, default_barbell_inventory())
        assert not result.achievable
        assert result.display_text == "Not achievable"

    def test_negative_weight_not_achievable(self):
        assert not calculate_barbell_plates(-10, 45, default_barbell_inventory()).achievable

    def test_bar_only(self):
        result = calculate_barbell_plates(45, 45, default_barbell_inventory())
        assert result.achievable
        assert result.is_bar_only
        assert result.display_text == "Bar only"
        assert result.plates == []

    def test_below_bar(self):
        result = calculate_barbell_plates(30, 45, default_barbell_inventory())
        assert not result.achievable
        assert result.is_below_bar


class TestBarbellSolver:
    """Plate selection on the barbell."""

    def test_135_is_one_45_per_side(self):
        result = calculate_barbell_plates(135, 45, default_barbell_inventory())
        assert result.achievable
        assert result.plates == [PlateLoad(45, 1)]
        assert result.display_text == "45 per side"

    def test_225_is_two_45s_per_side(self):
        result = calculate_barbell_plates(225, 45, default_barbell_inventory())
        assert result.plates == [PlateLoad(45, 2)]
        assert result.display_text == "2x45 per side"

    def test_185_mixed_plates(self):
        result = calculate_barbell_plates(185, 45, default_barbell_inventory())
        assert result.plates == [PlateLoad(45, 1), PlateLoad(25, 1)]
        assert result.display_text == "45 + 25 per side"

    def test_fractional_202_5(self):
        """78.75 per side = 45 + 25 + 5 + 2.5 + 1.25."""
        result = calculate_barbell_plates(202.5, 45, default_barbell_inventory())
        assert result.achievable
        for load in (PlateLoad(45, 1), PlateLoad(25, 1), PlateLoad(5, 1), PlateLoad(2.5, 1), PlateLoad(1.25, 1)):
            assert load in result.plates

    def test_fractional_162_5(self):
        """58.75 per side = 45 + 10 + 2.5 + 1.25."""
        assert calculate_barbell_plates(162.5, 45, default_barbell_inventory()).achievable

    def test_plates_sum_to_target(self):
        """Sum of plates * 2 + bar equals the target for achievable loads."""
        inventory = default_barbell_inventory()
        for target in range(50, 500, 5):
            result = calculate_barbell_plates(target, 45, inventory)
            if result.achievable and not result.is_bar_only:
                side = sum(p.weight * p.count for p in result.plates)
                assert side * 2 + 45 == pytest.approx(target)

    def test_respects_available_counts(self):
        inventory = default_barbell_inventory()
        stock = {p.weight: p.available for p in inventory.plates}
        for target in range(50, 500, 5):
            for load in calculate_barbell_plates(target, 45, inventory).plates:
                assert load.count <= stock[load.weight]

    def test_exhaustive_search_when_greedy_misses(self):
        """50 per side from 35x1 + 25x2: greedy takes the 35 and stalls; 2x25 works."""
        inventory = PlateInventory([Plate(35, 1), Plate(25, 2)])
        result = calculate_barbell_plates(145, 45, inventory)
        assert result.achievable
        assert result.plates == [PlateLoad(25, 2)]

    def test_not_achievable_reports_nearest(self):
        """Only 45s: 50 per side is impossible; nearest is 45 per side = 135."""
        inventory = PlateInventory([Plate(45, 4)])
        assert calculate_barbell_plates(135, 45, inventory).achievable
        result = calculate_barbell_plates(145, 45, inventory)
        assert not result.achievable
        assert result.nearest_achievable == 135
        assert result.display_text == "Not achievable (nearest: 135)"

    def test_nearest_never_exceeds_target(self):
        inventory = PlateInventory([Plate(45, 4), Plate(25, 1)])
        result = calculate_barbell_plates(200, 45, inventory)
        assert not result.achievable
        assert result.nearest_achievable == 185

    def test_sub_cent_miss_not_achievable(self):
        """2.504 is not 2.5; rounding to hundredths must not hide the gap."""
        result = calculate_belt_plates(2.504, PlateInventory([Plate(2.5, 1)]))
        assert not result.achievable
        assert result.nearest_achievable == pytest.approx(2.5)

    def test_sub_cent_short_target_nearest_stays_below(self):
        result = calculate_barbell_plates(49.992, 45, PlateInventory([Plate(2.5, 2)]))
        assert not result.achievable
        assert result.nearest_achievable <= 49.992

    def test_empty_inventory(self):
        result = calculate_barbell_plates(135, 45, PlateInventory([]))
        assert not result.achievable
        assert result.nearest_achievable == 45

    def test_zero_stock_plates_ignored(self):
        inventory = PlateInventory([Plate(45, 0), Plate(25, 2)])
        result = calculate_barbell_plates(145, 45, inventory)
        assert result.plates == [PlateLoad(25, 2)]


class TestBeltSolver:
    """Plate selection on the dip belt."""

    def test_zero_is_bodyweight_only(self):
        result = calculate_belt_plates(0, default_belt_inventory())
        assert result.achievable
        assert result.is_bodyweight_only
        assert result.display_text == "Bodyweight only"

    def test_negative_is_bodyweight_only(self):
        result = calculate_belt_plates(-5, default_belt_inventory())
        assert result.achievable
        assert result.is_bodyweight_only

    def test_one_45(self):
        result = calculate_belt_plates(45, default_belt_inventory())
        assert result.plates == [PlateLoad(45, 1)]
        assert result.display_text == "45 on belt"

    def test_50_is_45_plus_5(self):
        result = calculate_belt_plates(50, default_belt_inventory())
        assert result.plates == [PlateLoad(45, 1), PlateLoad(5, 1)]
        assert result.display_text == "45 + 5 on belt"

    def test_impossible_reports_nearest(self):
        result = calculate_belt_plates(50, PlateInventory([Plate(45, 1)]))
        assert not result.achievable
        assert result.nearest_achievable == 45


class TestFormatting:
    def test_format_weight(self):
        assert format_weight(45.0) == "45"
        assert format_weight(2.5) == "2.5"
        assert format_weight(1.25) == "1.25"


class TestInventoryModel:
    def test_duplicate_weights_rejected(self):
        with pytest.raises(ValueError):
            PlateInventory([Plate(45, 2), Plate(45, 1)])

    def test_default_inventories_are_fresh_copies(self):
        a = default_barbell_inventory()
        a.plates[0].available = 0
        assert default_barbell_inventory().plates[0].available == 4
