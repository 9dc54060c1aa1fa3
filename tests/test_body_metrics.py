import pytest

from calcount.services.body_metrics import (
    bmi_category,
    calculate_bmi,
    calculate_bmr,
    calculate_tdee,
    recommend_goals,
    round_half_up,
    split_macros,
)


class TestWorkedExample:
    """175 cm, 75 kg, 28 years, male, moderate activity, maintain."""

    def test_bmr_and_tdee(self):
        bmr = calculate_bmr(75, 175, 28, "male")
        assert bmr == pytest.approx(1708.75)
        assert calculate_tdee(bmr, "moderate") == pytest.approx(2648.5625)

    def test_recommendation(self):
        rec = recommend_goals(175, 75, 28, "male", "moderate", "maintain")

        assert rec.bmi == 24.5
        assert rec.bmi_category == "Normal weight"
        assert rec.bmr == pytest.approx(1708.75)
        assert rec.tdee == pytest.approx(2648.56)
        assert rec.daily_calories == 2649
        assert rec.macros.protein_g == 199
        assert rec.macros.carbs_g == 298
        assert rec.macros.fats_g == 74


class TestBmr:
    def test_female_constant(self):
        assert calculate_bmr(75, 175, 28, "female") == pytest.approx(1542.75)

    def test_other_uses_female_constant(self):
        assert calculate_bmr(75, 175, 28, "other") == calculate_bmr(75, 175, 28, "female")

    @pytest.mark.parametrize("weight, height, age", [(0, 175, 28), (75, -1, 28), (75, 175, 0)])
    def test_non_positive_inputs(self, weight, height, age):
        with pytest.raises(ValueError, match="must be a positive number"):
            calculate_bmr(weight, height, age, "male")


class TestTdee:
    @pytest.mark.parametrize(
        "level, multiplier",
        [
            ("sedentary", 1.2),
            ("light", 1.375),
            ("moderate", 1.55),
            ("active", 1.725),
            ("veryActive", 1.9),
            ("couch", 1.55),
        ],
    )
    def test_multipliers(self, level, multiplier):
        assert calculate_tdee(1000, level) == pytest.approx(1000 * multiplier)


class TestGoals:
    def test_lose(self):
        rec = recommend_goals(175, 75, 28, "male", "moderate", "lose")
        assert rec.daily_calories == 2251
        assert (rec.macros.protein_g, rec.macros.carbs_g, rec.macros.fats_g) == (197, 225, 63)

    def test_gain(self):
        rec = recommend_goals(175, 75, 28, "male", "moderate", "gain")
        assert rec.daily_calories == 2913
        assert (rec.macros.protein_g, rec.macros.carbs_g, rec.macros.fats_g) == (219, 364, 65)

    def test_unknown_goal_is_maintain(self):
        rec = recommend_goals(175, 75, 28, "male", "moderate", "bulk")
        assert rec.goal == "maintain"
        assert rec.daily_calories == 2649


class TestBmi:
    def test_value(self):
        assert calculate_bmi(75, 175) == pytest.approx(24.49, abs=0.01)

    @pytest.mark.parametrize(
        "bmi, category",
        [
            (18.4, "Underweight"),
            (18.5, "Normal weight"),
            (24.9, "Normal weight"),
            (25.0, "Overweight"),
            (29.9, "Overweight"),
            (30.0, "Obese"),
        ],
    )
    def test_categories(self, bmi, category):
        assert bmi_category(bmi) == category

    def test_category_follows_rounded_value(self):
        # 62.4 / (1.58 * 1.58) = 24.996, reported as 25.0
        rec = recommend_goals(158, 62.4, 30, "female", "moderate")
        assert rec.bmi == 25.0
        assert rec.bmi_category == "Overweight"

    def test_zero_height(self):
        with pytest.raises(ValueError):
            calculate_bmi(75, 0)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_split_macros_of_2000():
    macros = split_macros(2000, "maintain")
    assert (macros.protein_g, macros.carbs_g, macros.fats_g) == (150, 225, 56)
