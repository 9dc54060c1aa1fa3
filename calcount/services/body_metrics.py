"""
BMI / BMR / TDEE calculator and macro split.

Pure functions, no storage. Heights are in cm, weights in kg.
"""
import math
from dataclasses import dataclass

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,  # little or no exercise
    "light": 1.375,  # 1-3 days/week
    "moderate": 1.55,  # 3-5 days/week
    "active": 1.725,  # 6-7 days/week
    "veryActive": 1.9,  # physical job or twice a day
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55

GOAL_ADJUSTMENTS = {
    "lose": 0.85,
    "maintain": 1.0,
    "gain": 1.10,
}

# (protein, carbs, fats) share of calories
MACRO_RATIOS = {
    "lose": (0.35, 0.40, 0.25),
    "maintain": (0.30, 0.45, 0.25),
    "gain": (0.30, 0.50, 0.20),
}

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9


@dataclass(frozen=True)
class MacroSplit:
    protein_g: int
    carbs_g: int
    fats_g: int


@dataclass(frozen=True)
class GoalRecommendation:
    bmi: float
    bmi_category: str
    bmr: float
    tdee: float
    goal: str
    daily_calories: int
    macros: MacroSplit


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if value is None or value <= 0:
            raise ValueError(f"{name} must be a positive number")


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    _require_positive(weight=weight_kg, height=height_cm)
    height_m = height_cm / 100
    return weight_kg / (height_m ** 2)


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal weight"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Mifflin-St Jeor. Anything other than "male" uses the female constant."""
    _require_positive(weight=weight_kg, height=height_cm, age=age)
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender == "male":
        return base + 5
    return base - 161


def activity_multiplier(activity_level: str) -> float:
    return ACTIVITY_MULTIPLIERS.get(activity_level, DEFAULT_ACTIVITY_MULTIPLIER)


def calculate_tdee(bmr: float, activity_level: str) -> float:
    return bmr * activity_multiplier(activity_level)


def adjust_for_goal(tdee: float, goal: str) -> float:
    return tdee * GOAL_ADJUSTMENTS.get(goal, 1.0)


def split_macros(calories: float, goal: str) -> MacroSplit:
    protein_ratio, carbs_ratio, fats_ratio = MACRO_RATIOS.get(goal, MACRO_RATIOS["maintain"])
    return MacroSplit(
        protein_g=round_half_up(calories * protein_ratio / KCAL_PER_GRAM_PROTEIN),
        carbs_g=round_half_up(calories * carbs_ratio / KCAL_PER_GRAM_CARBS),
        fats_g=round_half_up(calories * fats_ratio / KCAL_PER_GRAM_FAT),
    )


def recommend_goals(
    height_cm: float,
    weight_kg: float,
    age: int,
    gender: str,
    activity_level: str,
    goal: str = "maintain",
) -> GoalRecommendation:
    """
    Full calculator pass: BMI, BMR, TDEE, goal-adjusted calories and the
    macro split of those calories. Nothing is persisted here.
    """
    bmi = calculate_bmi(weight_kg, height_cm)
    bmr = calculate_bmr(weight_kg, height_cm, age, gender)
    tdee = calculate_tdee(bmr, activity_level)
    adjusted = adjust_for_goal(tdee, goal)

    # category follows the reported (rounded) value
    rounded_bmi = round(bmi, 1)

    return GoalRecommendation(
        bmi=rounded_bmi,
        bmi_category=bmi_category(rounded_bmi),
        bmr=round(bmr, 2),
        tdee=round(tdee, 2),
        goal=goal if goal in GOAL_ADJUSTMENTS else "maintain",
        daily_calories=round_half_up(adjusted),
        macros=split_macros(adjusted, goal),
    )
