from calcount.db.base import Base

# Model imports so that Alembic and create_all see every table
from calcount.models.food_entry import FoodEntry  # noqa
from calcount.models.custom_food import CustomFood  # noqa
from calcount.models.daily_summary import DailySummary  # noqa
from calcount.models.user_goals import UserGoals  # noqa
