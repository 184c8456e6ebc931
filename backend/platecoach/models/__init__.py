from .food_log import FoodLog
