# __init__.py
from babytracker.models.action import Action
from babytracker.models.baby_profile import BabyProfile
from babytracker.models.user import User
from babytracker.models.user_baby_role import UserBabyRole

__all__ = [
	"Action",
	"BabyProfile",
	"User",
	"UserBabyRole",
]
