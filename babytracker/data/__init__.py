# __init__.py
from babytracker.data.emojis import EMOJIS, random_emoji

__all__ = [
    "EMOJIS",
    "random_emoji",
]
