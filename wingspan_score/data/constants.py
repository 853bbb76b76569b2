"""Scoring constants for Wingspan games."""
from __future__ import annotations

MAX_PLAYERS = 5
MIN_PLAYERS = 1

ROUNDS_PER_GAME = 4

SCORING_CATEGORIES = (
    "bird_cards",
    "bonus_cards",
    "round_goals",
    "eggs",
    "cached_food",
    "tucked_cards",
)

# Oceania adds nectar majorities on top of the base categories.
ALL_SCORING_CATEGORIES = SCORING_CATEGORIES + ("nectar",)

# Competitive (green side) goal points by player count, indexed by placement - 1.
COMPETITIVE_GOAL_POINTS = {
    2: (4, 1),
    3: (4, 1, 0),
    4: (4, 2, 1, 0),
    5: (5, 2, 1, 0, 0),
}
COMPETITIVE_FALLBACK_POINTS = (4, 1, 0)

# Casual (blue side): one point per item, capped.
CASUAL_GOAL_MAX_POINTS = 5
ROUND_GOAL_MAX_POINTS = 5

NECTAR_FIRST_PLACE_VP = 5
NECTAR_SECOND_PLACE_VP = 2

HABITATS = ("forest", "grassland", "wetland")

MAX_SCORE_VALUE = 999
PLAYER_NAME_MIN_LENGTH = 2
PLAYER_NAME_MAX_LENGTH = 30

CATEGORY_INFO = {
    "bird_cards": ("Bird Cards", "Sum of face value points on all played birds", None),
    "bonus_cards": ("Bonus Cards", "Points from completed bonus card objectives", None),
    "round_goals": ("Round Goals", "Points earned from end-of-round goals", None),
    "eggs": ("Eggs", "One point per egg on bird cards", 1),
    "cached_food": ("Cached Food", "One point per food token stored on birds", 1),
    "tucked_cards": ("Tucked Cards", "One point per card tucked under birds", 1),
    "nectar": ("Nectar", "Majority points for nectar spent in each habitat", None),
}

TIEBREAKER_INFO = {
    "primary": "Most unused food tokens",
    "secondary": "Shared victory",
}

DEFAULT_AVATAR_COLORS = (
    "#5B8C7B",
    "#4A7C6F",
    "#C4A962",
    "#8B6B4A",
    "#7A9B8E",
    "#C75D4A",
    "#6B8E9B",
    "#9B7A6B",
    "#7B8C5B",
    "#6B7A9B",
)
