# Application Engagement Package
from .achievements import ACHIEVEMENTS, Achievement, evaluate_achievements, unlock
from .story import StreakRank, progress_story, streak_rank
from .streaks import record_history, record_review

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "StreakRank",
    "evaluate_achievements",
    "progress_story",
    "record_history",
    "record_review",
    "streak_rank",
    "unlock",
]
