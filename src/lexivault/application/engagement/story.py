"""
Progress narrative and streak rank.

Turns the aggregate stats into short, human-readable paragraphs. Bold markers
(``**``) are left for the presentation layer to render.
"""

from dataclasses import dataclass
from datetime import datetime

from lexivault.domain.models import Item, StudyHistoryEntry, UserStats

from .streaks import total_reviews


@dataclass(frozen=True)
class StreakRank:
    title: str
    tier: int


# Highest threshold first
_RANKS = (
    (60, StreakRank("Mythic Mind", 5)),
    (30, StreakRank("Diamond Mind", 4)),
    (14, StreakRank("Gold Mind", 3)),
    (7, StreakRank("Silver Mind", 2)),
    (3, StreakRank("Bronze Mind", 1)),
)

INITIATE = StreakRank("Initiate", 0)


def streak_rank(streak: int) -> StreakRank:
    for threshold, rank in _RANKS:
        if streak >= threshold:
            return rank
    return INITIATE


def progress_story(
    stats: UserStats,
    items: list[Item],
    history: list[StudyHistoryEntry],
    now: datetime,
) -> list[str]:
    """
    Build the learner's progress narrative.

    Args:
        stats: Current aggregate.
        items: Live item collection.
        history: Study history entries.
        now: Reference instant for "days since joining".

    Returns:
        Ordered list of paragraphs.
    """
    story: list[str] = []
    days_since_join = (now - stats.joined_at).days if stats.joined_at else 0
    total_items = len(items)
    mastered = stats.mastered_count

    # Opening
    if days_since_join == 0:
        story.append("Your vocabulary journey begins today. A fresh slate for a mind eager to grow.")
    elif days_since_join == 1:
        story.append("It's day two of your journey. A new habit is taking root.")
    else:
        story.append(f"You've been diligently building your vocabulary for **{days_since_join} days**.")

    first_item = next((i for i in items if i.id == stats.first_item_id), None)
    if first_item is not None:
        story.append(
            f'It all started with "**{first_item.term}**," your very first flashcard. '
            "That single step marked the beginning of your expanded knowledge."
        )
    elif total_items > 0:
        story.append(
            f"You've already added {total_items} words to your collection, "
            "each one a step forward in your learning."
        )
    else:
        story.append("Your library awaits its first entries. What new words will you conquer?")

    if mastered > 0:
        story.append(f"You've successfully mastered **{mastered} words**!")

    if stats.streak > 0:
        story.append(f"Your current streak stands at **{stats.streak} days**.")

    if stats.longest_streak > stats.streak:
        story.append(
            f"Your personal best, a **{stats.longest_streak}-day streak**, shows your potential. "
            "Each day is a chance to surpass that record."
        )
    elif stats.longest_streak == stats.streak > 0 and days_since_join > stats.streak:
        story.append(
            f"You're currently matching your longest streak of **{stats.longest_streak} days**!"
        )

    reviews = total_reviews(history)
    if reviews > 0:
        story.append(f"You've completed **{reviews} reviews** across your journey.")

    if total_items > 0 and mastered > 0:
        rate = mastered / total_items * 100
        if rate >= 75:
            story.append(f"With **{rate:.0f}% of your words mastered**, you're becoming an expert.")
        elif rate >= 50:
            story.append(f"You've mastered over half of your library ({rate:.0f}%).")
        else:
            story.append(f"You're steadily progressing with **{rate:.0f}% of your words mastered**.")

    story.append("Keep exploring, keep reviewing, and keep forging your memory.")
    return story
