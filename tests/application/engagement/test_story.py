"""Tests for the progress story and streak rank."""

from datetime import timedelta

import pytest

from lexivault.application.engagement import progress_story, streak_rank
from lexivault.domain.models import ItemStatus, StudyHistoryEntry, UserStats


@pytest.mark.parametrize(
    "streak,title,tier",
    [
        (0, "Initiate", 0),
        (2, "Initiate", 0),
        (3, "Bronze Mind", 1),
        (7, "Silver Mind", 2),
        (14, "Gold Mind", 3),
        (29, "Gold Mind", 3),
        (30, "Diamond Mind", 4),
        (60, "Mythic Mind", 5),
        (365, "Mythic Mind", 5),
    ],
)
def test_streak_rank(streak, title, tier):
    rank = streak_rank(streak)
    assert (rank.title, rank.tier) == (title, tier)


def test_story_for_empty_library(t0):
    story = progress_story(UserStats(joined_at=t0), [], [], t0)
    assert story[0].startswith("Your vocabulary journey begins today")
    assert "awaits its first entries" in story[1]


def test_story_mentions_first_item_and_progress(make_item, t0):
    first = make_item(term="Ephemeral", status=ItemStatus.MASTERED)
    items = [first, make_item()]
    stats = UserStats(
        joined_at=t0 - timedelta(days=10),
        first_item_id=first.id,
        mastered_count=1,
        streak=2,
        longest_streak=5,
    )
    history = [StudyHistoryEntry("2024-03-09", 4), StudyHistoryEntry("2024-03-10", 3)]

    text = "\n".join(progress_story(stats, items, history, t0))

    assert "**10 days**" in text
    assert "Ephemeral" in text
    assert "**1 words**" in text
    assert "**5-day streak**" in text
    assert "**7 reviews**" in text
    assert "over half" in text
