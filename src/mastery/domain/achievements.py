"""Achievement catalogue and level titles."""

from dataclasses import dataclass
from enum import Enum


class AchievementCategory(str, Enum):
    XP = "xp"
    TASKS = "tasks"
    FOCUS = "focus"
    STREAK = "streak"
    SPECIAL = "special"


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class Achievement:
    """
    A milestone that unlocks once its requirement is met.

    Attributes:
        requirement: Threshold compared against the category's metric
            (total XP, tasks completed, focus sessions, current streak).
            Special achievements use 1 and are matched on activity time.
        xp_reward: Bonus XP granted on unlock.
    """

    id: str
    name: str
    description: str
    category: AchievementCategory
    requirement: int
    xp_reward: int
    rarity: Rarity


ACHIEVEMENTS: tuple[Achievement, ...] = (
    # XP milestones
    Achievement("xp_100", "First Steps", "Earn your first 100 XP", AchievementCategory.XP, 100, 25, Rarity.COMMON),
    Achievement("xp_500", "Rising Scholar", "Earn 500 XP", AchievementCategory.XP, 500, 50, Rarity.COMMON),
    Achievement("xp_1000", "Knowledge Seeker", "Earn 1,000 XP", AchievementCategory.XP, 1000, 100, Rarity.RARE),
    Achievement("xp_5000", "Wisdom Master", "Earn 5,000 XP", AchievementCategory.XP, 5000, 250, Rarity.EPIC),
    Achievement("xp_10000", "Legendary Scholar", "Earn 10,000 XP", AchievementCategory.XP, 10000, 500, Rarity.LEGENDARY),
    # Task milestones
    Achievement("tasks_1", "Task Beginner", "Complete your first task", AchievementCategory.TASKS, 1, 10, Rarity.COMMON),
    Achievement("tasks_10", "Task Warrior", "Complete 10 tasks", AchievementCategory.TASKS, 10, 50, Rarity.COMMON),
    Achievement("tasks_50", "Task Champion", "Complete 50 tasks", AchievementCategory.TASKS, 50, 150, Rarity.RARE),
    Achievement("tasks_100", "Task Legend", "Complete 100 tasks", AchievementCategory.TASKS, 100, 300, Rarity.EPIC),
    # Focus session milestones
    Achievement("focus_1", "First Focus", "Complete your first focus session", AchievementCategory.FOCUS, 1, 15, Rarity.COMMON),
    Achievement("focus_10", "Focus Apprentice", "Complete 10 focus sessions", AchievementCategory.FOCUS, 10, 75, Rarity.COMMON),
    Achievement("focus_50", "Deep Focus", "Complete 50 focus sessions", AchievementCategory.FOCUS, 50, 200, Rarity.RARE),
    Achievement("focus_100", "Zen Master", "Complete 100 focus sessions", AchievementCategory.FOCUS, 100, 400, Rarity.EPIC),
    # Streak milestones
    Achievement("streak_3", "Warming Up", "Maintain a 3-day streak", AchievementCategory.STREAK, 3, 30, Rarity.COMMON),
    Achievement("streak_7", "On Fire", "Maintain a 7-day streak", AchievementCategory.STREAK, 7, 100, Rarity.RARE),
    Achievement("streak_30", "Unstoppable", "Maintain a 30-day streak", AchievementCategory.STREAK, 30, 500, Rarity.EPIC),
    Achievement("streak_100", "Eternal Flame", "Maintain a 100-day streak", AchievementCategory.STREAK, 100, 1000, Rarity.LEGENDARY),
    # Special
    Achievement("early_bird", "Early Bird", "Start studying before 7 AM", AchievementCategory.SPECIAL, 1, 50, Rarity.RARE),
    Achievement("night_owl", "Night Owl", "Study past midnight", AchievementCategory.SPECIAL, 1, 50, Rarity.RARE),
)

ACHIEVEMENTS_BY_ID: dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}


# (min_level, title), ascending
TITLES: tuple[tuple[int, str], ...] = (
    (1, "Novice"),
    (3, "Apprentice"),
    (5, "Scholar"),
    (10, "Expert"),
    (15, "Master"),
    (20, "Grandmaster"),
    (30, "Legend"),
)


def get_title(level: int) -> str:
    """Return the highest title whose minimum level is reached."""
    title = TITLES[0][1]
    for min_level, name in TITLES:
        if level >= min_level:
            title = name
    return title
