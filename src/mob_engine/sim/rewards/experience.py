"""Experience curves: kill experience, the /con brackets, and levelling.

Kill experience is an exponential function of the creature's level,
scaled by a multiplier keyed to the level delta bracket:

==============  ==============  ==========
delta           con level       multiplier
==============  ==============  ==========
<= -10          trivial         10%
-9 .. -5        easy            10%
-4 .. -3        weak            40%
-2 .. -1        decent          75%
0               even            100%
1 .. 2          tough           110%
3 .. 4          very tough      120%
>= 5            impossible      125%
==============  ==============  ==========

The multiplier never decreases as the delta grows; the bonus for
stronger creatures grows by smaller steps than the penalty for weaker
ones, and anything five or more levels below the player sits at the
10% floor.
"""

from __future__ import annotations

import math
from enum import Enum

EXPERIENCE_GROWTH = 1.2
LEVEL_CURVE_BASE = 200
LEVEL_CURVE_GROWTH = 1.8
MAX_LEVEL = 50


class ConLevel(str, Enum):
    """How dangerous a creature looks relative to the player."""

    TRIVIAL = "trivial"
    EASY = "easy"
    WEAK = "weak"
    DECENT = "decent"
    EVEN = "even"
    TOUGH = "tough"
    VERY_TOUGH = "very_tough"
    IMPOSSIBLE = "impossible"


# Percent, kept integral so bracket maths stays exact.
_XP_PERCENT: dict[ConLevel, int] = {
    ConLevel.TRIVIAL: 10,
    ConLevel.EASY: 10,
    ConLevel.WEAK: 40,
    ConLevel.DECENT: 75,
    ConLevel.EVEN: 100,
    ConLevel.TOUGH: 110,
    ConLevel.VERY_TOUGH: 120,
    ConLevel.IMPOSSIBLE: 125,
}

XP_FLOOR_PERCENT = _XP_PERCENT[ConLevel.EASY]


def consider(creature_level: int, player_level: int) -> ConLevel:
    """Classify a creature by its level relative to the player."""
    delta = creature_level - player_level
    if delta <= -10:
        return ConLevel.TRIVIAL
    if delta <= -5:
        return ConLevel.EASY
    if delta <= -3:
        return ConLevel.WEAK
    if delta <= -1:
        return ConLevel.DECENT
    if delta == 0:
        return ConLevel.EVEN
    if delta <= 2:
        return ConLevel.TOUGH
    if delta <= 4:
        return ConLevel.VERY_TOUGH
    return ConLevel.IMPOSSIBLE


def experience_percent(creature_level: int, player_level: int) -> int:
    """Multiplier (in percent) for a kill at this level delta."""
    return _XP_PERCENT[consider(creature_level, player_level)]


def base_experience(level: int, xp_base: int) -> int:
    """Full experience value of a creature at *level*."""
    return math.floor(xp_base * EXPERIENCE_GROWTH ** (max(1, level) - 1))


def experience_for_kill(
    creature_level: int,
    player_level: int,
    xp_base: int,
    zone_modifier: float = 1.0,
) -> int:
    """Experience awarded for one kill.

    Never zero when the creature is worth anything at all.
    """
    base = base_experience(creature_level, xp_base)
    if base <= 0:
        return 0
    scaled = base * experience_percent(creature_level, player_level) / 100 * zone_modifier
    return max(1, math.floor(scaled))


# ---------------------------------------------------------------------------
# Levelling
# ---------------------------------------------------------------------------

def experience_to_next_level(level: int) -> int:
    """Experience needed to go from *level* to *level* + 1."""
    return math.floor(LEVEL_CURVE_BASE * LEVEL_CURVE_GROWTH ** (level - 1))


def level_for_experience(experience: int) -> int:
    """Highest level reachable with *experience* cumulative experience."""
    level = 1
    threshold = 0
    while level < MAX_LEVEL:
        threshold += experience_to_next_level(level)
        if experience < threshold:
            break
        level += 1
    return level
