"""Tests for kill experience, con brackets and levelling."""

import pytest

from mob_engine.sim.rewards.experience import (
    MAX_LEVEL,
    XP_FLOOR_PERCENT,
    ConLevel,
    base_experience,
    consider,
    experience_for_kill,
    experience_percent,
    experience_to_next_level,
    level_for_experience,
)


# ---------------------------------------------------------------------------
# consider
# ---------------------------------------------------------------------------

class TestConsider:
    @pytest.mark.parametrize(
        "creature, player, expected",
        [
            (1, 11, ConLevel.TRIVIAL),
            (1, 6, ConLevel.EASY),
            (5, 8, ConLevel.WEAK),
            (5, 6, ConLevel.DECENT),
            (5, 5, ConLevel.EVEN),
            (7, 5, ConLevel.TOUGH),
            (9, 5, ConLevel.VERY_TOUGH),
            (10, 5, ConLevel.IMPOSSIBLE),
        ],
    )
    def test_brackets(self, creature, player, expected):
        assert consider(creature, player) == expected


# ---------------------------------------------------------------------------
# Kill experience
# ---------------------------------------------------------------------------

class TestKillExperience:
    def test_base_is_exponential_in_level(self):
        assert base_experience(1, 10) == 10
        assert base_experience(2, 10) == 12
        assert base_experience(3, 10) == 14
        assert base_experience(10, 100) == 515

    def test_same_level_is_full_base(self):
        for level in range(1, 30):
            assert experience_for_kill(level, level, 100) == base_experience(level, 100)

    def test_five_or_more_below_is_floored(self):
        base = base_experience(10, 100)
        expected = base * XP_FLOOR_PERCENT // 100
        for player_level in (15, 16, 20, 40):
            assert experience_for_kill(10, player_level, 100) == expected

    def test_floor_is_never_zero(self):
        assert experience_for_kill(1, 50, 10) == 1

    def test_worthless_creature_gives_nothing(self):
        assert experience_for_kill(5, 5, 0) == 0

    def test_multiplier_monotonic_across_brackets(self):
        percents = [experience_percent(20 + delta, 20) for delta in range(-15, 11)]
        assert percents == sorted(percents)
        assert experience_percent(20, 20) == 100
        assert min(percents) == XP_FLOOR_PERCENT > 0

    def test_stronger_taper_is_gentler_than_weaker(self):
        gain = experience_percent(25, 20) - experience_percent(20, 20)
        loss = experience_percent(20, 20) - experience_percent(15, 20)
        assert 0 < gain < loss

    def test_zone_modifier(self):
        assert experience_for_kill(3, 3, 10, zone_modifier=1.5) == 21


# ---------------------------------------------------------------------------
# Levelling
# ---------------------------------------------------------------------------

class TestLevelling:
    def test_curve(self):
        assert experience_to_next_level(1) == 200
        assert experience_to_next_level(2) == 360

    def test_level_for_experience(self):
        assert level_for_experience(0) == 1
        assert level_for_experience(199) == 1
        assert level_for_experience(200) == 2
        assert level_for_experience(559) == 2
        assert level_for_experience(560) == 3

    def test_capped(self):
        assert level_for_experience(10 ** 30) == MAX_LEVEL
