"""Tests for the blocking overlay rules"""

from types import SimpleNamespace

import pytest

from app.engine.blocking import (
    block_covers,
    blocks_overlap,
    check_block_conflict,
    check_slot_blocked,
    find_covering_block,
)
from app.engine.errors import BlockConflict, SlotBlocked
from app.engine.types import BlockMealPeriod, BlockReason, MealPeriod


def make_block(meal_period, reason=BlockReason.ORDINARY_GENERAL_MEETING):
    return SimpleNamespace(meal_period=BlockMealPeriod(meal_period), reason=reason)


@pytest.mark.parametrize(
    "block_period,meal_period,expected",
    [
        ("both", "midday", True),
        ("both", "evening", True),
        ("midday", "midday", True),
        ("midday", "evening", False),
        ("evening", "midday", False),
    ],
)
def test_block_coverage(block_period, meal_period, expected):
    assert block_covers(block_period, MealPeriod(meal_period)) is expected


@pytest.mark.parametrize(
    "first,second,expected",
    [
        ("both", "midday", True),
        ("evening", "both", True),
        ("both", "both", True),
        ("midday", "midday", True),
        ("midday", "evening", False),
    ],
)
def test_block_overlap(first, second, expected):
    assert blocks_overlap(first, second) is expected


def test_new_block_overlapping_existing_is_rejected_with_reason():
    existing = [make_block("both", BlockReason.EXTRAORDINARY_GENERAL_MEETING)]

    with pytest.raises(BlockConflict) as exc_info:
        check_block_conflict(existing, BlockMealPeriod.EVENING)

    assert exc_info.value.details["existing_reason"] == "extraordinary_general_meeting"
    assert exc_info.value.details["existing_meal_period"] == "both"


def test_complementary_blocks_are_allowed():
    check_block_conflict([make_block("midday")], BlockMealPeriod.EVENING)


def test_slot_blocked_surfaces_reason():
    blocks = [make_block("evening"), make_block("midday", BlockReason.EXTRAORDINARY_GENERAL_MEETING)]

    assert find_covering_block(blocks, MealPeriod.MIDDAY) is blocks[1]
    with pytest.raises(SlotBlocked) as exc_info:
        check_slot_blocked(blocks, MealPeriod.MIDDAY)

    assert exc_info.value.details["reason"] == "extraordinary_general_meeting"


def test_unblocked_meal_period_passes():
    check_slot_blocked([make_block("evening")], MealPeriod.MIDDAY)
