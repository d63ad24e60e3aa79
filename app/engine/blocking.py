"""Administrative block overlay rules"""

from typing import Iterable, Optional

from app.engine.errors import BlockConflict, SlotBlocked
from app.engine.types import BlockMealPeriod, MealPeriod, enum_value


def block_covers(block_period: BlockMealPeriod, meal_period: MealPeriod) -> bool:
    """True when a block's coverage includes the given meal period"""
    block_period = BlockMealPeriod(block_period)
    return block_period == BlockMealPeriod.BOTH or block_period.value == enum_value(meal_period)


def blocks_overlap(first: BlockMealPeriod, second: BlockMealPeriod) -> bool:
    first, second = BlockMealPeriod(first), BlockMealPeriod(second)
    return BlockMealPeriod.BOTH in (first, second) or first == second


def check_block_conflict(existing_blocks: Iterable, meal_period: BlockMealPeriod) -> None:
    """Reject a new block whose coverage overlaps a block on the same date"""
    for block in existing_blocks:
        if blocks_overlap(block.meal_period, meal_period):
            raise BlockConflict(
                existing_reason=enum_value(block.reason),
                existing_meal_period=enum_value(block.meal_period),
            )


def find_covering_block(blocks: Iterable, meal_period: MealPeriod) -> Optional[object]:
    for block in blocks:
        if block_covers(block.meal_period, meal_period):
            return block
    return None


def check_slot_blocked(blocks: Iterable, meal_period: MealPeriod) -> None:
    """Raise SlotBlocked if any block for the date covers the meal period"""
    block = find_covering_block(blocks, meal_period)
    if block is not None:
        raise SlotBlocked(
            reason=enum_value(block.reason),
            meal_period=enum_value(block.meal_period),
        )
