"""Stat stages -- per-battle modifiers in [-6, +6].

Positive stages multiply a stat by ``(2 + s) / 2``; negative stages by
``2 / (2 - s)``.  The mapping is monotonic, ``stage_multiplier(0) == 1`` and
inputs outside the range are clamped to the boundary.
"""

from __future__ import annotations

MIN_STAGE = -6
MAX_STAGE = 6


def clamp_stage(stage: int) -> int:
    return max(MIN_STAGE, min(MAX_STAGE, stage))


def stage_multiplier(stage: int) -> float:
    """Convert a stat stage to its stat multiplier."""
    stage = clamp_stage(stage)
    if stage == 0:
        return 1.0
    if stage > 0:
        return (2 + stage) / 2
    return 2 / (2 - stage)


def add_stages(current: int, delta: int) -> tuple[int, int]:
    """Add *delta* stages to *current*, clamped.

    Returns ``(new_stage, applied_delta)``; ``applied_delta`` is 0 when the
    stage was already at the boundary.
    """
    new_stage = clamp_stage(current + delta)
    return new_stage, new_stage - current
