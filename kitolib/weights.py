"""Fixing the number of joint weights per vertex."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class JointWeight:
    joint_id: int
    weight: float


def fill_weights(
    joint_ids: Sequence[int], weights: Sequence[float], max_joint_weights: int
) -> tuple[list[int], list[float]]:
    """Return exactly ``max_joint_weights`` joint ids and weights.

    Short lists are padded with zero ids and zero weights. Long lists keep
    only the strongest weights, normalized to sum to one.
    """
    if len(joint_ids) != len(weights):
        raise ValueError(
            f"got {len(joint_ids)} joint ids but {len(weights)} weights"
        )

    if len(joint_ids) <= max_joint_weights:
        padding = max_joint_weights - len(joint_ids)
        return list(joint_ids) + [0] * padding, list(weights) + [0.0] * padding

    strongest = sorted(
        (JointWeight(j, w) for j, w in zip(joint_ids, weights)),
        key=lambda jw: jw.weight,
        reverse=True,
    )[:max_joint_weights]
    normalized = normalize_weights(strongest)
    return [jw.joint_id for jw in normalized], [jw.weight for jw in normalized]


def normalize_weights(joint_weights: Iterable[JointWeight]) -> list[JointWeight]:
    """Scale the weights so that they sum to one."""
    items = list(joint_weights)
    total = sum(jw.weight for jw in items)
    return [JointWeight(jw.joint_id, jw.weight / total) for jw in items]