"""Skeletal animation playback with key frame interpolation and blending."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import Protocol

from kitolib.modelspec import AnimationSpec, JointSpec, JointTransform, KeyFrame
from kitolib.vecmath import Mat4, Quat, Vec3, q_interpolate

_log = logging.getLogger(__name__)

DEFAULT_BLEND_DURATION = timedelta(milliseconds=250)
_MILLISECOND = timedelta(milliseconds=1)

# what a joint missing from a pose counts as when blending
_ZERO_TRANSFORM = JointTransform(Vec3(), Quat(0.0, Vec3()), Vec3())


class AnimationState(Protocol):
    """A snapshot of an animation player's state."""

    def loop(self) -> bool: ...

    def elapsed_time(self) -> timedelta: ...

    def animation_transforms(self) -> dict[int, Mat4]: ...

    def animation_name(self) -> str: ...

    def root_joint(self) -> JointSpec: ...


def _ratio(numerator: float, denominator: float) -> float:
    """Division that follows IEEE rules for a zero denominator (0/0 counts as 0)."""
    if denominator != 0:
        return numerator / denominator
    if numerator > 0:
        return math.inf
    if numerator < 0:
        return -math.inf
    return 0.0


def _milliseconds(duration: timedelta) -> int:
    return duration // _MILLISECOND


class AnimationPlayer:
    """Plays one animation of a skeleton at a time, blending between animations."""

    def __init__(self) -> None:
        self._elapsed_time = timedelta(0)
        self._animation_transforms: dict[int, Mat4] = {}
        self._current: AnimationSpec | None = None

        self._animations: dict[str, AnimationSpec] = {}
        self._root_joint: JointSpec | None = None

        self._secondary_animation: str | None = None
        self._loop = False

        self._blend_elapsed_time = timedelta(0)
        self._blend_animation: AnimationSpec | None = None
        self._blend_duration = timedelta(0)
        self._blend_duration_so_far = timedelta(0)

    def initialize(self, animations: Mapping[str, AnimationSpec], root_joint: JointSpec) -> None:
        self._animations = dict(animations)
        self._root_joint = root_joint
        self._loop = True

    @property
    def animation_transforms(self) -> dict[int, Mat4]:
        """Model-space transforms per joint id from the last update."""
        return self._animation_transforms

    def current_animation(self) -> str:
        """The name of the animation playing, or being blended into; empty if none."""
        if self._current is None:
            return ""
        if self._blend_animation is not None:
            return self._blend_animation.name
        return self._current.name

    def _lookup(self, animation_name: str) -> AnimationSpec:
        try:
            return self._animations[animation_name]
        except KeyError:
            raise KeyError(f"failed to find animation {animation_name}") from None

    def _require_root(self) -> JointSpec:
        if self._root_joint is None:
            raise RuntimeError("the animation player has not been initialized")
        return self._root_joint

    def bind_pose_transforms(self) -> dict[int, Mat4]:
        transforms: dict[int, Mat4] = {}
        stack = [self._require_root()]
        while stack:
            joint = stack.pop()
            transforms[joint.id] = joint.full_bind_transform
            stack.extend(reversed(joint.children))
        return transforms

    def play_animation(self, animation_name: str) -> None:
        """Start an animation, blending from the current one if there is one."""
        if (
            self._blend_animation is None
            and self._current is not None
            and self._current.name == animation_name
        ):
            return
        if self._secondary_animation is not None and animation_name == self._secondary_animation:
            return

        if self.current_animation() == animation_name:
            return
        if self.current_animation() == "":
            self._current = self._lookup(animation_name)
            self._elapsed_time = timedelta(0)
            self._blend_animation = None
        else:
            self.play_and_blend_animation(animation_name, DEFAULT_BLEND_DURATION)

    def play_and_blend_animation(self, animation_name: str, blend_duration: timedelta) -> None:
        """Blend from the current animation into another over ``blend_duration``."""
        if self._current is None:
            _log.warning("no animation to blend from")
            return

        if self._blend_animation is None and self._current.name == animation_name:
            return
        if self._blend_animation is not None and self._blend_animation.name == animation_name:
            return
        if self._secondary_animation is not None and animation_name == self._secondary_animation:
            return

        self._start_blend(self._lookup(animation_name), blend_duration)

    def play_once(
        self, animation_name: str, secondary_animation: str, blend_duration: timedelta
    ) -> None:
        """Play an animation once, then fall back into ``secondary_animation``."""
        self._secondary_animation = secondary_animation
        self._start_blend(self._lookup(animation_name), blend_duration)
        self._loop = False

    def _start_blend(self, animation: AnimationSpec, blend_duration: timedelta) -> None:
        self._blend_animation = animation
        self._elapsed_time = timedelta(0)
        self._blend_elapsed_time = timedelta(0)
        self._blend_duration = blend_duration
        self._blend_duration_so_far = timedelta(0)

    def update_to(self, elapsed_time: timedelta) -> None:
        """Pose the skeleton at an absolute time in the current animation."""
        if self._current is None:
            return
        self._elapsed_time = elapsed_time
        self._apply()

    def length(self) -> timedelta:
        if self._current is None:
            return timedelta(0)
        return self._current.length

    def update(self, delta: timedelta) -> None:
        """Advance playback by ``delta`` and recompute the joint transforms."""
        if self._current is None:
            return

        self._elapsed_time += delta
        self._blend_elapsed_time += delta
        self._blend_duration_so_far += delta

        while self._current.length > timedelta(0) and self._elapsed_time > self._current.length:
            self._elapsed_time -= self._current.length
            # a one-shot animation falls back into its secondary animation
            if not self._loop:
                self._loop = True
                secondary = self._secondary_animation
                self._secondary_animation = None
                if secondary is not None:
                    self.play_and_blend_animation(secondary, DEFAULT_BLEND_DURATION)
        self._apply()

    def _apply(self) -> None:
        assert self._current is not None
        pose = calculate_current_animation_pose(self._elapsed_time, self._current.key_frames)
        blend = self._blend_animation
        if blend is not None:
            blend_length_ms = _milliseconds(blend.length)
            while blend_length_ms > 0 and _milliseconds(self._blend_elapsed_time) > blend_length_ms:
                remaining = _milliseconds(self._blend_elapsed_time) - blend_length_ms
                self._blend_elapsed_time = timedelta(milliseconds=remaining)
            target = calculate_current_animation_pose(self._blend_elapsed_time, blend.key_frames)
            progression = _ratio(
                _milliseconds(self._blend_duration_so_far), _milliseconds(self._blend_duration)
            )
            if progression >= 1:
                self._current = blend
                self._blend_animation = None
            pose = interpolate_poses(pose, target, progression)

        matrices = convert_pose_to_transform_matrix(pose)
        self._animation_transforms = compute_joint_transforms(self._require_root(), matrices)


def compute_joint_transforms(joint: JointSpec, pose: Mapping[int, Mat4]) -> dict[int, Mat4]:
    """Transforms that move each joint's vertices from the bind pose into ``pose``."""
    transforms: dict[int, Mat4] = {}
    _compute_joint_transforms(joint, Mat4.ident(), pose, transforms)
    return transforms


def _compute_joint_transforms(
    joint: JointSpec, parent_transform: Mat4, pose: Mapping[int, Mat4], transforms: dict[int, Mat4]
) -> None:
    if joint.id not in pose:
        raise KeyError(f"joint with id {joint.id} does not have a pose")
    # model-space transform of the joint, including all its ancestors
    pose_transform = parent_transform.mul4(pose[joint.id])
    for child in joint.children:
        _compute_joint_transforms(child, pose_transform, pose, transforms)
    transforms[joint.id] = pose_transform.mul4(joint.inverse_bind_transform)


def calculate_current_animation_pose(
    elapsed_time: timedelta, key_frames: Sequence[KeyFrame]
) -> dict[int, JointTransform]:
    """The pose at ``elapsed_time``, interpolated between the surrounding key frames."""
    if not key_frames:
        raise ValueError("an animation needs at least one key frame")

    count = len(key_frames)
    start_index = next(
        (i for i in range(count - 1, -1, -1) if elapsed_time >= key_frames[i].start),
        count - 1,
    )
    end_index = (start_index + 1) % count

    start_frame = key_frames[start_index]
    end_frame = key_frames[end_index]
    start_timestamp = start_frame.start
    if start_index > end_index:
        # looping around from the last key frame
        start_timestamp = timedelta(0)

    progression = _ratio(
        (elapsed_time - start_timestamp).total_seconds(),
        (end_frame.start - start_timestamp).total_seconds(),
    )
    return interpolate_poses(start_frame.pose, end_frame.pose, progression)


def convert_pose_to_transform_matrix(pose: Mapping[int, JointTransform]) -> dict[int, Mat4]:
    """Translate-rotate-scale matrices for every joint of a pose."""
    return {
        joint_id: Mat4.translate3d(*t.translation)
        .mul4(t.rotation.mat4())
        .mul4(Mat4.scale3d(*t.scale))
        for joint_id, t in pose.items()
    }


def interpolate_poses(
    j1: Mapping[int, JointTransform], j2: Mapping[int, JointTransform], progression: float
) -> dict[int, JointTransform]:
    """Blend two poses; ``progression`` is clamped into [0, 1]."""
    progression = min(max(progression, 0.0), 1.0)
    result: dict[int, JointTransform] = {}
    for joint_id, first in j1.items():
        second = j2.get(joint_id, _ZERO_TRANSFORM)
        result[joint_id] = JointTransform(
            translation=first.translation + (second.translation - first.translation) * progression,
            rotation=q_interpolate(first.rotation, second.rotation, progression),
            scale=first.scale + (second.scale - first.scale) * progression,
        )
    return result