from datetime import timedelta

import pytest

from kitolib.animation import (
    AnimationPlayer,
    calculate_current_animation_pose,
    compute_joint_transforms,
    convert_pose_to_transform_matrix,
    interpolate_poses,
)
from kitolib.modelspec import AnimationSpec, JointSpec, JointTransform, KeyFrame
from kitolib.vecmath import Mat4, Quat, Vec3


def _transform(x, y, z):
    return JointTransform(Vec3(x, y, z), Quat.ident(), Vec3(1, 1, 1))


def _skeleton():
    root = JointSpec(id=0, name="root", full_bind_transform=Mat4.translate3d(0, 1, 0))
    child = JointSpec(id=1, name="child", parent=root, full_bind_transform=Mat4.translate3d(0, 2, 0))
    root.children.append(child)
    return root


def _animations():
    idle = AnimationSpec(
        name="idle",
        key_frames=[
            KeyFrame({0: _transform(0, 0, 0), 1: _transform(0, 1, 0)}, timedelta(0)),
            KeyFrame({0: _transform(4, 0, 0), 1: _transform(0, 1, 0)}, timedelta(seconds=1)),
        ],
        length=timedelta(seconds=1),
    )
    attack = AnimationSpec(
        name="attack",
        key_frames=[
            KeyFrame({0: _transform(0, 0, 2), 1: _transform(0, 1, 0)}, timedelta(0)),
            KeyFrame({0: _transform(0, 0, 6), 1: _transform(0, 1, 0)}, timedelta(milliseconds=500)),
        ],
        length=timedelta(milliseconds=500),
    )
    return {"idle": idle, "attack": attack}


def _player():
    player = AnimationPlayer()
    player.initialize(_animations(), _skeleton())
    return player


def test_interpolate_poses_endpoints_and_clamping():
    a = {0: _transform(1, 2, 3)}
    b = {0: _transform(5, 6, 7)}
    assert interpolate_poses(a, b, 0)[0].translation == a[0].translation
    assert interpolate_poses(a, b, 1)[0].translation == b[0].translation
    assert interpolate_poses(a, b, 5)[0] == interpolate_poses(a, b, 1)[0]
    assert interpolate_poses(a, b, -3)[0] == interpolate_poses(a, b, 0)[0]


def test_interpolate_poses_keeps_joints_of_first_pose():
    a = {0: _transform(1, 0, 0), 3: _transform(0, 0, 0)}
    b = {0: _transform(2, 0, 0), 3: _transform(0, 0, 0)}
    assert set(interpolate_poses(a, b, 0.5)) == {0, 3}


def test_pose_at_key_frame_start_is_that_key_frame():
    frames = _animations()["idle"].key_frames
    pose = calculate_current_animation_pose(timedelta(0), frames)
    assert pose[0].translation == frames[0].pose[0].translation
    assert pose[1].translation == frames[0].pose[1].translation


def test_pose_after_last_key_frame_wraps_to_first():
    frames = _animations()["idle"].key_frames
    pose = calculate_current_animation_pose(timedelta(milliseconds=1500), frames)
    assert pose[0].translation == frames[0].pose[0].translation


def test_pose_needs_key_frames():
    with pytest.raises(ValueError):
        calculate_current_animation_pose(timedelta(0), [])


def test_default_transform_is_identity_matrix():
    matrices = convert_pose_to_transform_matrix({7: JointTransform()})
    assert matrices[7] == Mat4.ident()


def test_joint_transforms_chain_parent_transforms():
    root = _skeleton()
    pose = {0: Mat4.translate3d(1, 0, 0), 1: Mat4.translate3d(0, 2, 0)}
    transforms = compute_joint_transforms(root, pose)
    assert transforms[0] == Mat4.translate3d(1, 0, 0)
    assert transforms[1].col(3).vec3() == Vec3(1, 2, 0)


def test_joint_transforms_apply_inverse_bind():
    root = JointSpec(id=0, inverse_bind_transform=Mat4.translate3d(0, -1, 0))
    transforms = compute_joint_transforms(root, {0: Mat4.translate3d(0, 1, 0)})
    assert transforms[0] == Mat4.ident()


def test_joint_without_pose_raises():
    with pytest.raises(KeyError):
        compute_joint_transforms(_skeleton(), {0: Mat4.ident()})


def test_bind_pose_transforms():
    root = _skeleton()
    player = AnimationPlayer()
    player.initialize(_animations(), root)
    transforms = player.bind_pose_transforms()
    assert transforms == {0: root.full_bind_transform, 1: root.children[0].full_bind_transform}


def test_no_animation_before_playing():
    player = _player()
    assert player.current_animation() == ""
    assert player.length() == timedelta(0)


def test_play_unknown_animation_raises():
    with pytest.raises(KeyError):
        _player().play_animation("missing")


def test_play_animation_sets_current():
    player = _player()
    player.play_animation("idle")
    assert player.current_animation() == "idle"
    assert player.length() == timedelta(seconds=1)


def test_blend_without_current_does_nothing():
    player = _player()
    player.play_and_blend_animation("idle", timedelta(milliseconds=100))
    assert player.current_animation() == ""


def test_playing_another_animation_blends_then_switches():
    player = _player()
    player.play_animation("idle")
    player.play_animation("attack")
    assert player.current_animation() == "attack"
    assert player.length() == timedelta(seconds=1)
    player.update(timedelta(milliseconds=300))
    assert player.length() == timedelta(milliseconds=500)
    assert player.current_animation() == "attack"


def test_update_to_poses_skeleton():
    player = _player()
    player.play_animation("idle")
    player.update_to(timedelta(0))
    transforms = player.animation_transforms
    assert transforms[0] == Mat4.ident()
    assert transforms[1].col(3).vec3() == _animations()["idle"].key_frames[0].pose[1].translation


def test_play_once_falls_back_to_secondary():
    player = _player()
    player.play_animation("idle")
    player.play_once("attack", "idle", timedelta(milliseconds=100))
    player.play_animation("idle")
    assert player.current_animation() == "attack"

    player.update(timedelta(milliseconds=50))
    player.update(timedelta(milliseconds=60))
    assert player.length() == timedelta(milliseconds=500)

    player.update(timedelta(milliseconds=500))
    assert player.current_animation() == "idle"


def test_play_once_unknown_raises():
    player = _player()
    player.play_animation("idle")
    with pytest.raises(KeyError):
        player.play_once("missing", "idle", timedelta(milliseconds=100))