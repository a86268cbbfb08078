import math

import pytest

from kitolib.vecmath import (
    Mat4,
    Quat,
    Vec3,
    Vec4,
    clamp,
    cross_2d,
    decompose,
    mat4_from_column_major_floats,
    q_interpolate,
    same_sign,
    sign,
    vec3_approx_equal_threshold,
    vec3_approx_equal_zero,
    vec3_is_zero,
    vec3_to_quat,
)


def test_quat_between_vectors_rotates_start_onto_dest():
    v1 = Vec3(0, 0, -1)
    v2 = Vec3(0, 1, 0)
    q = Quat.between_vectors(v1, v2)
    assert tuple(q.rotate(v1)) == pytest.approx(tuple(v2))
    assert q.length() == pytest.approx(1.0)


def test_quat_between_opposite_vectors():
    q = Quat.between_vectors(Vec3(1, 0, 0), Vec3(-1, 0, 0))
    assert tuple(q.rotate(Vec3(1, 0, 0))) == pytest.approx((-1, 0, 0), abs=1e-9)


def test_vec3_to_quat_points_forward_at_target():
    q = vec3_to_quat(Vec3(1, 0, 0))
    assert tuple(q.rotate(Vec3(0, 0, -1))) == pytest.approx((1, 0, 0), abs=1e-9)


def test_cross_and_dot():
    x, y = Vec3(1, 0, 0), Vec3(0, 1, 0)
    assert x.cross(y) == Vec3(0, 0, 1)
    assert x.dot(y) == 0
    assert Vec3(1, 2, 3).dot(Vec3(4, 5, 6)) == 32


def test_length_and_normalize():
    v = Vec3(3, 4, 0)
    assert v.length() == 5
    assert v.length_sqr() == 25
    assert v.normalize().length() == pytest.approx(1.0)


def test_normalize_zero_vector_is_nan():
    result = Vec3().normalize()
    assert [math.isnan(c) for c in result] == [True, True, True]


def test_approx_equal():
    assert Vec3(1, 2, 3).approx_equal(Vec3(1, 2, 3 + 1e-14))
    assert not Vec3(1, 2, 3).approx_equal(Vec3(1, 2, 3.1))


def test_vec4_round_trip():
    v = Vec3(1, 2, 3)
    assert v.vec4(7) == Vec4(1, 2, 3, 7)
    assert v.vec4(7).vec3() == v


def test_identity_matrix_multiplication():
    m = Mat4.translate3d(1, 2, 3)
    assert Mat4.ident().mul4(m) == m
    assert m.mul4(Mat4.ident()) == m
    assert Mat4() == Mat4.ident()


def test_translate_and_scale_points():
    p = Vec4(1, 1, 1, 1)
    assert Mat4.translate3d(1, 2, 3).mul4x1(p) == Vec4(2, 3, 4, 1)
    assert Mat4.scale3d(2, 3, 4).mul4x1(p) == Vec4(2, 3, 4, 1)
    assert (Mat4.translate3d(1, 0, 0) @ Mat4.scale3d(2, 2, 2)) @ p == Vec4(3, 2, 2, 1)


def test_matrix_needs_sixteen_values():
    with pytest.raises(ValueError):
        Mat4((1, 2, 3))


def test_col_and_with_col():
    m = Mat4.ident().with_col(3, Vec4(5, 6, 7, 1))
    assert m.col(3) == Vec4(5, 6, 7, 1)
    assert m == Mat4.translate3d(5, 6, 7)
    with pytest.raises(IndexError):
        m.col(4)


def test_mat4_from_column_major_floats_uses_groups_as_rows():
    m = mat4_from_column_major_floats(range(16))
    assert m.col(0) == Vec4(0, 4, 8, 12)
    assert m[0, 1] == 1
    assert m == Mat4.from_rows(range(0, 4), range(4, 8), range(8, 12), range(12, 16))


def test_quat_identity_matrix_round_trip():
    assert Quat.ident().mat4() == Mat4.ident()
    assert Quat.from_mat4(Mat4.ident()) == Quat.ident()


def test_quat_normalize():
    assert Quat(0, Vec3()).normalize() == Quat.ident()
    assert Quat(2, Vec3()).normalize() == Quat.ident()


def test_decompose_recovers_components():
    rotation = Quat.between_vectors(Vec3(0, 0, -1), Vec3(0, 1, 0))
    m = Mat4.translate3d(1, 2, 3).mul4(rotation.mat4()).mul4(Mat4.scale3d(2, 2, 2))
    translation, recovered, scale = decompose(m)
    assert translation == Vec3(1, 2, 3)
    assert tuple(scale) == pytest.approx((2, 2, 2))
    assert recovered.w == pytest.approx(rotation.w)
    assert tuple(recovered.v) == pytest.approx(tuple(rotation.v), abs=1e-9)


def test_q_interpolate_endpoints():
    a = Quat.ident()
    b = Quat.between_vectors(Vec3(0, 0, -1), Vec3(0, 1, 0))
    assert q_interpolate(a, b, 0) == a
    end = q_interpolate(a, b, 1)
    assert end.w == pytest.approx(b.w)
    assert tuple(end.v) == pytest.approx(tuple(b.v), abs=1e-9)


def test_q_interpolate_takes_shorter_arc():
    a = Quat.ident()
    b = Quat.between_vectors(Vec3(0, 0, -1), Vec3(0, 1, 0))
    negated = Quat(-b.w, -b.v)
    end = q_interpolate(a, negated, 1)
    assert end.w == pytest.approx(b.w)
    assert tuple(end.v) == pytest.approx(tuple(b.v), abs=1e-9)


def test_scalar_helpers():
    assert clamp(5, 0, 1) == 1
    assert clamp(-5, 0, 1) == 0
    assert clamp(0.5, 0, 1) == 0.5
    assert sign(3.2) == 1
    assert sign(-0.1) == -1
    assert sign(0) == 0
    assert same_sign(1, 2)
    assert same_sign(0, 0)
    assert not same_sign(-1, 1)


def test_vector_predicates():
    assert vec3_is_zero(Vec3())
    assert not vec3_is_zero(Vec3(0, 0.1, 0))
    assert vec3_approx_equal_zero(Vec3(0.5, -0.5, 0.9))
    assert not vec3_approx_equal_zero(Vec3(1, 0, 0))
    assert vec3_approx_equal_threshold(Vec3(1, 1, 1), Vec3(1.05, 1, 1), 0.1)
    assert not vec3_approx_equal_threshold(Vec3(1, 1, 1), Vec3(1.2, 1, 1), 0.1)


def test_cross_2d_uses_xz_plane():
    assert cross_2d(Vec3(1, 9, 0), Vec3(0, 9, 1)) == 1
    assert cross_2d(Vec3(0, 0, 1), Vec3(1, 0, 0)) == -1