import numpy as np
import pytest
import torch

from fusionopt.geometry import Point2, Pose2, Pose2Tangent, Vector2
from fusionopt.optimize.vector import (
    add,
    components,
    dot,
    move,
    rebuild,
    scale,
    size,
    zero_tangent,
    zeros_like,
)


def test_dot_three_leaf_pose_tangent():
    a = Pose2Tangent(Vector2(1.0, 2.0), 3.0)
    b = Pose2Tangent(Vector2(4.0, -5.0), 0.5)
    # 1*4 + 2*(-5) + 3*0.5
    assert dot(a, b) == pytest.approx(-4.5)


def test_dot_six_leaf_pair_of_pose_tangents():
    a = (Pose2Tangent(Vector2(1.0, 2.0), 3.0), Pose2Tangent(Vector2(-1.0, 0.0), 2.0))
    b = (Pose2Tangent(Vector2(2.0, 2.0), 1.0), Pose2Tangent(Vector2(3.0, 7.0), -4.0))
    # 2 + 4 + 3 + (-3) + 0 + (-8)
    assert dot(a, b) == pytest.approx(-2.0)


def test_dot_heterogeneous_nesting():
    a = {"w": np.array([[1.0, 2.0], [3.0, 4.0]]), "b": (0.5, [Vector2(1.0, 1.0)])}
    b = {"w": np.ones((2, 2)), "b": (2.0, [Vector2(3.0, -1.0)])}
    assert dot(a, b) == pytest.approx(10.0 + 1.0 + 2.0)


def test_dot_arrays_and_tensors():
    assert dot(np.array([1.0, 2.0]), np.array([3.0, 4.0])) == pytest.approx(11.0)
    value = dot(torch.tensor([1.0, 2.0]), torch.tensor([3.0, 4.0]))
    assert float(value) == pytest.approx(11.0)


def test_dot_mismatched_structure_raises():
    with pytest.raises(ValueError):
        dot(Pose2Tangent(), Vector2())
    with pytest.raises(ValueError):
        dot(np.zeros(2), np.zeros(3))


def test_components_depth_first_order():
    value = (Pose2Tangent(Vector2(1.0, 2.0), 3.0), np.array([4.0, 5.0]), 6.0)
    assert list(components(value)) == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    assert size(value) == 6


def test_components_rejects_unknown_types():
    with pytest.raises(TypeError):
        list(components("abc"))


def test_rebuild_inverts_components():
    template = (Pose2Tangent(), np.zeros((2, 1)), [0.0])
    rebuilt = rebuild(template, range(1, 7))
    assert rebuilt[0] == Pose2Tangent(Vector2(1, 2), 3)
    assert np.array_equal(rebuilt[1], np.array([[4.0], [5.0]]))
    assert rebuilt[2] == [6]


def test_rebuild_length_mismatch_raises():
    with pytest.raises(ValueError):
        rebuild(np.zeros(3), [1.0, 2.0])
    with pytest.raises(ValueError):
        rebuild(np.zeros(2), [1.0, 2.0, 3.0])


@pytest.mark.parametrize(
    "template, values",
    [
        (Vector2(), [1.0]),
        (Pose2Tangent(), [1.0, 2.0]),
        ((Vector2(),), [1.0]),
        ([Vector2(), Vector2()], [1.0, 2.0, 3.0]),
        ({"a": Pose2Tangent()}, []),
    ],
)
def test_rebuild_structured_vector_too_few_values_raises(template, values):
    with pytest.raises(ValueError, match="Not enough values"):
        rebuild(template, values)


def test_rebuild_structured_vector_too_many_values_raises():
    with pytest.raises(ValueError, match="Too many values"):
        rebuild((Vector2(),), [1.0, 2.0, 3.0])


def test_vector_space_closure():
    a = (Vector2(1.0, 2.0), np.array([1.0]), {"k": 2.0})
    b = (Vector2(0.5, 0.5), np.array([3.0]), {"k": -1.0})
    total = add(a, scale(b, 2.0))
    assert total[0] == Vector2(2.0, 3.0)
    assert np.array_equal(total[1], np.array([7.0]))
    assert total[2] == {"k": 0.0}
    zero = zeros_like(total)
    assert list(components(zero)) == [0.0] * 4
    assert zero[0] == Vector2(0.0, 0.0)


def test_add_structure_mismatch_raises():
    with pytest.raises(ValueError):
        add((1.0, 2.0), (1.0,))
    with pytest.raises(ValueError):
        add({"a": 1.0}, {"b": 1.0})


def test_move_and_zero_tangent_on_models():
    poses = [Pose2.from_xytheta(0.0, 0.0, 0.0), Point2(1.0, 1.0)]
    tangent = zero_tangent(poses)
    assert tangent == [Pose2Tangent.zero(), Vector2.zero()]
    moved = move(poses, [Pose2Tangent(Vector2(1.0, 2.0), 0.25), Vector2(-1.0, 0.0)])
    assert moved[0] == Pose2.from_xytheta(1.0, 2.0, 0.25)
    assert moved[1] == Point2(0.0, 1.0)
    assert move(1.5, 0.5) == 2.0
    assert np.array_equal(move(np.ones(2), np.ones(2)), np.full(2, 2.0))


def test_move_rejects_mismatched_direction():
    with pytest.raises(ValueError):
        move((1.0, 2.0), (1.0,))
    with pytest.raises(TypeError):
        zero_tangent("model")
