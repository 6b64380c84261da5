import numpy as np
import pytest

from fusionopt.geometry import Point2, Pose2, Pose2Tangent, Vector2
from fusionopt.optimize.gradient import basis_vectors, numerical_gradient, numerical_jacobian


def test_numerical_gradient_matches_linear_function():
    def fun(x: np.ndarray) -> float:
        return float(3 * x[0] - 2 * x[1])

    grad = numerical_gradient(np.array([0.2, -0.1]), fun)
    assert np.allclose(grad, np.array([3.0, -2.0]), atol=1e-6)


def test_numerical_gradient_on_point2():
    grad = numerical_gradient(Point2(1.0, 1.0), lambda p: (p.x - 3.0) ** 2 + (p.y - 4.0) ** 2)
    assert isinstance(grad, Vector2)
    assert grad.x == pytest.approx(-4.0, abs=1e-6)
    assert grad.y == pytest.approx(-6.0, abs=1e-6)


def test_numerical_gradient_counts_evaluations():
    grad, evals = numerical_gradient(Pose2(), lambda pose: pose.theta, return_evals=True)
    assert evals == 6
    assert list(grad.components()) == pytest.approx([0.0, 0.0, 1.0])


def test_numerical_gradient_invalid_eps():
    with pytest.raises(ValueError):
        numerical_gradient(np.array([0.0]), lambda x: float(x[0]), eps=0.0)


def test_basis_vectors_of_pose_tangent():
    basis = basis_vectors(Pose2Tangent.zero())
    assert basis == [
        Pose2Tangent(Vector2(1.0, 0.0), 0.0),
        Pose2Tangent(Vector2(0.0, 1.0), 0.0),
        Pose2Tangent(Vector2(0.0, 0.0), 1.0),
    ]


def test_jacobian_identity_pose_pair_is_zero():
    # Squared distance between two identical poses has zero gradient
    w_t1 = Pose2.from_xytheta(1.0, 0.0, np.pi / 2)
    w_t2 = Pose2.from_xytheta(1.0, 0.0, np.pi / 2)

    def f(pts):
        a, b = pts
        return (a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.theta - b.theta) ** 2

    jac = numerical_jacobian(f, (w_t1, w_t2))
    assert len(jac) == 1
    for item in jac[0]:
        assert np.allclose(list(item.components()), 0.0, atol=1e-8)


def test_jacobian_pose_to_point_rows():
    def f(pose: Pose2) -> Point2:
        return Point2(2.0 * pose.x - pose.theta, pose.y * pose.y)

    jac = numerical_jacobian(f, Pose2.from_xytheta(1.0, 3.0, 0.2))
    assert len(jac) == 2
    expected = [
        [2.0, 0.0, -1.0],
        [0.0, 6.0, 0.0],
    ]
    for row, want in zip(jac, expected):
        assert isinstance(row, Pose2Tangent)
        assert np.allclose(list(row.components()), want, atol=1e-6)


def test_jacobian_of_array_function():
    a_mat = np.array([[1.0, 2.0], [3.0, 4.0], [0.0, -1.0]])
    jac = numerical_jacobian(lambda x: a_mat @ x, np.array([0.5, -0.5]))
    assert np.allclose(np.stack(jac), a_mat, atol=1e-6)
