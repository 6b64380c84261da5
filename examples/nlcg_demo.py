"""
Example: Nonlinear Conjugate Gradient in fusionopt

This example minimizes three objectives with the Fletcher-Reeves NLCG
optimizer: a point pulled towards a target, a pair of poses aligned with
reference poses, and the Rosenbrock function on a flat array. It shows the
hand-written, finite-difference and autograd gradient oracles side by side.
"""

import numpy as np

from fusionopt import NLCG, NLCGConfig, Point2, Pose2, Problem, Vector2, nonlinear_cg, torch_gradient


def example_point_to_target():
    """Example: Pull a 2D point onto (3, 4) with an analytic gradient."""
    print("=" * 60)
    print("Example 1: Point2 with an analytic gradient")
    print("=" * 60)

    def loss(p):
        return (p.x - 3.0) ** 2 + (p.y - 4.0) ** 2

    def gradient(p, objective):
        return Vector2(2.0 * (p.x - 3.0), 2.0 * (p.y - 4.0))

    optimizer = NLCG(Point2(), precision=1e-10, max_iteration=400, gradient=gradient)
    p = optimizer.optimize(loss, Point2(0.0, 0.0))
    print(f"Status: {optimizer.status.value}")
    print(f"Final point: ({p.x:.6f}, {p.y:.6f})")
    print(f"Loss: {loss(p):.3e}")
    print(f"Steps: {optimizer.step}")
    print()


def example_pose_alignment():
    """Example: Align two poses with reference poses using finite differences."""
    print("=" * 60)
    print("Example 2: Pose2 pair with finite-difference gradients")
    print("=" * 60)

    references = (Pose2.from_xytheta(1.0, 2.0, 0.3), Pose2.from_xytheta(-1.0, 0.5, -0.7))

    def loss(poses):
        total = 0.0
        for pose, ref in zip(poses, references):
            total += (pose.x - ref.x) ** 2 + (pose.y - ref.y) ** 2 + (pose.theta - ref.theta) ** 2
        return total

    optimizer = NLCG(config=NLCGConfig(workers=4))
    poses = optimizer.optimize(loss, (Pose2(), Pose2()))
    for i, pose in enumerate(poses):
        print(f"Pose {i}: x={pose.x:.5f}, y={pose.y:.5f}, theta={pose.theta:.5f}")
    print(f"Loss: {loss(poses):.3e}")
    print()


def example_rosenbrock_autograd():
    """Example: Rosenbrock on an array with torch autograd gradients."""
    print("=" * 60)
    print("Example 3: Rosenbrock with torch autograd")
    print("=" * 60)

    def rosen(x):
        return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2

    def rosen_grad(x):
        return torch_gradient(x, lambda t: rosen(t))

    problem = Problem(fun=lambda x: float(rosen(x)), grad=rosen_grad)
    result = nonlinear_cg(problem, np.array([-1.2, 1.0]), maxiter=200)
    print(f"Status: {result.status.value}")
    print(f"x = {result.x}")
    print(f"f(x) = {result.fun:.3e}")
    print(f"Iterations: {result.nit}, evaluations: {result.nfev}")
    print()


if __name__ == "__main__":
    example_point_to_target()
    example_pose_alignment()
    example_rosenbrock_autograd()
    print("All NLCG examples completed.")
