import numpy as np

from fusionopt.optimize import NLCG, Problem, Status, nonlinear_cg


def rosenbrock(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosenbrock_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def himmelblau(x: np.ndarray) -> float:
    return (x[0] ** 2 + x[1] - 11) ** 2 + (x[0] + x[1] ** 2 - 7) ** 2


def himmelblau_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            4 * x[0] * (x[0] ** 2 + x[1] - 11) + 2 * (x[0] + x[1] ** 2 - 7),
            2 * (x[0] ** 2 + x[1] - 11) + 4 * x[1] * (x[0] + x[1] ** 2 - 7),
        ]
    )


def test_elongated_quadratic_decreases():
    A = np.diag([1.0, 3.0])

    def fun(x: np.ndarray) -> float:
        return float(x @ (A @ x))

    def grad(x: np.ndarray) -> np.ndarray:
        return 2 * A @ x

    x0 = np.array([1.0, 1.0])
    res = nonlinear_cg(Problem(fun=fun, grad=grad), x0, initial_step=0.0)
    assert res.fun < 0.5 * fun(x0)
    assert res.nit <= 400


def test_himmelblau_never_worse_than_start_without_bootstrap():
    x0 = np.array([2.8, 2.1])
    res = nonlinear_cg(Problem(fun=himmelblau, grad=himmelblau_grad), x0, initial_step=0.0)
    assert res.fun <= himmelblau(x0)


def test_rosenbrock_never_worse_than_first_iterate():
    problem = Problem(fun=rosenbrock, grad=rosenbrock_grad)
    res = nonlinear_cg(problem, np.array([-1.2, 1.0]), maxiter=50, history=True)
    assert res.fun <= rosenbrock(res.history[0])
    assert res.status in (Status.CONVERGED, Status.MAX_ITER)


def test_grid_evaluations_are_accounted():
    def fun(x: np.ndarray) -> float:
        return float(np.sum((x - 2.0) ** 2))

    optimizer = NLCG(gradient=lambda x, f: 2 * (x - 2.0))
    res = optimizer.minimize(fun, np.zeros(2))
    assert res.status is Status.CONVERGED
    assert res.nfev == 200 * (res.nit + 1)
    assert res.njev == res.nit + 2
