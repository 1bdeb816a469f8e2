""" Ready-made systems for tests, demos and the `--example` CLI option. """
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Callable

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from DecimalSeidel.linear_system.builders import make_equation
from DecimalSeidel.linear_system.utils import Equation
from DecimalSeidel.numeric import ARITHMETIC_CONTEXT


@dataclass
class Sample:
    equation: Equation
    solution: NDArray | None = None


def build_two_by_two() -> Sample:
    """ 4x + y = 1, 2x + 3y = 2 """
    equation = make_equation(
        [["4", "1"], ["2", "3"]],
        ["1", "2"],
        max_iterations=50,
        epsilon="0.0001",
    )
    solution = np.array([Decimal("0.1"), Decimal("0.6")], dtype=object)
    return Sample(equation=equation, solution=solution)


def build_single_unknown(
    coefficient: str = "4",
    rhs: str = "2",
    epsilon: str = "1",
) -> Sample:
    equation = make_equation(
        [[coefficient]], [rhs], max_iterations=1, epsilon=epsilon
    )
    with localcontext(ARITHMETIC_CONTEXT):
        solution = np.array([Decimal(rhs) / Decimal(coefficient)], dtype=object)
    return Sample(equation=equation, solution=solution)


def build_diagonal_dominant(
    n: int,
    seed: int = 20250508,
    epsilon: str = "1e-12",
    max_iterations: int = 200,
) -> Sample:
    """
    Generates a strictly diagonally dominant integer system with a known
    integer solution.

    Args:
    - n (int): number of unknowns
    - seed (int): random seed for reproducibility

    Returns:
    - sample (Sample): the equation and its exact solution
    """
    rng: Generator = np.random.default_rng(seed=seed)

    matrix = rng.integers(low=-9, high=10, size=(n, n))
    off_diagonal = np.abs(matrix).sum(axis=1) - np.abs(matrix.diagonal())
    signs = rng.choice([-1, 1], size=n)
    margin = rng.integers(low=1, high=10, size=n)
    # at least twice the off-diagonal row sum
    np.fill_diagonal(matrix, signs * (2 * off_diagonal + margin))

    solution = rng.integers(low=-20, high=21, size=n)
    rhs = matrix @ solution

    equation = make_equation(
        matrix.tolist(),
        rhs.tolist(),
        max_iterations=max_iterations,
        epsilon=epsilon,
    )
    return Sample(
        equation=equation,
        solution=np.array([Decimal(int(x)) for x in solution], dtype=object),
    )


def build_divergent(max_iterations: int = 5) -> Sample:
    """
    Non-zero but weak diagonal: the iterates grow without bound, and an
    epsilon of zero can't be met anyway.
    """
    equation = make_equation(
        [["1", "2"], ["3", "1"]],
        ["1", "1"],
        max_iterations=max_iterations,
        epsilon="0",
    )
    return Sample(equation=equation)


SAMPLES: dict[str, Callable[[], Sample]] = {
    "two-by-two": build_two_by_two,
    "single": build_single_unknown,
    "dominant": lambda: build_diagonal_dominant(6),
    "divergent": build_divergent,
}
