import logging
from dataclasses import dataclass
from decimal import Decimal, Overflow, localcontext
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray

from DecimalSeidel.linear_system.errors import DivergenceError
from DecimalSeidel.linear_system.utils import Equation
from DecimalSeidel.numeric import (
    ARITHMETIC_CONTEXT, ONE, ZERO, to_decimal_array
)

logger = logging.getLogger(__name__)


@dataclass
class Sweep:
    """ State after one full pass over the unknowns. """
    number: int
    estimate: NDArray
    max_delta: Decimal


@dataclass
class Convergence:
    solution: NDArray
    sweeps: int


def initial_estimate(size: int) -> NDArray:
    """ The default starting point: every unknown equal to one. """
    return np.full(size, ONE, dtype=object)


def starting_point(equation: Equation, initial_guess: Any = None) -> NDArray:
    """ A fresh, writable estimate vector for one solve. """
    if initial_guess is None:
        return initial_estimate(equation.size)

    estimate = to_decimal_array(initial_guess)
    if estimate.shape != (equation.size,):
        raise ValueError(
            f"Initial guess of shape {estimate.shape} doesn't match "
            f"{equation.size} unknowns"
        )
    return estimate


def sweep(coefficients: NDArray, rhs: NDArray, estimate: NDArray) -> Decimal:
    """
    One Gauss-Seidel pass over rows `0..n-1`.

    `estimate` is updated in place as soon as each row is done, so later
    rows of the same pass already use the new values. Returns the largest
    change of a single unknown.
    """
    size = estimate.shape[0]
    max_delta = ZERO
    with localcontext(ARITHMETIC_CONTEXT):
        for i in range(size):
            s = ZERO
            for j in range(size):
                # skip current unknown
                if j == i:
                    continue
                s += coefficients[i, j] * estimate[j]

            x = (rhs[i] - s) / coefficients[i, i]
            delta = abs(x - estimate[i])
            if delta > max_delta:
                max_delta = delta

            estimate[i] = x

    return max_delta


def iterate(equation: Equation, initial_guess: Any = None) -> Iterator[Sweep]:
    """
    Yields the state after every sweep, at most `equation.max_iterations`
    of them. Each `Sweep.estimate` is a snapshot.

    :raises DivergenceError: the estimate grew past the decimal range
    """
    estimate = starting_point(equation, initial_guess)
    for number in range(1, equation.max_iterations + 1):
        try:
            max_delta = sweep(equation.coefficients, equation.rhs, estimate)
        except Overflow as err:
            logger.warning("Estimate overflowed on sweep %d", number)
            raise DivergenceError() from err
        logger.debug("sweep %d: max delta %s", number, max_delta)
        yield Sweep(number=number, estimate=estimate.copy(), max_delta=max_delta)


def gauss_seidel(equation: Equation, initial_guess: Any = None) -> Convergence:
    """
    Solves `equation` with the Gauss-Seidel method in exact decimals.

    :param equation: a validated system, see `builders.make_equation`
    :param initial_guess: starting estimate, all ones when omitted
    :raises DivergenceError: no sweep out of `max_iterations` changed every
        unknown by less than `epsilon`
    """
    for state in iterate(equation, initial_guess):
        if state.max_delta < equation.epsilon:
            logger.info(
                "Converged after %d sweep(s), max delta %s",
                state.number, state.max_delta,
            )
            return Convergence(solution=state.estimate, sweeps=state.number)

    logger.warning(
        "No convergence within %d sweep(s) for epsilon %s",
        equation.max_iterations, equation.epsilon,
    )
    raise DivergenceError()


def solve(equation: Equation, initial_guess: Any = None) -> NDArray:
    return gauss_seidel(equation, initial_guess).solution


def is_diagonally_dominant(coefficients: NDArray, strict: bool = True) -> bool:
    """
    Row diagonal dominance. Sufficient, though not necessary, for the
    Gauss-Seidel iteration to converge.
    """
    with localcontext(ARITHMETIC_CONTEXT):
        for i, row in enumerate(coefficients):
            diagonal = abs(row[i])
            others = sum(
                (abs(value) for j, value in enumerate(row) if j != i), ZERO
            )
            if diagonal < others or (strict and diagonal == others):
                return False
    return True


def residual(equation: Equation, solution: NDArray) -> NDArray:
    """ `rhs - coefficients @ solution` in exact decimals. """
    with localcontext(ARITHMETIC_CONTEXT):
        return equation.rhs - equation.coefficients.dot(solution)
