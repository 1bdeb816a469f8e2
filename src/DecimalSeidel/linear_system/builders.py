"""
Turns a JSON problem description into a validated `Equation`.

The document looks like

    {
        "input_matrix": [["4", "1"], ["2", "3"]],
        "expression_rhs": ["1", "2"],
        "max_iterations": 50,
        "epsilon": "0.0001"
    }

with an optional `initial_guess` list. Numbers may also be written as JSON
numbers; they are read straight into `Decimal`, never through `float`.
"""
import json
import logging
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence, TextIO

import numpy as np
from numpy.typing import NDArray

from DecimalSeidel.linear_system.errors import (
    DocumentParseError,
    EmptyMatrix,
    InitialGuessSizeError,
    InputReadError,
    MatrixValueError,
    NoInputProvided,
    ParameterError,
    RightHandSideValueError,
    WrongRightHandSideSize,
    WrongRowsCount,
    WrongRowSize,
    ZeroOnDiagonalError,
)
from DecimalSeidel.linear_system.utils import Equation
from DecimalSeidel.numeric import LiteralError, ZERO, to_decimal

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("input_matrix", "expression_rhs", "max_iterations", "epsilon")


@dataclass
class ProblemDocument:
    """ The input document before any literal is converted. """
    input_matrix: list[list[Any]]
    expression_rhs: list[Any]
    max_iterations: Any
    epsilon: Any
    initial_guess: list[Any] | None = None


@dataclass
class Problem:
    equation: Equation
    initial_guess: NDArray | None = None


def read_input(
    path: str | Path | None = None,
    stdin: TextIO | None = None,
) -> str:
    """
    Reads the raw document. A path wins over piped input; an interactive
    terminal on stdin means there is no input at all.
    """
    if path is not None:
        logger.debug("Reading problem from %s", path)
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise InputReadError(str(path), err) from err

    stdin = sys.stdin if stdin is None else stdin
    if stdin is None or stdin.isatty():
        raise NoInputProvided()

    logger.debug("Reading problem from standard input")
    try:
        return stdin.read()
    except (OSError, UnicodeDecodeError) as err:
        raise InputReadError("standard input", err) from err


def parse_document(text: str) -> ProblemDocument:
    try:
        raw = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as err:
        raise DocumentParseError(str(err)) from err

    if not isinstance(raw, dict):
        raise DocumentParseError("Expected a JSON object")

    missing = [name for name in REQUIRED_FIELDS if name not in raw]
    if missing:
        raise DocumentParseError(f"Missing field(s): {', '.join(missing)}")

    matrix = raw["input_matrix"]
    if not isinstance(matrix, list) \
            or not all(isinstance(row, list) for row in matrix):
        raise DocumentParseError("`input_matrix` must be a list of lists")

    rhs = raw["expression_rhs"]
    if not isinstance(rhs, list):
        raise DocumentParseError("`expression_rhs` must be a list")

    initial_guess = raw.get("initial_guess")
    if initial_guess is not None and not isinstance(initial_guess, list):
        raise DocumentParseError("`initial_guess` must be a list")

    return ProblemDocument(
        input_matrix=matrix,
        expression_rhs=rhs,
        max_iterations=raw["max_iterations"],
        epsilon=raw["epsilon"],
        initial_guess=initial_guess,
    )


def compute_matrix_size(
    input_matrix: Sequence[Sequence[Any]],
    expression_rhs: Sequence[Any],
) -> int:
    """ The dimension `n` of a square system, or a `MatrixSizeError`. """
    row_sizes = [len(row) for row in input_matrix]
    if not row_sizes or max(row_sizes) == 0:
        raise EmptyMatrix()
    matrix_size = max(row_sizes)

    for row, row_size in enumerate(row_sizes):
        if row_size != matrix_size:
            raise WrongRowSize(row, row_size, matrix_size)

    if len(row_sizes) != matrix_size:
        raise WrongRowsCount(len(row_sizes), matrix_size)

    if len(expression_rhs) != matrix_size:
        raise WrongRightHandSideSize(len(expression_rhs), matrix_size)

    return matrix_size


def convert_matrix(input_matrix: Sequence[Sequence[Any]], size: int) -> NDArray:
    coefficients = np.empty((size, size), dtype=object)
    for row, values in enumerate(input_matrix):
        for column, value in enumerate(values):
            try:
                coefficients[row, column] = to_decimal(value)
            except LiteralError as err:
                raise MatrixValueError(row, column, err.reason) from err
    return coefficients


def convert_rhs(expression_rhs: Sequence[Any]) -> NDArray:
    rhs = np.empty(len(expression_rhs), dtype=object)
    for position, value in enumerate(expression_rhs):
        try:
            rhs[position] = to_decimal(value)
        except LiteralError as err:
            raise RightHandSideValueError(position, err.reason) from err
    return rhs


def zero_diagonal_positions(coefficients: NDArray) -> list[tuple[int, int]]:
    return [
        (i, i) for i in range(coefficients.shape[0])
        if coefficients[i, i] == ZERO
    ]


def check_for_zeroes_on_diagonal(coefficients: NDArray) -> None:
    """
    Gauss-Seidel requires non-zero values on the diagonal.
    source: https://www3.nd.edu/~zxu2/acms60212-40212-S12/Lec-09-4.pdf
    slide 10
    """
    positions = zero_diagonal_positions(coefficients)
    if positions:
        row, column = positions[0]
        raise ZeroOnDiagonalError(row, column)


def parse_max_iterations(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParameterError("max_iterations", "Expected an integer")
    if value < 1:
        raise ParameterError("max_iterations", "Expected a positive integer")
    return value


def parse_epsilon(value: Any) -> Decimal:
    try:
        epsilon = to_decimal(value)
    except LiteralError as err:
        raise ParameterError("epsilon", err.reason) from err
    if epsilon < ZERO:
        raise ParameterError("epsilon", "Expected a non-negative value")
    return epsilon


def parse_initial_guess(values: Sequence[Any] | None, size: int) -> NDArray | None:
    if values is None:
        return None
    if len(values) != size:
        raise InitialGuessSizeError(len(values), size)

    guess = np.empty(size, dtype=object)
    for position, value in enumerate(values):
        try:
            guess[position] = to_decimal(value)
        except LiteralError as err:
            raise ParameterError(
                "initial_guess", f"position {position + 1}: {err.reason}"
            ) from err
    return guess


def _freeze(array: NDArray) -> NDArray:
    array.setflags(write=False)
    return array


def make_equation(
    coefficients: Sequence[Sequence[Any]] | NDArray,
    rhs: Sequence[Any] | NDArray,
    max_iterations: int,
    epsilon: Any,
) -> Equation:
    """
    Validates and converts a system given as nested sequences of numeric
    literals (`str`, `int` or `Decimal`).

    :raises BuildError: wrong shape, bad literal, zero on the diagonal, or
        unusable `max_iterations` / `epsilon`
    """
    matrix = [list(row) for row in coefficients]
    rhs = list(rhs)

    matrix_size = compute_matrix_size(matrix, rhs)
    logger.debug("Detected a %dx%d system", matrix_size, matrix_size)

    coefficient_array = convert_matrix(matrix, matrix_size)
    check_for_zeroes_on_diagonal(coefficient_array)
    rhs_array = convert_rhs(rhs)

    return Equation(
        coefficients=_freeze(coefficient_array),
        rhs=_freeze(rhs_array),
        max_iterations=parse_max_iterations(max_iterations),
        epsilon=parse_epsilon(epsilon),
    )


def build_equation(document: ProblemDocument) -> Equation:
    return make_equation(
        document.input_matrix,
        document.expression_rhs,
        document.max_iterations,
        document.epsilon,
    )


def build_problem(
    path: str | Path | None = None,
    stdin: TextIO | None = None,
) -> Problem:
    """ Reads, parses and validates; never solves. """
    document = parse_document(read_input(path, stdin))
    equation = build_equation(document)
    initial_guess = parse_initial_guess(document.initial_guess, equation.size)
    return Problem(equation=equation, initial_guess=initial_guess)


def build(
    path: str | Path | None = None,
    stdin: TextIO | None = None,
) -> Equation:
    return build_problem(path, stdin).equation
