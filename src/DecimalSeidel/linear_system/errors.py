"""
Failures of the problem builder and of the solver.

Row, column and position attributes are zero-based indices. The messages
count from one, the way people number rows.
"""


class DivergenceError(RuntimeError):
    """ The sweep budget ran out before the tolerance was met. """

    def __init__(self) -> None:
        super().__init__(
            "Solution approximation diverges. "
            "Equations do not have solution"
        )


class BuildError(ValueError):
    """ The input could not be turned into a valid `Equation`. """


class NoInputProvided(BuildError):

    def __init__(self) -> None:
        super().__init__("No input provided!")


class InputReadError(BuildError):

    def __init__(
        self, source: str, cause: OSError | UnicodeDecodeError
    ) -> None:
        super().__init__(f"Can't read {source}: {cause}")
        self.source = source


class DocumentParseError(BuildError):

    def __init__(self, reason: str) -> None:
        super().__init__(f"Error during parsing occured! {reason}")
        self.reason = reason


class MatrixSizeError(BuildError):
    """ Incorrect input matrix sizing. """


class EmptyMatrix(MatrixSizeError):

    def __init__(self) -> None:
        super().__init__("Empty matrix provided!")


class WrongRowSize(MatrixSizeError):

    def __init__(self, row: int, actual: int, expected: int) -> None:
        super().__init__(
            f"Row at position {row + 1} has incorrect size: "
            f"Expected: {expected}! Got {actual}"
        )
        self.row = row
        self.actual = actual
        self.expected = expected


class WrongRowsCount(MatrixSizeError):

    def __init__(self, actual: int, expected: int) -> None:
        super().__init__(
            f"Rows count is incorrect: Expected: {expected}! Got {actual}"
        )
        self.actual = actual
        self.expected = expected


class WrongRightHandSideSize(MatrixSizeError):

    def __init__(self, actual: int, expected: int) -> None:
        super().__init__(
            "Expression right hand side size is incorrect: "
            f"Expected: {expected}! Got {actual}"
        )
        self.actual = actual
        self.expected = expected


class InitialGuessSizeError(MatrixSizeError):

    def __init__(self, actual: int, expected: int) -> None:
        super().__init__(
            f"Initial guess size is incorrect: Expected: {expected}! "
            f"Got {actual}"
        )
        self.actual = actual
        self.expected = expected


class PositionalError(BuildError):
    """ A matrix entry at (`row`, `column`) is unusable. """

    def __init__(self, row: int, column: int, reason: str) -> None:
        super().__init__(
            f"Incorrect value provided in row {row + 1}, column {column + 1}"
            f"\nError: {reason}"
        )
        self.row = row
        self.column = column
        self.reason = reason


class MatrixValueError(PositionalError):
    pass


class ZeroOnDiagonalError(PositionalError):
    """ Gauss-Seidel divides by every diagonal entry. """

    def __init__(self, row: int, column: int) -> None:
        super().__init__(
            row,
            column,
            "Zero on diagonal detected! Expected non-zero value on diagonal!",
        )


class RightHandSideValueError(BuildError):

    def __init__(self, position: int, reason: str) -> None:
        super().__init__(
            "Incorrect value in right hand side expression on position "
            f"{position + 1}! {reason}"
        )
        self.position = position
        self.reason = reason


class ParameterError(BuildError):
    """ `max_iterations`, `epsilon` or `initial_guess` is unusable. """

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Incorrect `{name}`: {reason}")
        self.name = name
        self.reason = reason
