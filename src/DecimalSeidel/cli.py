""" Command line front end: read a problem, solve it, print the result. """
import argparse
import logging
import sys
from typing import Sequence, TextIO

from numpy.typing import NDArray

from DecimalSeidel.linear_system.builders import Problem, build_problem
from DecimalSeidel.linear_system.errors import (
    BuildError, DivergenceError, NoInputProvided
)
from DecimalSeidel.linear_system.problems import SAMPLES
from DecimalSeidel.linear_system.solvers import (
    gauss_seidel, is_diagonally_dominant, residual
)
from DecimalSeidel.numeric import DECIMAL_PRECISION, format_decimal

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BUILD_ERROR = 1
EXIT_USAGE = 2
EXIT_DIVERGED = 3

USAGE_INFORMATION = """decimal-seidel <file-path>
decimal-seidel < file-path

<file-path> is any valid path to a file
"""


def pad_string(text: str, padding: int) -> str:
    return "\n".join(" " * padding + line for line in str(text).splitlines())


def pretty_print(
    solution: NDArray,
    places: int | None = None,
    stream: TextIO | None = None,
) -> None:
    stream = sys.stdout if stream is None else stream
    pad = ' ' * 2
    print("Solution:", file=stream)
    for index, value in enumerate(solution, start=1):
        print(f'{pad}x{index} = {format_decimal(value, places)}', file=stream)


def decimal_places(text: str) -> int:
    """ argparse type for `--places`: 0 up to `DECIMAL_PRECISION`. """
    try:
        places = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if not 0 <= places <= DECIMAL_PRECISION:
        raise argparse.ArgumentTypeError(
            f"must be between 0 and {DECIMAL_PRECISION}, got {places}"
        )
    return places


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="decimal-seidel",
        description=(
            "Solve a square linear system with the Gauss-Seidel method "
            "in exact decimal arithmetic."
        ),
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "path", nargs="?", default=None,
        help="JSON problem file; standard input is read when omitted",
    )
    source.add_argument(
        "--example", choices=sorted(SAMPLES), default=None,
        help="solve a built-in sample system instead of reading input",
    )
    parser.add_argument(
        "--places", type=decimal_places, default=None,
        help="round printed values to this many decimal places",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log every sweep and print the residual",
    )
    return parser


def load(args: argparse.Namespace, stdin: TextIO | None) -> Problem:
    if args.example is not None:
        return Problem(equation=SAMPLES[args.example]().equation)
    return build_problem(args.path, stdin)


def main(
    argv: Sequence[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=stderr,
    )

    try:
        problem = load(args, stdin)
    except NoInputProvided:
        print(pad_string(USAGE_INFORMATION, 2), file=stderr)
        return EXIT_USAGE
    except BuildError as err:
        print("Error occured:", file=stderr)
        print(pad_string(str(err), 2), file=stderr)
        return EXIT_BUILD_ERROR

    equation = problem.equation
    if not is_diagonally_dominant(equation.coefficients):
        logger.warning(
            "Matrix is not strictly diagonally dominant; "
            "convergence is not guaranteed"
        )

    try:
        result = gauss_seidel(equation, problem.initial_guess)
    except DivergenceError as err:
        print(err, file=stderr)
        return EXIT_DIVERGED

    pretty_print(result.solution, args.places, stdout)
    if args.verbose:
        print(f"Sweeps: {result.sweeps}", file=stdout)
        print("Residual:", file=stdout)
        for index, value in enumerate(residual(equation, result.solution), 1):
            print(f"  r{index} = {format_decimal(value)}", file=stdout)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
