import io
import json
from decimal import Decimal

import pytest

from DecimalSeidel.linear_system.builders import (
    build, build_problem, check_for_zeroes_on_diagonal, compute_matrix_size,
    convert_matrix, make_equation, parse_document, read_input,
    zero_diagonal_positions,
)
from DecimalSeidel.linear_system.errors import (
    BuildError, DocumentParseError, EmptyMatrix, InitialGuessSizeError,
    InputReadError, MatrixValueError, NoInputProvided, ParameterError,
    RightHandSideValueError, WrongRightHandSideSize, WrongRowsCount,
    WrongRowSize, ZeroOnDiagonalError,
)


class FakeTerminal(io.StringIO):

    def isatty(self) -> bool:
        return True


def build_document(**overrides) -> str:
    document = {
        "input_matrix": [["4", "1"], ["2", "3"]],
        "expression_rhs": ["1", "2"],
        "max_iterations": 50,
        "epsilon": "0.0001",
    }
    document.update(overrides)
    return json.dumps(document)


def test_build_from_path(tmp_path):
    path = tmp_path / "problem.json"
    path.write_text(build_document())

    equation = build(path)

    assert equation.size == 2
    assert equation.coefficients.tolist() == [
        [Decimal(4), Decimal(1)], [Decimal(2), Decimal(3)]
    ]
    assert equation.rhs.tolist() == [Decimal(1), Decimal(2)]
    assert equation.max_iterations == 50
    assert equation.epsilon == Decimal("0.0001")


def test_build_from_stdin():
    equation = build(stdin=io.StringIO(build_document()))
    assert list(equation.diagonal()) == [Decimal(4), Decimal(3)]


def test_path_wins_over_stdin(tmp_path):
    path = tmp_path / "problem.json"
    path.write_text(build_document(expression_rhs=["5", "6"]))

    equation = build(path, stdin=io.StringIO(build_document()))
    assert equation.rhs.tolist() == [Decimal(5), Decimal(6)]


def test_no_input_on_a_terminal():
    with pytest.raises(NoInputProvided):
        read_input(stdin=FakeTerminal())


def test_missing_file(tmp_path):
    with pytest.raises(InputReadError):
        read_input(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2]",
        json.dumps({"input_matrix": [["1"]], "expression_rhs": ["1"]}),
        build_document(input_matrix=["1", "2"]),
        build_document(expression_rhs="1"),
        build_document(initial_guess="1"),
    ],
)
def test_malformed_documents(text):
    with pytest.raises(DocumentParseError):
        parse_document(text)


def test_json_numbers_stay_exact():
    text = (
        '{"input_matrix": [[4, 1], [2, 3]], "expression_rhs": [0.1, 2],'
        ' "max_iterations": 5, "epsilon": 1e-4}'
    )
    equation = build(stdin=io.StringIO(text))

    assert equation.rhs[0] == Decimal("0.1")
    assert equation.epsilon == Decimal("0.0001")


@pytest.mark.parametrize(
    "matrix, rhs, error",
    [
        ([], [], EmptyMatrix),
        ([[]], [], EmptyMatrix),
        ([["1", "2"], ["3"]], ["1", "2"], WrongRowSize),
        ([["1", "2"]], ["1", "2"], WrongRowsCount),
        ([["1", "2"], ["3", "4"]], ["1"], WrongRightHandSideSize),
    ],
)
def test_compute_matrix_size_errors(matrix, rhs, error):
    with pytest.raises(error):
        compute_matrix_size(matrix, rhs)


def test_ragged_row_position():
    with pytest.raises(WrongRowSize) as info:
        compute_matrix_size([["1", "2", "3"], ["1", "2", "3"], ["1"]],
                            ["1", "2", "3"])
    assert (info.value.row, info.value.actual, info.value.expected) == (2, 1, 3)
    assert "Row at position 3" in str(info.value)


def test_compute_matrix_size():
    assert compute_matrix_size([["1", "2"], ["3", "4"]], ["1", "2"]) == 2


def test_zero_diagonal_rejected_at_first_position():
    with pytest.raises(ZeroOnDiagonalError) as info:
        make_equation([["0", "1"], ["1", "0"]], ["1", "1"], 5, "0.1")
    assert (info.value.row, info.value.column) == (0, 0)


def test_zero_diagonal_rejected_at_second_position():
    with pytest.raises(ZeroOnDiagonalError) as info:
        make_equation([["1", "1"], ["1", "0.000"]], ["1", "1"], 5, "0.1")
    assert (info.value.row, info.value.column) == (1, 1)
    assert "row 2, column 2" in str(info.value)


def test_zero_diagonal_positions():
    coefficients = convert_matrix([["0", "1"], ["1", "0"]], 2)
    assert zero_diagonal_positions(coefficients) == [(0, 0), (1, 1)]
    with pytest.raises(ZeroOnDiagonalError):
        check_for_zeroes_on_diagonal(coefficients)


def test_bad_matrix_literal_position():
    with pytest.raises(MatrixValueError) as info:
        make_equation([["1", "2"], ["x", "4"]], ["1", "2"], 5, "0.1")
    assert (info.value.row, info.value.column) == (1, 0)


def test_too_precise_matrix_literal():
    literal = "1." + "1" * 40
    with pytest.raises(MatrixValueError) as info:
        make_equation([[literal]], ["1"], 5, "0.1")
    assert "Can't represent such precise value" in str(info.value)


def test_bad_rhs_literal_position():
    with pytest.raises(RightHandSideValueError) as info:
        make_equation([["1", "2"], ["3", "4"]], ["1", "NaN"], 5, "0.1")
    assert info.value.position == 1


@pytest.mark.parametrize(
    "max_iterations, epsilon",
    [
        (0, "0.1"),
        (-3, "0.1"),
        (True, "0.1"),
        ("10", "0.1"),
        (10, "-0.1"),
        (10, "abc"),
        (10, 0.1),
    ],
)
def test_bad_parameters(max_iterations, epsilon):
    with pytest.raises(ParameterError):
        make_equation([["1"]], ["1"], max_iterations, epsilon)


def test_build_problem_with_initial_guess():
    text = build_document(initial_guess=["0", "0.5"])
    problem = build_problem(stdin=io.StringIO(text))
    assert problem.initial_guess.tolist() == [Decimal(0), Decimal("0.5")]


def test_initial_guess_of_wrong_size():
    text = build_document(initial_guess=["0"])
    with pytest.raises(InitialGuessSizeError):
        build_problem(stdin=io.StringIO(text))


def test_every_failure_is_a_build_error():
    assert issubclass(ZeroOnDiagonalError, BuildError)
    assert issubclass(WrongRowSize, BuildError)
    assert issubclass(NoInputProvided, BuildError)
    assert issubclass(BuildError, ValueError)


@pytest.mark.parametrize("literal", ["9e999999", "1e29", "1e-30", "-5E+40"])
def test_literals_outside_the_decimal_range(literal):
    with pytest.raises(MatrixValueError) as info:
        make_equation([["1", literal], [literal, "1"]], ["1", "1"], 5, "0")
    assert (info.value.row, info.value.column) == (0, 1)
    assert "Can't represent such precise value" in str(info.value)


def test_epsilon_below_the_smallest_step():
    with pytest.raises(ParameterError):
        make_equation([["1"]], ["1"], 5, "1e-29")


def test_invalid_utf8_file(tmp_path):
    path = tmp_path / "problem.json"
    path.write_bytes(b'\xff\xfe{"input_matrix": [["1"]]}')

    with pytest.raises(InputReadError):
        build(path)


def test_invalid_utf8_stdin():
    stdin = io.TextIOWrapper(io.BytesIO(b'\xff\xfe{}'), encoding="utf-8")
    with pytest.raises(InputReadError):
        read_input(stdin=stdin)
