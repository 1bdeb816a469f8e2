from dataclasses import dataclass
from decimal import Decimal
from numpy.typing import NDArray


@dataclass(frozen=True)
class Equation:
    """
    A square linear system `coefficients @ solution = rhs` together with the
    stopping rules of the iteration.

    Entries are `Decimal`s stored in numpy arrays of `dtype=object`. Build
    instances with `builders.make_equation`, which checks the shape and the
    diagonal and freezes the arrays.
    """
    coefficients: NDArray
    rhs: NDArray
    max_iterations: int
    epsilon: Decimal

    @property
    def size(self) -> int:
        return self.rhs.shape[0]

    def diagonal(self) -> NDArray:
        return self.coefficients.diagonal()

    def __str__(self) -> str:
        lstr = f"{self.coefficients=}\n"
        lstr += f"{self.rhs=}\n"
        lstr += f"{self.max_iterations=}\n"
        lstr += f"{self.epsilon=}\n"
        return lstr
