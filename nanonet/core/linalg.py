"""Dense vector and matrix values used by the network core.

Both types are immutable: every operation returns a new value and the
backing buffers are flagged read-only, so a vector shared between the
forward pass and a training update can never be changed underneath either
of them.  Shapes are checked explicitly before any arithmetic; numpy
broadcasting is never relied upon.
"""

from __future__ import annotations

from numbers import Real
from typing import Callable, Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatchError, InvalidArgumentError

Scalar = float
ScalarFn = Callable[[float], float]


def _readonly(data: np.ndarray) -> np.ndarray:
    data.setflags(write=False)
    return data


def _check_length(length: int, what: str) -> None:
    if length < 0:
        raise InvalidArgumentError(f"{what} must be non-negative, got {length}")


class Vector:
    """Fixed-length sequence of floats."""

    __slots__ = ("_data",)

    def __init__(self, values: Iterable[float]) -> None:
        if not isinstance(values, np.ndarray):
            values = list(values)
        data = np.array(values, dtype=np.float64)
        if data.ndim != 1:
            raise DimensionMismatchError(
                f"Vector expects a flat sequence, got shape {data.shape}"
            )
        self._data = _readonly(data)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Vector":
        obj = object.__new__(cls)
        obj._data = _readonly(data)
        return obj

    @classmethod
    def filled(cls, length: int, value: float) -> "Vector":
        _check_length(length, "length")
        return cls._wrap(np.full(length, float(value), dtype=np.float64))

    @classmethod
    def zeros(cls, length: int) -> "Vector":
        return cls.filled(length, 0.0)

    @classmethod
    def generate(cls, length: int, fn: Callable[[int], float]) -> "Vector":
        """Build a vector by calling ``fn(index)`` once per element."""

        _check_length(length, "length")
        return cls._wrap(
            np.fromiter((fn(i) for i in range(length)), dtype=np.float64, count=length)
        )

    # ------------------------------------------------------------------
    # Sequence protocol

    def __len__(self) -> int:
        return int(self._data.shape[0])

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def tolist(self) -> List[float]:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    # ------------------------------------------------------------------
    # Arithmetic

    def _same_length(self, other: "Vector") -> None:
        if len(self) != len(other):
            raise DimensionMismatchError(
                f"vector lengths differ: {len(self)} != {len(other)}"
            )

    def __add__(self, other: object) -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._same_length(other)
        return Vector._wrap(self._data + other._data)

    def __sub__(self, other: object) -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._same_length(other)
        return Vector._wrap(self._data - other._data)

    def __neg__(self) -> "Vector":
        return Vector._wrap(-self._data)

    def __mul__(self, other: object) -> "Vector":
        if isinstance(other, Vector):
            self._same_length(other)
            return Vector._wrap(self._data * other._data)
        if isinstance(other, Real):
            return Vector._wrap(self._data * float(other))
        return NotImplemented

    def __rmul__(self, other: object) -> "Vector":
        if isinstance(other, Real):
            return Vector._wrap(self._data * float(other))
        return NotImplemented

    def __truediv__(self, other: object) -> "Vector":
        if not isinstance(other, Real):
            return NotImplemented
        if other == 0:
            raise ZeroDivisionError("vector division by zero")
        return Vector._wrap(self._data / float(other))

    def dot(self, other: "Vector") -> float:
        self._same_length(other)
        return float(np.dot(self._data, other._data))

    def __matmul__(self, other: object):
        """``v @ w`` is the dot product; ``v @ M`` dots ``v`` with every column of ``M``."""

        if isinstance(other, Vector):
            return self.dot(other)
        if isinstance(other, Matrix):
            if len(self) != other.rows:
                raise DimensionMismatchError(
                    f"cannot multiply vector of length {len(self)} "
                    f"with {other.rows}x{other.columns} matrix"
                )
            return Vector._wrap(self._data @ other._data)
        return NotImplemented

    def apply(self, fn: ScalarFn) -> "Vector":
        """Return a new vector with ``fn`` applied to every element."""

        return Vector._wrap(
            np.fromiter((fn(x) for x in self._data.tolist()), dtype=np.float64, count=len(self))
        )

    # ------------------------------------------------------------------
    # Comparison and display

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vector({self.tolist()!r})"

    def __format__(self, spec: str) -> str:
        if not spec:
            return repr(self)
        return "[" + ", ".join(format(x, spec) for x in self._data.tolist()) + "]"


class Matrix:
    """Rectangular, row-major array of floats."""

    __slots__ = ("_data",)

    def __init__(self, rows: Iterable[Iterable[float]]) -> None:
        if isinstance(rows, np.ndarray):
            data = np.array(rows, dtype=np.float64)
        else:
            materialised = [list(row) for row in rows]
            widths = sorted({len(row) for row in materialised})
            if len(widths) > 1:
                raise DimensionMismatchError(f"matrix rows have differing lengths: {widths}")
            width = widths[0] if widths else 0
            data = np.array(materialised, dtype=np.float64).reshape(len(materialised), width)
        if data.ndim != 2:
            raise DimensionMismatchError(f"Matrix expects rows of values, got shape {data.shape}")
        self._data = _readonly(data)

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Matrix":
        obj = object.__new__(cls)
        obj._data = _readonly(data)
        return obj

    @classmethod
    def filled(cls, rows: int, columns: int, value: float) -> "Matrix":
        _check_length(rows, "rows")
        _check_length(columns, "columns")
        return cls._wrap(np.full((rows, columns), float(value), dtype=np.float64))

    @classmethod
    def zeros(cls, rows: int, columns: int) -> "Matrix":
        return cls.filled(rows, columns, 0.0)

    @classmethod
    def generate(cls, rows: int, columns: int, fn: Callable[[int, int], float]) -> "Matrix":
        """Build a matrix by calling ``fn(row, column)`` once per element, row by row."""

        _check_length(rows, "rows")
        _check_length(columns, "columns")
        flat = np.fromiter(
            (fn(r, c) for r in range(rows) for c in range(columns)),
            dtype=np.float64,
            count=rows * columns,
        )
        return cls._wrap(flat.reshape(rows, columns))

    @classmethod
    def from_rows(cls, rows: Sequence[Vector]) -> "Matrix":
        return cls(rows)

    @classmethod
    def outer(cls, scales: Vector, row: Vector) -> "Matrix":
        """Matrix whose row ``i`` is ``row * scales[i]``."""

        return cls._wrap(np.outer(scales._data, row._data))

    # ------------------------------------------------------------------
    # Shape and access

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def columns(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.columns

    def __getitem__(self, index: Tuple[int, int]) -> float:
        row, column = index
        return float(self._data[row, column])

    def row(self, index: int) -> Vector:
        return Vector._wrap(self._data[index, :].copy())

    def column(self, index: int) -> Vector:
        return Vector._wrap(self._data[:, index].copy())

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._data.T.copy())

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def tolist(self) -> List[List[float]]:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    # ------------------------------------------------------------------
    # Arithmetic

    def _same_shape(self, other: "Matrix") -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(f"matrix shapes differ: {self.shape} != {other.shape}")

    def __add__(self, other: object) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._same_shape(other)
        return Matrix._wrap(self._data + other._data)

    def __sub__(self, other: object) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._same_shape(other)
        return Matrix._wrap(self._data - other._data)

    def __neg__(self) -> "Matrix":
        return Matrix._wrap(-self._data)

    def __mul__(self, other: object) -> "Matrix":
        if isinstance(other, Matrix):
            self._same_shape(other)
            return Matrix._wrap(self._data * other._data)
        if isinstance(other, Real):
            return Matrix._wrap(self._data * float(other))
        return NotImplemented

    def __rmul__(self, other: object) -> "Matrix":
        if isinstance(other, Real):
            return Matrix._wrap(self._data * float(other))
        return NotImplemented

    def __truediv__(self, other: object) -> "Matrix":
        if not isinstance(other, Real):
            return NotImplemented
        if other == 0:
            raise ZeroDivisionError("matrix division by zero")
        return Matrix._wrap(self._data / float(other))

    def __matmul__(self, other: object) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        if self.columns != len(other):
            raise DimensionMismatchError(
                f"cannot multiply {self.rows}x{self.columns} matrix "
                f"with vector of length {len(other)}"
            )
        return Vector._wrap(self._data @ other._data)

    def apply(self, fn: ScalarFn) -> "Matrix":
        """Return a new matrix with ``fn`` applied to every element."""

        flat = np.fromiter(
            (fn(x) for x in self._data.ravel().tolist()),
            dtype=np.float64,
            count=self._data.size,
        )
        return Matrix._wrap(flat.reshape(self.shape))

    # ------------------------------------------------------------------
    # Comparison and display

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix({self.tolist()!r})"

    def __format__(self, spec: str) -> str:
        if not spec:
            return repr(self)
        return "\n".join(format(self.row(i), spec) for i in range(self.rows))


__all__ = ["Matrix", "Scalar", "ScalarFn", "Vector"]
