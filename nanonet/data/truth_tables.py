"""In-memory boolean truth-table datasets."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple

from ..core.errors import InvalidArgumentError
from ..core.linalg import Vector
from ..core.types import Decoder, Encoder

BoolExample = Tuple[Vector, bool]

_TRUE = Vector([1.0, 0.0])
_FALSE = Vector([0.0, 1.0])


def encode_bool(label: bool) -> Vector:
    """Encode ``True`` as ``[1, 0]`` and ``False`` as ``[0, 1]``."""

    return _TRUE if label else _FALSE


def decode_bool(output: Vector) -> bool:
    """Decode an output pair: ``True`` when the first unit is the larger one."""

    return output[0] > output[1]


def parity_table(inputs: int = 4, relevant: int = 3) -> List[BoolExample]:
    """Every row of the ``inputs``-bit truth table labelled with the XOR of its first ``relevant`` bits.

    Rows are enumerated in binary counting order with the last input
    changing fastest; inputs past ``relevant`` are ignored by the label.
    """

    if inputs <= 0:
        raise InvalidArgumentError(f"inputs must be positive, got {inputs}")
    if not 0 < relevant <= inputs:
        raise InvalidArgumentError(f"relevant must be in [1, {inputs}], got {relevant}")
    rows: List[BoolExample] = []
    for bits in itertools.product((0, 1), repeat=inputs):
        label = sum(bits[:relevant]) % 2 == 1
        rows.append((Vector(float(b) for b in bits), label))
    return rows


@dataclass(frozen=True)
class DatasetSpec:
    """A labelled dataset together with the label codec it expects."""

    name: str
    examples: List[BoolExample]
    encode: Encoder
    decode: Decoder
    input_size: int
    output_size: int
    provenance: Dict[str, Any] = field(default_factory=dict)


DatasetFactory = Callable[..., DatasetSpec]

_REGISTRY: Dict[str, DatasetFactory] = {}


def register_dataset(name: str, factory: DatasetFactory) -> None:
    _REGISTRY[name] = factory


def names() -> Iterable[str]:
    return sorted(_REGISTRY)


def get(name: str, **options: Any) -> DatasetSpec:
    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset {name!r}. Available datasets: {available}")
    return _REGISTRY[name](**options)


def _reject_unknown(name: str, options: Mapping[str, object], accepted: Iterable[str]) -> None:
    unknown = sorted(set(options) - set(accepted))
    if unknown:
        allowed = ", ".join(sorted(accepted)) or "none"
        raise KeyError(
            f"Unknown options for dataset {name!r}: {', '.join(unknown)}. "
            f"Accepted options: {allowed}"
        )


def _parity_factory(inputs: int = 4, relevant: int = 3, **options: object) -> DatasetSpec:
    _reject_unknown("parity", options, ("inputs", "relevant"))
    return DatasetSpec(
        name="parity",
        examples=parity_table(inputs=inputs, relevant=relevant),
        encode=encode_bool,
        decode=decode_bool,
        input_size=inputs,
        output_size=2,
        provenance={"type": "parity", "inputs": inputs, "relevant": relevant},
    )


def _parity3_factory(**options: object) -> DatasetSpec:
    _reject_unknown("parity3", options, ())
    return replace(_parity_factory(inputs=4, relevant=3), name="parity3")


register_dataset("parity", _parity_factory)
register_dataset("parity3", _parity3_factory)

__all__ = [
    "BoolExample",
    "DatasetSpec",
    "decode_bool",
    "encode_bool",
    "get",
    "names",
    "parity_table",
    "register_dataset",
]
