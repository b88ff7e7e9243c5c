"""Datasets bundled with nanonet."""

from .truth_tables import (
    DatasetSpec,
    decode_bool,
    encode_bool,
    get,
    names,
    parity_table,
    register_dataset,
)

__all__ = [
    "DatasetSpec",
    "decode_bool",
    "encode_bool",
    "get",
    "names",
    "parity_table",
    "register_dataset",
]
