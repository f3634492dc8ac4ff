from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

import numpy as np

from vizframe.errors import DataSetError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


@runtime_checkable
class DataSet(Protocol):
    def get_data(self, column: str, row: int) -> Any:
        ...

    def get_header(self, index: int) -> str:
        ...

    def get_col_count(self) -> int:
        ...

    def get_row_count(self) -> int:
        ...


def headers(dataset: DataSet) -> list[str]:
    return [dataset.get_header(i) for i in range(dataset.get_col_count())]


def has_column(dataset: DataSet, column: str | None) -> bool:
    if column is None:
        return False
    return column in headers(dataset)


def column_values(dataset: DataSet, column: str) -> Iterable[Any]:
    for row in range(dataset.get_row_count()):
        yield dataset.get_data(column, row)


class TableDataSet:
    """Column-oriented in-memory dataset. Columns are copied to plain lists on construction."""

    def __init__(self, columns: Mapping[str, Any]) -> None:
        self._headers: list[str] = []
        self._columns: dict[str, list[Any]] = {}
        rows: int | None = None
        for name, raw in columns.items():
            values = _coerce_column(raw, label=str(name))
            if rows is None:
                rows = len(values)
            elif len(values) != rows:
                raise DataSetError(f"column length mismatch: {name} has {len(values)} rows, expected {rows}")
            self._headers.append(str(name))
            self._columns[str(name)] = values
        self._rows = rows or 0

    @classmethod
    def from_rows(cls, header: Sequence[str], rows: Iterable[Sequence[Any]]) -> "TableDataSet":
        cols: dict[str, list[Any]] = {name: [] for name in header}
        for i, row in enumerate(rows):
            if len(row) != len(header):
                raise DataSetError(f"row {i} has {len(row)} cells, expected {len(header)}")
            for name, cell in zip(header, row, strict=True):
                cols[name].append(cell)
        return cls(cols)

    @classmethod
    def from_frame(cls, frame: Any) -> "TableDataSet":
        if pd is None:
            raise DataSetError("pandas is required for `from_frame`")
        if not isinstance(frame, pd.DataFrame):
            raise DataSetError("`frame` must be a pandas DataFrame")
        return cls({str(name): frame[name] for name in frame.columns})

    def get_data(self, column: str, row: int) -> Any:
        try:
            values = self._columns[column]
        except KeyError as exc:
            raise DataSetError(f"column not found: {column}") from exc
        if row < 0 or row >= self._rows:
            raise IndexError(f"row out of range: {row}")
        return values[row]

    def get_header(self, index: int) -> str:
        return self._headers[index]

    def get_col_count(self) -> int:
        return len(self._headers)

    def get_row_count(self) -> int:
        return self._rows

    def __repr__(self) -> str:
        return f"TableDataSet(columns={self._headers!r}, rows={self._rows})"


def _coerce_column(value: Any, *, label: str) -> list[Any]:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise DataSetError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.tolist()

    if pd is not None and isinstance(value, pd.Series):
        return [_scalar(v) for v in value.tolist()]

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise DataSetError(f"{label} must be 1-D")
        return [_scalar(v) for v in value.tolist()]

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_scalar(v) for v in value]

    raise DataSetError(f"unsupported {label} column type: {type(value)!r}")


def _scalar(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if pd is not None and value is pd.NaT:
        return None
    return value
