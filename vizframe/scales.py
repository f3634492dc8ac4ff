from __future__ import annotations

from decimal import Decimal, InvalidOperation
import enum
import math
from numbers import Number
from typing import Any, Callable, Protocol, Sequence, runtime_checkable
import weakref

import numpy as np

from vizframe.data import DataSet, column_values, has_column


class ScaleOption(enum.IntFlag):
    NONE = 0
    ZERO = 1
    GAPS = 2
    TICKS = 4


@runtime_checkable
class Scale(Protocol):
    fields: tuple[str, ...]

    def init(self, dataset: DataSet) -> None:
        ...

    def map(self, value: Any) -> float:
        ...

    @property
    def min(self) -> float:
        ...

    @property
    def max(self) -> float:
        ...

    def values(self) -> list[Any]:
        ...

    def set_scale_option(self, option: ScaleOption) -> None:
        ...

    def copy(self) -> "Scale":
        ...


class _DataSetTracker:
    """Remembers the dataset a scale was last initialized from, without keeping it alive."""

    def __init__(self) -> None:
        self._ref: Callable[[], Any] | None = None

    def same(self, dataset: DataSet) -> bool:
        return self._ref is not None and self._ref() is dataset

    def track(self, dataset: DataSet) -> None:
        try:
            self._ref = weakref.ref(dataset)
        except TypeError:
            self._ref = lambda: dataset

    def reset(self) -> None:
        self._ref = None


class LinearScale:
    def __init__(
        self,
        *fields: str,
        min: float | None = None,
        max: float | None = None,
        option: ScaleOption = ScaleOption.NONE,
        tick_target: int = 6,
    ) -> None:
        self.fields = tuple(fields)
        self.user_min = min
        self.user_max = max
        self.option = ScaleOption(option)
        self.tick_target = tick_target
        self._min = math.nan if min is None else float(min)
        self._max = math.nan if max is None else float(max)
        self._ticks: list[float] | None = None
        self._source = _DataSetTracker()

    def set_scale_option(self, option: ScaleOption) -> None:
        self.option = ScaleOption(option)
        self._source.reset()

    def init(self, dataset: DataSet) -> None:
        if self._source.same(dataset):
            return
        lo = math.inf
        hi = -math.inf
        for name in self.fields:
            if not has_column(dataset, name):
                continue
            for raw in column_values(dataset, name):
                v = _as_float(raw)
                if math.isnan(v) or math.isinf(v):
                    continue
                lo = v if v < lo else lo
                hi = v if v > hi else hi
        if lo > hi:
            lo, hi = math.nan, math.nan

        if self.user_min is not None:
            lo = float(self.user_min)
        else:
            if self.option & ScaleOption.ZERO and not math.isnan(lo):
                lo = min(0.0, lo)
            if self.option & ScaleOption.GAPS and not math.isnan(lo):
                v = lo - abs(hi * 0.05)
                lo = max(0.0, v) if lo >= 0 else v

        if self.user_max is not None:
            hi = float(self.user_max)
        else:
            if self.option & ScaleOption.ZERO and not math.isnan(hi):
                hi = max(0.0, hi)
            if self.option & ScaleOption.GAPS and not math.isnan(hi):
                v = hi + abs(hi * 0.05)
                hi = min(0.0, v) if hi <= 0 else v

        if not math.isnan(lo) and abs(lo - hi) < 1e-6 and lo != 0:
            if lo > 0:
                lo = 0.0
            else:
                hi = 0.0

        self._min = lo
        self._max = hi
        self._ticks = None
        self._source.track(dataset)

    def map(self, value: Any) -> float:
        return _as_float(value)

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    def values(self) -> list[float]:
        if self._ticks is None:
            if math.isnan(self._min) or math.isnan(self._max):
                self._ticks = []
            else:
                ticks = generate_nice_ticks(self._min, self._max, self.tick_target)
                self._ticks = [float(t) for t in ticks if self._min - 1e-9 <= t <= self._max + 1e-9]
                if not self._ticks:
                    self._ticks = [self._min, self._max] if self._min != self._max else [self._min]
        return list(self._ticks)

    def copy(self) -> "LinearScale":
        other = LinearScale(
            *self.fields,
            min=self.user_min,
            max=self.user_max,
            option=self.option,
            tick_target=self.tick_target,
        )
        other._min = self._min
        other._max = self._max
        return other

    def __repr__(self) -> str:
        return f"LinearScale(fields={self.fields!r}, min={self._min}, max={self._max})"


class CategoricalScale:
    """Ordinal scale; `map` returns the index of a value among the distinct values."""

    def __init__(
        self,
        *fields: str,
        values: Sequence[Any] | None = None,
        sort_key: Callable[[Any], Any] | None = None,
    ) -> None:
        self.fields = tuple(fields)
        self.option = ScaleOption.NONE
        self.sort_key = sort_key
        self._user_values = None if values is None else list(values)
        self._values: list[Any] = []
        self._index: dict[str, int] = {}
        self._source = _DataSetTracker()
        if self._user_values is not None:
            self._set_values(self._user_values)

    def set_scale_option(self, option: ScaleOption) -> None:
        self.option = ScaleOption(option)

    def init(self, dataset: DataSet) -> None:
        if self._user_values is not None or self._source.same(dataset):
            return
        seen: dict[str, Any] = {}
        for name in self.fields:
            if not has_column(dataset, name):
                continue
            for raw in column_values(dataset, name):
                if raw is None:
                    continue
                seen.setdefault(value_key(raw), raw)
        self._set_values(list(seen.values()))
        self._source.track(dataset)

    def _set_values(self, values: list[Any]) -> None:
        if self.sort_key is not None:
            values = sorted(values, key=self.sort_key)
        self._values = values
        self._index = {}
        for i, v in enumerate(values):
            self._index.setdefault(value_key(v), i)

    def map(self, value: Any) -> float:
        idx = self._index.get(value_key(value))
        return math.nan if idx is None else float(idx)

    @property
    def min(self) -> float:
        return 0.0 if self._values else math.nan

    @property
    def max(self) -> float:
        return float(len(self._values) - 1) if self._values else math.nan

    def values(self) -> list[Any]:
        return list(self._values)

    def copy(self) -> "CategoricalScale":
        other = CategoricalScale(*self.fields, values=self._user_values, sort_key=self.sort_key)
        other.option = self.option
        if self._user_values is None:
            other._set_values(list(self._values))
        return other

    def __repr__(self) -> str:
        return f"CategoricalScale(fields={self.fields!r}, values={self._values!r})"


def value_key(value: Any) -> str:
    """Normalized identity of a data value so that 3, 3.0 and "3" collide."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, np.generic):
        return value_key(value.item())
    return str(value)


def is_number(value: Any) -> bool:
    return isinstance(value, (Number, np.number)) and not isinstance(value, bool)


def _as_float(value: Any) -> float:
    if not is_number(value):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.ceil(vmin / step) * step
    tick_max = np.floor(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Snap drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float) -> str:
    """Short legend text for a float: six decimals at most, scientific outside 1e-6..1e6."""

    if not np.isfinite(value):
        return str(value)
    abs_v = abs(value)
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-6)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


_ROUNDED_STEPS = ((1.5, 1.0), (3.0, 2.0), (7.0, 5.0))
_CEILING_STEPS = ((1.0, 1.0), (2.0, 2.0), (5.0, 5.0))


def _nice_number(value: float, *, round_result: bool) -> float:
    """1, 2 or 5 times a power of ten near `value`; rounded, or the smallest not below it."""

    exp = np.floor(np.log10(value))
    frac = value / (10**exp)
    if round_result:
        nice = next((n for limit, n in _ROUNDED_STEPS if frac < limit), 10.0)
    else:
        nice = next((n for limit, n in _CEILING_STEPS if frac <= limit), 10.0)
    return float(nice * (10**exp))
