from __future__ import annotations

import math
from typing import Any, Sequence

from tbwriter.histogram import bucketize
from tbwriter.proto import (
    DATA_CLASS_TENSOR,
    DT_STRING,
    PluginData,
    Summary,
    SummaryMetadata,
    SummaryValue,
    TensorProto,
    TensorShapeDim,
    TensorShapeProto,
)

TEXT_PLUGIN_NAME = "text"


class SummaryBuilder:
    """
    Fluent accumulator for a `Summary`:

        summ = SummaryBuilder().scalar("loss", 0.25).histogram("w", 30, weights).build()

    Tags need not be unique; every call appends one value in order.
    """

    def __init__(self) -> None:
        self._summary = Summary()

    def build(self) -> Any:
        # Detached copy; later calls on the builder do not touch it.
        summary = Summary()
        summary.CopyFrom(self._summary)
        return summary

    def value(self, value: Any) -> "SummaryBuilder":
        self._summary.value.append(value)
        return self

    def scalar(self, tag: str, value: float) -> "SummaryBuilder":
        # simple_value is a float32 on the wire.
        return self.value(SummaryValue(tag=tag, simple_value=float(value)))

    def histogram(self, tag: str, bins: int, values: Any) -> "SummaryBuilder":
        histo = bucketize(values, bins)
        return self.value(SummaryValue(tag=tag, histo=histo.to_proto()))

    def text(self, tag: str, strings: Sequence[str], shape: Sequence[int] | None = None) -> "SummaryBuilder":
        if isinstance(strings, str):
            strings = [strings]
        dims = [len(strings)] if shape is None else [int(d) for d in shape]
        assert math.prod(dims) == len(strings), f"text shape {dims} does not match {len(strings)} strings"

        tensor = TensorProto(
            dtype=DT_STRING,
            tensor_shape=TensorShapeProto(dim=[TensorShapeDim(size=d) for d in dims]),
            string_val=[s.encode("utf-8") for s in strings],
        )
        metadata = SummaryMetadata(
            plugin_data=PluginData(plugin_name=TEXT_PLUGIN_NAME),
            data_class=DATA_CLASS_TENSOR,
        )
        return self.value(SummaryValue(tag=tag, tensor=tensor, metadata=metadata))
