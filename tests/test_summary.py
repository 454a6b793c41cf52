from __future__ import annotations

import pytest

from tbwriter.proto import DATA_CLASS_TENSOR, DT_STRING, Summary, SummaryValue
from tbwriter.summary import TEXT_PLUGIN_NAME, SummaryBuilder


def test_values_keep_call_order_and_duplicate_tags() -> None:
    summ = SummaryBuilder().scalar("loss", 0.5).scalar("loss", 0.25).histogram("w", 3, [1.0, 2.0]).build()
    assert [v.tag for v in summ.value] == ["loss", "loss", "w"]
    assert [v.WhichOneof("value") for v in summ.value] == ["simple_value", "simple_value", "histo"]
    assert summ.value[0].simple_value == 0.5
    assert summ.value[1].simple_value == 0.25


def test_scalar_is_stored_as_float32() -> None:
    summ = SummaryBuilder().scalar("x", 0.1).build()
    assert summ.value[0].simple_value == pytest.approx(0.1, rel=1e-7)
    assert summ.value[0].simple_value != 0.1


def test_histogram_value() -> None:
    summ = SummaryBuilder().histogram("weights", 2, [1.0, 2.0, 3.0, 4.0]).build()
    histo = summ.value[0].histo
    assert list(histo.bucket_limit) == [2.5, 4.0]
    assert list(histo.bucket) == [2.0, 2.0]


def test_empty_histogram_value_is_still_appended() -> None:
    summ = SummaryBuilder().histogram("empty", 10, []).build()
    assert summ.value[0].tag == "empty"
    assert summ.value[0].HasField("histo")
    assert list(summ.value[0].histo.bucket) == []


def test_text_value() -> None:
    summ = SummaryBuilder().text("notes", ["héllo", "world"]).build()
    v = summ.value[0]
    assert v.WhichOneof("value") == "tensor"
    assert v.tensor.dtype == DT_STRING
    assert [d.size for d in v.tensor.tensor_shape.dim] == [2]
    assert list(v.tensor.string_val) == ["héllo".encode("utf-8"), b"world"]
    assert v.metadata.plugin_data.plugin_name == TEXT_PLUGIN_NAME
    assert v.metadata.data_class == DATA_CLASS_TENSOR


def test_text_with_explicit_shape() -> None:
    summ = SummaryBuilder().text("grid", ["a", "b", "c", "d"], shape=[2, 2]).build()
    assert [d.size for d in summ.value[0].tensor.tensor_shape.dim] == [2, 2]


def test_text_single_string() -> None:
    summ = SummaryBuilder().text("msg", "just one").build()
    assert list(summ.value[0].tensor.string_val) == [b"just one"]


def test_text_shape_mismatch_is_a_contract_violation() -> None:
    with pytest.raises(AssertionError):
        SummaryBuilder().text("bad", ["a", "b", "c"], shape=[2, 2])


def test_raw_value_passthrough() -> None:
    raw = SummaryValue(tag="custom", simple_value=7.0)
    summ = SummaryBuilder().value(raw).build()
    assert isinstance(summ, Summary)
    assert summ.value[0].tag == "custom"


def test_built_summary_is_detached_from_builder() -> None:
    builder = SummaryBuilder().scalar("a", 1.0)
    first = builder.build()
    builder.scalar("b", 2.0)
    second = builder.build()
    assert [v.tag for v in first.value] == ["a"]
    assert [v.tag for v in second.value] == ["a", "b"]
    second.value[0].tag = "renamed"
    assert builder.build().value[0].tag == "a"
