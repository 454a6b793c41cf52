"""
Subset of the TensorBoard protos (event.proto, summary.proto, tensor.proto,
tensor_shape.proto, types.proto) built at import time.

Field numbers and types follow the upstream definitions so that the serialized
bytes are read by TensorBoard as-is. The descriptors live in a private pool so
they never collide with a `tensorboard` or `tensorflow` install.
"""

from __future__ import annotations

from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, message, message_factory

# Encode/decode failures from protobuf are passed through as-is.
EncodingError = message.Error

_PACKAGE = "tensorboard"
_FDP = descriptor_pb2.FieldDescriptorProto

DT_INVALID = 0
DT_FLOAT = 1
DT_DOUBLE = 2
DT_STRING = 7

DATA_CLASS_UNKNOWN = 0
DATA_CLASS_SCALAR = 1
DATA_CLASS_TENSOR = 2
DATA_CLASS_BLOB_SEQUENCE = 3


def _field(
    msg: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    ftype: int,
    *,
    repeated: bool = False,
    type_name: str | None = None,
    oneof_index: int | None = None,
) -> None:
    f = msg.field.add()
    f.name = name
    f.number = number
    f.type = ftype
    f.label = _FDP.LABEL_REPEATED if repeated else _FDP.LABEL_OPTIONAL
    if type_name is not None:
        f.type_name = f".{_PACKAGE}.{type_name}"
    if oneof_index is not None:
        f.oneof_index = oneof_index


def _enum(fdp: descriptor_pb2.FileDescriptorProto, name: str, values: dict[str, int]) -> None:
    e = fdp.enum_type.add()
    e.name = name
    for value_name, number in values.items():
        v = e.value.add()
        v.name = value_name
        v.number = number


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto()
    fdp.name = "tbwriter/tensorboard_subset.proto"
    fdp.package = _PACKAGE
    fdp.syntax = "proto3"

    _enum(fdp, "DataType", {"DT_INVALID": DT_INVALID, "DT_FLOAT": DT_FLOAT, "DT_DOUBLE": DT_DOUBLE, "DT_STRING": DT_STRING})
    _enum(
        fdp,
        "DataClass",
        {
            "DATA_CLASS_UNKNOWN": DATA_CLASS_UNKNOWN,
            "DATA_CLASS_SCALAR": DATA_CLASS_SCALAR,
            "DATA_CLASS_TENSOR": DATA_CLASS_TENSOR,
            "DATA_CLASS_BLOB_SEQUENCE": DATA_CLASS_BLOB_SEQUENCE,
        },
    )

    shape = fdp.message_type.add()
    shape.name = "TensorShapeProto"
    dim = shape.nested_type.add()
    dim.name = "Dim"
    _field(dim, "size", 1, _FDP.TYPE_INT64)
    _field(dim, "name", 2, _FDP.TYPE_STRING)
    _field(shape, "dim", 2, _FDP.TYPE_MESSAGE, repeated=True, type_name="TensorShapeProto.Dim")
    _field(shape, "unknown_rank", 3, _FDP.TYPE_BOOL)

    tensor = fdp.message_type.add()
    tensor.name = "TensorProto"
    _field(tensor, "dtype", 1, _FDP.TYPE_ENUM, type_name="DataType")
    _field(tensor, "tensor_shape", 2, _FDP.TYPE_MESSAGE, type_name="TensorShapeProto")
    _field(tensor, "version_number", 3, _FDP.TYPE_INT32)
    _field(tensor, "tensor_content", 4, _FDP.TYPE_BYTES)
    _field(tensor, "float_val", 5, _FDP.TYPE_FLOAT, repeated=True)
    _field(tensor, "double_val", 6, _FDP.TYPE_DOUBLE, repeated=True)
    _field(tensor, "string_val", 8, _FDP.TYPE_BYTES, repeated=True)

    histo = fdp.message_type.add()
    histo.name = "HistogramProto"
    _field(histo, "min", 1, _FDP.TYPE_DOUBLE)
    _field(histo, "max", 2, _FDP.TYPE_DOUBLE)
    _field(histo, "num", 3, _FDP.TYPE_DOUBLE)
    _field(histo, "sum", 4, _FDP.TYPE_DOUBLE)
    _field(histo, "sum_squares", 5, _FDP.TYPE_DOUBLE)
    _field(histo, "bucket_limit", 6, _FDP.TYPE_DOUBLE, repeated=True)
    _field(histo, "bucket", 7, _FDP.TYPE_DOUBLE, repeated=True)

    meta = fdp.message_type.add()
    meta.name = "SummaryMetadata"
    plugin = meta.nested_type.add()
    plugin.name = "PluginData"
    _field(plugin, "plugin_name", 1, _FDP.TYPE_STRING)
    _field(plugin, "content", 2, _FDP.TYPE_BYTES)
    _field(meta, "plugin_data", 1, _FDP.TYPE_MESSAGE, type_name="SummaryMetadata.PluginData")
    _field(meta, "display_name", 2, _FDP.TYPE_STRING)
    _field(meta, "summary_description", 3, _FDP.TYPE_STRING)
    _field(meta, "data_class", 4, _FDP.TYPE_ENUM, type_name="DataClass")

    summary = fdp.message_type.add()
    summary.name = "Summary"
    value = summary.nested_type.add()
    value.name = "Value"
    value.oneof_decl.add().name = "value"
    _field(value, "tag", 1, _FDP.TYPE_STRING)
    _field(value, "simple_value", 2, _FDP.TYPE_FLOAT, oneof_index=0)
    _field(value, "histo", 5, _FDP.TYPE_MESSAGE, type_name="HistogramProto", oneof_index=0)
    _field(value, "node_name", 7, _FDP.TYPE_STRING)
    _field(value, "tensor", 8, _FDP.TYPE_MESSAGE, type_name="TensorProto", oneof_index=0)
    _field(value, "metadata", 9, _FDP.TYPE_MESSAGE, type_name="SummaryMetadata")
    _field(summary, "value", 1, _FDP.TYPE_MESSAGE, repeated=True, type_name="Summary.Value")

    source = fdp.message_type.add()
    source.name = "SourceMetadata"
    _field(source, "writer", 1, _FDP.TYPE_STRING)

    event = fdp.message_type.add()
    event.name = "Event"
    event.oneof_decl.add().name = "what"
    _field(event, "wall_time", 1, _FDP.TYPE_DOUBLE)
    _field(event, "step", 2, _FDP.TYPE_INT64)
    _field(event, "file_version", 3, _FDP.TYPE_STRING, oneof_index=0)
    _field(event, "summary", 5, _FDP.TYPE_MESSAGE, type_name="Summary", oneof_index=0)
    _field(event, "source_metadata", 10, _FDP.TYPE_MESSAGE, type_name="SourceMetadata")

    return fdp


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str) -> Any:
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}"))


TensorShapeProto = _message_class("TensorShapeProto")
TensorShapeDim = _message_class("TensorShapeProto.Dim")
TensorProto = _message_class("TensorProto")
HistogramProto = _message_class("HistogramProto")
SummaryMetadata = _message_class("SummaryMetadata")
PluginData = _message_class("SummaryMetadata.PluginData")
Summary = _message_class("Summary")
SummaryValue = _message_class("Summary.Value")
SourceMetadata = _message_class("SourceMetadata")
Event = _message_class("Event")


def encode(msg: message.Message) -> bytes:
    return msg.SerializeToString()


def decode_event(data: bytes) -> Any:
    event = Event()
    event.ParseFromString(data)
    return event
