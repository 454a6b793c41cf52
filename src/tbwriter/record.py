from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Literal

from tbwriter.masked_crc import masked_crc32c

# All fixed-width fields are little endian.
LENGTH_FMT = "<Q"
CRC_FMT = "<I"
LENGTH_SIZE = struct.calcsize(LENGTH_FMT)
CRC_SIZE = struct.calcsize(CRC_FMT)
HEADER_SIZE = LENGTH_SIZE + CRC_SIZE
READ_CHUNK = 1 << 20

ChecksumField = Literal["length", "data"]


class RecordError(RuntimeError):
    pass


class EndOfStream(RecordError):
    """Raised when a read starts exactly at the end of the stream."""


class TruncatedRecordError(RecordError):
    pass


class ChecksumMismatchError(RecordError):
    def __init__(self, field: ChecksumField, expected: int, actual: int) -> None:
        super().__init__(f"{field} checksum mismatch: stored=0x{expected:08x} computed=0x{actual:08x}")
        self.field = field
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class TfRecord:
    """
    One framed record:

        [length: u64][masked_crc(length bytes): u32][data][masked_crc(data): u32]
    """

    length: int
    length_crc: int
    data: bytes
    data_crc: int

    @classmethod
    def from_data(cls, data: bytes) -> "TfRecord":
        data = bytes(data)
        length_bytes = struct.pack(LENGTH_FMT, len(data))
        return cls(
            length=len(data),
            length_crc=masked_crc32c(length_bytes),
            data=data,
            data_crc=masked_crc32c(data),
        )

    def to_bytes(self) -> bytes:
        return b"".join(
            [
                struct.pack(LENGTH_FMT, self.length),
                struct.pack(CRC_FMT, self.length_crc),
                self.data,
                struct.pack(CRC_FMT, self.data_crc),
            ]
        )

    def write(self, sink: BinaryIO) -> None:
        # One write per record; a failure leaves the stream in an unknown state.
        sink.write(self.to_bytes())


def write_record(sink: BinaryIO, data: bytes) -> None:
    TfRecord.from_data(data).write(sink)


def _read_exact(source: BinaryIO, n: int, what: str) -> bytes:
    # Bounded reads: a declared length is untrusted until the data checksum matches.
    buf = bytearray()
    while len(buf) < n:
        chunk = source.read(min(n - len(buf), READ_CHUNK))
        if not chunk:
            raise TruncatedRecordError(f"Truncated record: expected {n} bytes of {what}, got {len(buf)}")
        buf += chunk
    return bytes(buf)


def read_record(source: BinaryIO) -> bytes:
    first = source.read(LENGTH_SIZE)
    if not first:
        raise EndOfStream("No more records")
    if len(first) < LENGTH_SIZE:
        first += _read_exact(source, LENGTH_SIZE - len(first), "length")

    stored_length_crc = struct.unpack(CRC_FMT, _read_exact(source, CRC_SIZE, "length checksum"))[0]
    actual_length_crc = masked_crc32c(first)
    if stored_length_crc != actual_length_crc:
        raise ChecksumMismatchError("length", stored_length_crc, actual_length_crc)

    (length,) = struct.unpack(LENGTH_FMT, first)
    data = _read_exact(source, length, "data")
    stored_data_crc = struct.unpack(CRC_FMT, _read_exact(source, CRC_SIZE, "data checksum"))[0]
    actual_data_crc = masked_crc32c(data)
    if stored_data_crc != actual_data_crc:
        raise ChecksumMismatchError("data", stored_data_crc, actual_data_crc)
    return data


def iter_records(source: BinaryIO) -> Iterator[bytes]:
    while True:
        try:
            data = read_record(source)
        except EndOfStream:
            return
        yield data
