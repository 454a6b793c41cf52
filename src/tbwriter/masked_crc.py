from __future__ import annotations

CRC32C_POLY = 0x82F63B78
MASK_DELTA = 0xA282EAD8


def _crc32c_entry(i: int) -> int:
    crc = i
    for _ in range(8):
        if crc & 1:
            crc = (crc >> 1) ^ CRC32C_POLY
        else:
            crc >>= 1
    return crc & 0xFFFFFFFF


# Built once at import; read-only afterwards, so safe to share across threads.
CRC32C_TABLE: tuple[int, ...] = tuple(_crc32c_entry(i) for i in range(256))


def crc32c(data: bytes) -> int:
    """
    CRC-32C (Castagnoli) of `data`. Not the zlib/IEEE CRC-32.
    """

    crc = 0xFFFFFFFF
    for byte in data:
        crc = CRC32C_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return (~crc) & 0xFFFFFFFF


def mask_crc(crc: int) -> int:
    # Rotate right by 15, then add the delta; everything wraps at 32 bits.
    crc &= 0xFFFFFFFF
    rotated = ((crc >> 15) | (crc << 17)) & 0xFFFFFFFF
    return (rotated + MASK_DELTA) & 0xFFFFFFFF


def masked_crc32c(data: bytes) -> int:
    return mask_crc(crc32c(data))
