import base64
import struct


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def dims_b64(*shape: int) -> str:
    return b64(struct.pack(f"<{len(shape)}q", *shape))


def values_b64(*values: float) -> str:
    return b64(struct.pack(f"<{len(values)}f", *values))
