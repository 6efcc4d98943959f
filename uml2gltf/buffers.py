"""
Packing of vertex and index arrays into single glTF buffers.

A packed buffer holds little-endian float32 vertex data from byte 0 and
little-endian uint16 indices from the next 4-byte boundary.
"""

import base64
from collections import namedtuple
from dataclasses import dataclass

import numpy as np

from .errors import LayoutRecoveryError

DATA_URI_PREFIX = "data:application/octet-stream;base64,"

POSITION_STRIDE = 3 * 4
INDEX_SIZE = 2

# Search window used when recovering a layout from a byte length
MAX_RECOVERED_VERTICES = 100
TARGET_INDEX_RATIO = 2.5

BufferLayout = namedtuple("BufferLayout", ["vertex_count", "index_count", "vertex_bytes", "index_offset"])


def align4(n):
    """Round ``n`` up to the next multiple of 4"""
    return (n + 3) & ~3


@dataclass(frozen=True)
class PackedBuffer:
    """Packed vertex and index data together with the counts that produced it."""

    data: bytes
    vertex_count: int
    index_count: int
    stride: int = POSITION_STRIDE

    @property
    def vertex_bytes(self):
        return self.vertex_count * self.stride

    @property
    def index_offset(self):
        return align4(self.vertex_bytes)

    @property
    def index_bytes(self):
        return self.index_count * INDEX_SIZE

    @property
    def byte_length(self):
        return len(self.data)

    @property
    def interleaved(self):
        return self.stride != POSITION_STRIDE

    def to_data_uri(self):
        return DATA_URI_PREFIX + base64.b64encode(self.data).decode("ascii")

    @classmethod
    def from_bytes(cls, data):
        """
        Wrap a position-only buffer whose counts are unknown.

        Interleaved buffers (text quads) cannot be told apart by length alone;
        they are rejected once the recovered index region points past the
        recovered vertices.

        Raises:
            LayoutRecoveryError: if no layout fits, or the best fit yields
                out-of-range indices
        """
        layout = recover_layout(len(data))
        packed = cls(bytes(data), layout.vertex_count, layout.index_count)
        _, indices = unpack_buffer(packed)
        if indices.size and int(indices.max()) >= packed.vertex_count:
            raise LayoutRecoveryError(len(data), "indices exceed the recovered vertex count")
        return packed

    @classmethod
    def from_data_uri(cls, uri):
        return cls.from_bytes(decode_data_uri(uri))


def decode_data_uri(uri):
    """Return the bytes embedded in a base64 data URI"""
    return base64.b64decode(uri.split(",", 1)[1])


def pack_buffer(vertices, indices, stride=None):
    """
    Pack vertices and indices into one buffer.

    Parameters:
        vertices: vertex components, either flat or one row per vertex
        indices: vertex indices (must fit in 16 bits)
        stride: bytes per vertex for interleaved data; None means
            positions only (12 bytes)

    Returns:
        PackedBuffer: bytes plus the vertex and index counts

    Example:
        vertices, indices = simple_wireframe_box(2.5, 2.5, 2.5)
        packed = pack_buffer(vertices, indices)
        packed.byte_length  # 96 + 48 = 144
    """
    stride = stride or POSITION_STRIDE
    vertices = np.asarray(vertices, dtype="<f4").reshape(-1, stride // 4)
    indices = np.asarray(indices, dtype="<u2").ravel()

    vertex_bytes = vertices.nbytes
    index_offset = align4(vertex_bytes)

    data = bytearray(index_offset + indices.nbytes)
    data[:vertex_bytes] = vertices.tobytes()
    data[index_offset:] = indices.tobytes()

    return PackedBuffer(bytes(data), len(vertices), len(indices), stride)


def unpack_buffer(packed):
    """
    Read the vertex and index arrays back out of a packed buffer.

    Returns:
        tuple: ((vertex_count, stride/4) float32 vertices, (index_count,) uint16 indices)
    """
    vertices = np.frombuffer(packed.data, dtype="<f4", count=packed.vertex_bytes // 4)
    indices = np.frombuffer(packed.data, dtype="<u2", count=packed.index_count, offset=packed.index_offset)
    return vertices.reshape(-1, packed.stride // 4), indices


def _candidate_layouts(byte_length):
    """Yield every position-only layout that fits ``byte_length`` exactly"""
    for vc in range(1, MAX_RECOVERED_VERTICES + 1):
        vertex_bytes = vc * POSITION_STRIDE
        index_offset = align4(vertex_bytes)
        if index_offset >= byte_length:
            break
        remaining = byte_length - index_offset
        if remaining % INDEX_SIZE == 0:
            yield BufferLayout(vc, remaining // INDEX_SIZE, vertex_bytes, index_offset)


def recover_layout(byte_length):
    """
    Guess vertex and index counts of a position-only buffer from its length.

    Prefers layouts with 2 to 6 indices per vertex whose ratio is closest to
    2.5, as produced by wireframe boxes with or without dividers. Without such
    a layout, falls back to the largest vertex count leaving at least 2
    indices.

    Parameters:
        byte_length: total length of the packed buffer

    Returns:
        BufferLayout: (vertex_count, index_count, vertex_bytes, index_offset)

    Raises:
        LayoutRecoveryError: if no layout fits the length at all
    """
    candidates = list(_candidate_layouts(byte_length))

    best = None
    for layout in candidates:
        if not 2 * layout.vertex_count <= layout.index_count <= 6 * layout.vertex_count:
            continue
        diff = abs(layout.index_count / layout.vertex_count - TARGET_INDEX_RATIO)
        if best is None or diff < abs(best.index_count / best.vertex_count - TARGET_INDEX_RATIO):
            best = layout
    if best is not None:
        return best

    fallback = [layout for layout in candidates if layout.index_count >= 2]
    if not fallback:
        raise LayoutRecoveryError(byte_length)
    return fallback[-1]
