"""
Wireframe and billboard geometry for diagram elements.

Every builder is a pure function returning numpy arrays: float32 vertex data
and uint16 indices, ready for :func:`uml2gltf.buffers.pack_buffer`.
"""

from collections import namedtuple

import numpy as np

# Fixed cube edge for every class, regardless of member count
CLASS_BOX_SIZE = 2.5

INTERFACE_WIDTH = 2.0
INTERFACE_DEPTH = 0.5
INTERFACE_HEADER_HEIGHT = 0.4
INTERFACE_OPERATION_HEIGHT = 0.2

ENUM_WIDTH = 1.5
ENUM_DEPTH = 0.4
ENUM_HEADER_HEIGHT = 0.3
ENUM_LITERAL_HEIGHT = 0.15

TEXT_QUAD_SIZE = 2.4

# Emissive colors per element kind
CLASS_COLOR = (0.2, 0.6, 0.8)
INTERFACE_COLOR = (0.8, 0.6, 0.2)
ENUM_COLOR = (0.6, 0.8, 0.6)

# Position accessor bounds per element kind; fixed, and smaller than the
# real interface/enum extents (see compartment_dimensions)
CLASS_BOUNDS = ([-1.25, -1.25, -1.25], [1.25, 1.25, 1.25])
INTERFACE_BOUNDS = ([-1.0, -0.4, -0.25], [1.0, 0.4, 0.25])
ENUM_BOUNDS = ([-0.75, -0.3, -0.2], [0.75, 0.3, 0.2])
TEXT_QUAD_BOUNDS = ([-1.2, -1.2, 0.0], [1.2, 1.2, 0.0])

# 12 edges of a box: bottom ring, top ring, verticals
BOX_EDGES = [
    0, 1, 1, 2, 2, 3, 3, 0,
    4, 5, 5, 6, 6, 7, 7, 4,
    0, 4, 1, 5, 2, 6, 3, 7,
]

CompartmentDimensions = namedtuple(
    "CompartmentDimensions", ["width", "height", "depth", "header_height", "body_height", "divider_height"]
)


def _box_corners(w, h, d):
    """Corner positions for a box with the given half extents"""
    return [
        # Bottom 4 corners
        [-w, -h, d],   # 0: front-left-bottom
        [w, -h, d],    # 1: front-right-bottom
        [w, -h, -d],   # 2: back-right-bottom
        [-w, -h, -d],  # 3: back-left-bottom
        # Top 4 corners
        [-w, h, d],    # 4: front-left-top
        [w, h, d],     # 5: front-right-top
        [w, h, -d],    # 6: back-right-top
        [-w, h, -d],   # 7: back-left-top
    ]


def simple_wireframe_box(width, height, depth):
    """
    Create the 12 edges of an axis-aligned box centered at the origin.

    Parameters:
        width, height, depth: full box extents along X, Y and Z

    Returns:
        tuple: ((8, 3) float32 vertices, (24,) uint16 line indices)
    """
    w, h, d = np.float32(width) / 2, np.float32(height) / 2, np.float32(depth) / 2
    vertices = np.array(_box_corners(w, h, d), dtype=np.float32)
    indices = np.array(BOX_EDGES, dtype=np.uint16)
    return vertices, indices


def wireframe_box(width, height, depth, divider_heights):
    """
    Create a box wireframe with horizontal divider rings.

    Parameters:
        width, height, depth: full box extents along X, Y and Z
        divider_heights: distance of each divider below the previous one,
            starting at the top face

    Returns:
        tuple: ((8 + 4n, 3) float32 vertices, (24 + 8n,) uint16 line indices)

    Notes:
        Divider ``i`` uses vertices ``8 + 4*i`` .. ``8 + 4*i + 3`` ordered
        front-left, front-right, back-right, back-left, and its 4 edges are
        appended after the 12 box edges.
    """
    w, h, d = np.float32(width) / 2, np.float32(height) / 2, np.float32(depth) / 2

    vertices = _box_corners(w, h, d)
    y = h
    for divider in divider_heights:
        y = np.float32(y - np.float32(divider))
        vertices.extend([[-w, y, d], [w, y, d], [w, y, -d], [-w, y, -d]])

    indices = list(BOX_EDGES)
    for i in range(len(divider_heights)):
        base = 8 + i * 4
        indices.extend([
            base, base + 1,      # front
            base + 1, base + 2,  # right
            base + 2, base + 3,  # back
            base + 3, base,      # left
        ])

    return np.array(vertices, dtype=np.float32), np.array(indices, dtype=np.uint16)


def compartment_dimensions(width, depth, header_height, member_count, member_height):
    """
    Size a two-compartment box from its member count.

    The body gets ``member_count * member_height`` but never less than one
    member's height. ``divider_height`` is ``header + body`` and the box is
    ``header + divider_height`` tall. The ring itself is drawn
    ``header_height`` below the top, closing the name compartment.

    The fixed INTERFACE_BOUNDS / ENUM_BOUNDS written on the accessors do not
    follow these heights: an interface with 3 operations spans y in +-0.7
    while its accessor declares +-0.4, so strict validators report a min/max
    mismatch on every interface and enum.
    """
    body = member_count * member_height
    if body == 0:
        body = member_height
    divider = header_height + body
    return CompartmentDimensions(width, header_height + divider, depth, header_height, body, divider)


def interface_dimensions(operation_count):
    """Dimensions of an interface box with the given number of operations"""
    return compartment_dimensions(
        INTERFACE_WIDTH, INTERFACE_DEPTH, INTERFACE_HEADER_HEIGHT, operation_count, INTERFACE_OPERATION_HEIGHT
    )


def enum_dimensions(literal_count):
    """Dimensions of an enum box with the given number of literals"""
    return compartment_dimensions(ENUM_WIDTH, ENUM_DEPTH, ENUM_HEADER_HEIGHT, literal_count, ENUM_LITERAL_HEIGHT)


def class_wireframe():
    """Wireframe cube used for every class"""
    return simple_wireframe_box(CLASS_BOX_SIZE, CLASS_BOX_SIZE, CLASS_BOX_SIZE)


def interface_wireframe(operation_count):
    """Compartmented wireframe for an interface (name, operations)"""
    dims = interface_dimensions(operation_count)
    return wireframe_box(dims.width, dims.height, dims.depth, [dims.header_height])


def enum_wireframe(literal_count):
    """Compartmented wireframe for an enum (name, literals)"""
    dims = enum_dimensions(literal_count)
    return wireframe_box(dims.width, dims.height, dims.depth, [dims.header_height])


def billboard_quad(width=TEXT_QUAD_SIZE, height=TEXT_QUAD_SIZE):
    """
    Create a flat quad in the Z=0 plane facing +Z.

    Parameters:
        width, height: quad extents (default: 2.4 x 2.4)

    Returns:
        tuple: ((4, 5) float32 interleaved x, y, z, u, v vertices,
        (6,) uint16 triangle indices)

    Example:
        vertices, indices = billboard_quad()
        vertices[0]  # [-1.2, -1.2, 0, 0, 1], bottom-left
    """
    w, h = np.float32(width) / 2, np.float32(height) / 2
    vertices = np.array([
        [-w, -h, 0, 0, 1],  # bottom-left
        [w, -h, 0, 1, 1],   # bottom-right
        [w, h, 0, 1, 0],    # top-right
        [-w, h, 0, 0, 0],   # top-left
    ], dtype=np.float32)
    indices = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint16)
    return vertices, indices


def class_label_text(uml_class):
    """
    Build the multi-line label shown on a class.

    Name, optional URL, ``---``, one ``name: type`` line per attribute,
    ``---``, one ``name(): returnType`` line per operation.
    """
    lines = [uml_class.name]
    if uml_class.url:
        lines.append(uml_class.url)
    lines.append("---")
    lines.extend(f"{attr.name}: {attr.type}" for attr in uml_class.attributes)
    lines.append("---")
    lines.extend(f"{op.name}(): {op.return_type}" for op in uml_class.operations)
    return "\n".join(lines)
