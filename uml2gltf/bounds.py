"""Scene bounds and camera hints computed from node translations."""

# Approximate footprint of every node, whatever its mesh
NODE_HALF_EXTENTS = (2.0, 2.0, 0.5)

CAMERA_DISTANCE_FACTOR = 2.5
MIN_CAMERA_DISTANCE = 3.0
CAMERA_ORBIT_ANGLES = (45, 55)  # theta, phi in degrees


def calculate_scene_bounds(gltf):
    """
    Compute the bounding box of all translated nodes and a camera placement.

    Parameters:
        gltf: pygltflib.GLTF2 asset whose nodes carry translations

    Returns:
        dict: ``{"bounds": {min, max, center, size}, "recommended":
        {distance, target, orbit}}`` or None when no node has a translation
    """
    lo = [float("inf")] * 3
    hi = [float("-inf")] * 3

    for node in gltf.nodes:
        if not node.translation or len(node.translation) != 3:
            continue
        for axis, (value, half) in enumerate(zip(node.translation, NODE_HALF_EXTENTS)):
            lo[axis] = min(lo[axis], value - half)
            hi[axis] = max(hi[axis], value + half)

    if lo[0] == float("inf"):
        return None

    center = [(a + b) / 2 for a, b in zip(lo, hi)]
    size = [b - a for a, b in zip(lo, hi)]

    distance = max(max(size[0], size[1]) * CAMERA_DISTANCE_FACTOR, MIN_CAMERA_DISTANCE)

    return {
        "bounds": {
            "min": lo,
            "max": hi,
            "center": center,
            "size": size,
        },
        "recommended": {
            "distance": distance,
            "target": list(center),
            "orbit": [*CAMERA_ORBIT_ANGLES, distance],
        },
    }
