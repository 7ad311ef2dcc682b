"""
Normal visualization geometry.

Builds the line segments a debug renderer draws to show face and vertex normals
of a mesh, from its raw vertex / normal / triangle buffers. Segments are
returned in mesh-local space as arrays of shape (N, 2, 3): [start, end].
"""

# Third-party imports
import numpy as np


def triangle_normal_segments(vertices, triangles, length: float = 0.1) -> np.ndarray:
    """
    One segment per triangle, from its centroid along its unit face normal.

    Args:
        vertices: Array-like of shape (V, 3).
        triangles: Flat index buffer, 3 indices per triangle (or shape (T, 3)).
        length: Segment length.

    Returns:
        np.ndarray: Shape (T, 2, 3). Degenerate triangles give zero-length segments.

    Raises:
        ValueError: If the index buffer length is not a multiple of 3.
    """
    verts = np.asarray(vertices, dtype=float).reshape(-1, 3)
    indices = np.asarray(triangles, dtype=np.int64).ravel()
    if indices.size % 3 != 0:
        raise ValueError(f"Triangle index count must be a multiple of 3, got {indices.size}")

    faces = verts[indices.reshape(-1, 3)]
    v0, v1, v2 = faces[:, 0], faces[:, 1], faces[:, 2]
    centers = (v0 + v1 + v2) / 3.0

    face_normals = np.cross(v1 - v0, v2 - v0)
    norms = np.linalg.norm(face_normals, axis=1, keepdims=True)
    unit = np.divide(face_normals, norms, out=np.zeros_like(face_normals), where=norms > 0)

    return np.stack([centers, centers + unit * length], axis=1)


def vertex_normal_segments(vertices, normals, length: float = 0.1) -> np.ndarray:
    """
    One segment per vertex, from the vertex along its stored normal.

    Normals are used as stored (not re-normalized).

    Raises:
        ValueError: If vertices and normals have different counts.
    """
    verts = np.asarray(vertices, dtype=float).reshape(-1, 3)
    norms = np.asarray(normals, dtype=float).reshape(-1, 3)
    if verts.shape != norms.shape:
        raise ValueError(f"Got {len(verts)} vertices but {len(norms)} normals")

    return np.stack([verts, verts + norms * length], axis=1)
