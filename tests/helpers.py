from __future__ import annotations

import numpy as np
import pyvista as pv

from botpath.mesh import ModelChunk


def is_watertight(mesh: pv.DataSet) -> tuple[bool, int]:
    edges = mesh.extract_feature_edges(boundary_edges=True, feature_edges=False, non_manifold_edges=True, manifold_edges=False)
    open_edges = edges.n_cells
    return open_edges == 0, open_edges

def radial_distances(points: np.ndarray, center: np.ndarray) -> np.ndarray:
    return np.linalg.norm(np.asarray(points) - np.asarray(center), axis=1)

def chunk_materials(chunk: ModelChunk) -> list[str]:
    return [tri.material for tri in chunk.triangles]
