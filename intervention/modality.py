"""
Modality Similarity

Compares the behavioural fingerprints of two activities.
"""

import math

import numpy as np

from intervention.models import ModalityVector

MODALITY_AXES = [
    'passive_active',
    'novel_familiar',
    'social_solo',
    'finite_infinite',
    'expressive_consumptive',
]

# Each axis spans [-1, 1], so the largest squared difference per axis is 4
MAX_DISTANCE = math.sqrt(4 * len(MODALITY_AXES))


def to_array(vector: ModalityVector) -> np.ndarray:
    """Convert a ModalityVector to a numpy array in MODALITY_AXES order."""
    return np.array([getattr(vector, axis) for axis in MODALITY_AXES], dtype=float)


def calculate_modality_similarity(a: ModalityVector, b: ModalityVector) -> float:
    """
    Similarity between two modality vectors.

    Euclidean distance normalized by the maximum possible distance (sqrt(20)),
    mapped to 1 - distance / max_distance.

    Returns:
        Similarity in [0.0, 1.0]; identical vectors give 1.0
    """
    distance = float(np.linalg.norm(to_array(a) - to_array(b)))
    similarity = 1.0 - distance / MAX_DISTANCE
    return max(0.0, min(1.0, similarity))
