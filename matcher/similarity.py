# matcher/similarity.py
import numpy as np


def cosine_similarity(a, b) -> float:
    """
    Cosine similarity of two feature vectors.

    Vectors of different length are incomparable and score 0. A vector
    with zero norm has no similarity to anything and also scores 0.
    """
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        return 0.0

    # Scale by the largest magnitude first so squaring neither underflows nor overflows.
    scale_a = np.max(np.abs(a)) if a.size else 0.0
    scale_b = np.max(np.abs(b)) if b.size else 0.0
    if scale_a == 0.0 or scale_b == 0.0:
        return 0.0
    a = a / scale_a
    b = b / scale_b

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    score = float(np.dot(a, b) / (norm_a * norm_b))
    if np.isnan(score):
        return 0.0
    return score
