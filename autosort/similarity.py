# autosort/similarity.py
"""Score how similar two content signatures are."""

import json

from autosort.errors import AnalysisError
from autosort.models import ContentSignature


def relation_label(similarity: float) -> str:
    """Coarse label for a text similarity score."""
    if similarity >= 0.9:
        return "nearly_identical"
    if similarity >= 0.7:
        return "very_similar"
    if similarity >= 0.5:
        return "similar"
    if similarity >= 0.3:
        return "somewhat_similar"
    return "different"


def frequency_similarity(freq_a: dict, freq_b: dict) -> float:
    """
    Dot product over the product of the two sums of squared counts.

    Magnitudes are sums of squares, not their roots: large count vectors
    score far below 1.0 even when proportional.
    """
    dot = sum(count * freq_b[word] for word, count in freq_a.items() if word in freq_b)
    magnitude_a = sum(count * count for count in freq_a.values())
    magnitude_b = sum(count * count for count in freq_b.values())
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    return dot / (magnitude_a * magnitude_b)


def _load_frequencies(sig: ContentSignature) -> dict:
    try:
        freq = json.loads(sig.signature)
    except json.JSONDecodeError as e:
        raise AnalysisError(f"failed to parse text signature ({e})", sig.file_path) from e
    if not isinstance(freq, dict):
        raise AnalysisError("text signature is not a frequency map", sig.file_path)
    return freq


def compare_signatures(sig_a: ContentSignature, sig_b: ContentSignature) -> tuple[float, str]:
    """
    Returns:
        (similarity in [0, 1], relation label)

    Raises AnalysisError when a text payload cannot be parsed.
    """
    if sig_a.signature_type != sig_b.signature_type:
        return 0.0, "different_types"

    if sig_a.signature == sig_b.signature:
        return 1.0, "identical"

    if sig_a.signature_type != "text":
        return 0.0, "different"

    similarity = frequency_similarity(_load_frequencies(sig_a), _load_frequencies(sig_b))
    return similarity, relation_label(similarity)
