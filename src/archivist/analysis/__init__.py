"""Pure note analysis passes: similarity, duplicates, contradictions, merges, links."""

from .connections import suggest_connections
from .contradictions import build_topic_groups, detect_contradictions
from .duplicates import detect_duplicates
from .merges import detect_merge_candidates
from .similarity import DimensionMismatch, cosine_similarity, jaccard_similarity

__all__ = [
    "DimensionMismatch",
    "build_topic_groups",
    "cosine_similarity",
    "detect_contradictions",
    "detect_duplicates",
    "detect_merge_candidates",
    "jaccard_similarity",
    "suggest_connections",
]
