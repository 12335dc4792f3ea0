"""Spatial and graph clustering."""

from .graph import concept_graph_from_notes, find_concept_clusters, related_concepts
from .spatial import activity_insights, detect_regions, generate_heatmap

__all__ = [
    "activity_insights",
    "concept_graph_from_notes",
    "detect_regions",
    "find_concept_clusters",
    "generate_heatmap",
    "related_concepts",
]
