"""Concept graph construction and traversal."""

from collections import deque
from typing import Sequence

from ..analysis.connections import find_wikilinks
from ..models import ConceptCluster, ConceptNode, Note


def _adjacency(nodes: Sequence[ConceptNode]) -> dict[str, list[str]]:
    """Undirected adjacency list. Links to unknown ids are dropped."""
    adjacency: dict[str, list[str]] = {node.id: [] for node in nodes}
    for node in nodes:
        for related in node.related_ids:
            if related == node.id or related not in adjacency:
                continue
            if related not in adjacency[node.id]:
                adjacency[node.id].append(related)
            if node.id not in adjacency[related]:
                adjacency[related].append(node.id)
    return adjacency


def find_concept_clusters(nodes: Sequence[ConceptNode]) -> list[ConceptCluster]:
    """Connected components of the concept graph.

    Edges are treated as undirected. Components with a single node are
    left out; the rest are sorted largest first.
    """
    adjacency = _adjacency(nodes)
    visited: set[str] = set()
    clusters = []

    for start in adjacency:
        if start in visited:
            continue
        visited.add(start)
        component = []
        queue = deque([start])
        while queue:
            current = queue.popleft()
            component.append(current)
            for neighbour in adjacency[current]:
                if neighbour not in visited:
                    visited.add(neighbour)
                    queue.append(neighbour)
        if len(component) > 1:
            clusters.append(ConceptCluster(concept_ids=component))

    clusters.sort(key=lambda c: c.size, reverse=True)
    return clusters


def concept_graph_from_notes(notes: Sequence[Note]) -> list[ConceptNode]:
    """One node per note, related to the notes its wikilinks point at.

    Link targets are matched against note titles case-insensitively;
    links to missing notes are ignored.
    """
    by_title = {note.title.casefold(): note.id for note in notes}
    nodes = []
    for note in notes:
        related = []
        for target in find_wikilinks(note.content):
            target_id = by_title.get(target.casefold())
            if target_id and target_id != note.id and target_id not in related:
                related.append(target_id)
        nodes.append(ConceptNode(id=note.id, related_ids=related, name=note.title))
    return nodes


def related_concepts(nodes: Sequence[ConceptNode], start_id: str, depth: int = 1) -> dict[int, list[str]]:
    """Concepts reachable from start_id, grouped by hop distance.

    Edges are undirected, as in find_concept_clusters, so backlinks count.
    Each concept appears once, at its shortest distance. Levels past the
    last reachable concept are empty lists.
    """
    adjacency = _adjacency(nodes)
    if start_id not in adjacency:
        return {}

    visited = {start_id}
    frontier = [start_id]
    levels: dict[int, list[str]] = {}
    for d in range(1, depth + 1):
        next_level = []
        for current in frontier:
            for neighbour in adjacency[current]:
                if neighbour not in visited:
                    visited.add(neighbour)
                    next_level.append(neighbour)
        levels[d] = sorted(next_level)
        frontier = next_level
    return levels
