"""Tests for spatial and graph clustering."""

import pytest

from archivist.clustering.graph import concept_graph_from_notes, find_concept_clusters, related_concepts
from archivist.clustering.spatial import activity_insights, detect_regions, generate_heatmap
from archivist.models import ConceptNode, Note, Position


def _spread_positions():
    return [
        Position(0, 0, "n1"),
        Position(10, 10, "n2"),
        Position(900, 900, "n3"),
        Position(890, 880, "n3"),
        Position(450, 0, "n4"),
    ]


def test_compact_positions_form_one_region():
    positions = [Position(x, y, f"n{i}") for i, (x, y) in enumerate([(0, 0), (10, 10), (5, 5), (2, 8), (9, 1)])]
    regions = detect_regions(positions)
    assert len(regions) == 1
    assert regions[0].event_count == 5
    assert regions[0].owner_ids == ["n0", "n1", "n2", "n3", "n4"]
    assert (regions[0].x, regions[0].y, regions[0].width, regions[0].height) == (0, 0, 10, 10)


def test_no_positions():
    assert detect_regions([]) == []
    assert generate_heatmap([]) == []
    assert activity_insights([]) == []


def test_grid_regions():
    regions = detect_regions(_spread_positions())
    assert len(regions) == 2
    first, second = regions
    assert (first.x, first.y) == (0, 0)
    assert first.owner_ids == ["n1", "n2"]
    assert first.width == pytest.approx(300)
    # The far corner is clamped into the last cell of the 3x3 grid
    assert (second.x, second.y) == (pytest.approx(600), pytest.approx(600))
    assert second.event_count == 2
    assert second.owner_ids == ["n3"]


def test_regions_sorted_busiest_first():
    positions = _spread_positions() + [Position(880, 890, "n5")]
    regions = detect_regions(positions)
    assert [r.event_count for r in regions] == [3, 2]


def test_heatmap_normalized():
    cells = generate_heatmap(_spread_positions(), grid_size=10)
    assert max(c.intensity for c in cells) == 1.0
    assert all(0 < c.intensity <= 1 for c in cells)


def test_insights_clustered():
    insights = activity_insights(_spread_positions())
    assert [i.title for i in insights] == ["Ideas Clustered"]
    assert insights[0].metric == 2


def test_insights_hotspot():
    positions = [Position(i, i, f"n{i % 3}") for i in range(7)]
    insights = activity_insights(positions)
    assert [i.title for i in insights] == ["Activity Hotspot"]
    assert insights[0].metric == 7
    assert sorted(insights[0].owner_ids) == ["n0", "n1", "n2"]


def test_connected_components():
    nodes = [
        ConceptNode("A", ["B"]),
        ConceptNode("B", ["C"]),
        ConceptNode("C"),
        ConceptNode("D"),
    ]
    clusters = find_concept_clusters(nodes)
    assert len(clusters) == 1
    assert set(clusters[0].concept_ids) == {"A", "B", "C"}


def test_edges_are_undirected():
    # D only points at A; A lists nothing
    nodes = [ConceptNode("A"), ConceptNode("D", ["A"])]
    clusters = find_concept_clusters(nodes)
    assert [set(c.concept_ids) for c in clusters] == [{"A", "D"}]


def test_clusters_sorted_by_size():
    nodes = [
        ConceptNode("x", ["y"]),
        ConceptNode("y"),
        ConceptNode("a", ["b", "c"]),
        ConceptNode("b"),
        ConceptNode("c"),
    ]
    assert [c.size for c in find_concept_clusters(nodes)] == [3, 2]


def test_unknown_related_ids_ignored():
    assert find_concept_clusters([ConceptNode("A", ["missing"])]) == []


def test_graph_from_wikilinks():
    notes = [
        Note(id="1", title="Alpha", content="see [[beta]]"),
        Note(id="2", title="Beta", content="nothing"),
        Note(id="3", title="Gamma", content="links to [[Nowhere]]"),
    ]
    nodes = concept_graph_from_notes(notes)
    assert nodes[0].related_ids == ["2"]
    assert nodes[2].related_ids == []
    clusters = find_concept_clusters(nodes)
    assert [c.concept_ids for c in clusters] == [["1", "2"]]


def test_related_concepts_by_distance():
    notes = [
        Note(id="1", title="A", content="[[B]]"),
        Note(id="2", title="B", content="[[C]]"),
        Note(id="3", title="C", content=""),
        Note(id="4", title="D", content="backlink to [[A]]"),
    ]
    nodes = concept_graph_from_notes(notes)
    assert related_concepts(nodes, "1", depth=2) == {1: ["2", "4"], 2: ["3"]}
    assert related_concepts(nodes, "1") == {1: ["2", "4"]}


def test_related_concepts_stops_at_graph_edge():
    nodes = [ConceptNode("A", ["B"]), ConceptNode("B", ["A"])]
    assert related_concepts(nodes, "A", depth=3) == {1: ["B"], 2: [], 3: []}
    assert related_concepts(nodes, "missing") == {}


def test_clustering_idempotent():
    positions = _spread_positions()
    assert detect_regions(positions) == detect_regions(positions)

    nodes = [ConceptNode("A", ["B"]), ConceptNode("B", ["C"]), ConceptNode("C"), ConceptNode("D", ["E"]), ConceptNode("E")]
    assert find_concept_clusters(nodes) == find_concept_clusters(nodes)
