"""CLI entry point for the note archivist."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import load_config, section

console = Console()


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """Note Archivist - find duplicates, contradictions and clusters in your notes."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _get_config(ctx) -> dict:
    try:
        return load_config(ctx.obj.get("config_path"))
    except ValueError as e:
        raise click.ClickException(str(e))


def _load_notes(config: dict) -> list:
    from .storage import get_note_repository

    try:
        repository = get_note_repository(config)
    except ValueError as e:
        raise click.ClickException(str(e))
    return repository.list()


def _load_embeddings(path: str) -> dict[str, list[float]]:
    """Read `{note_id: vector}` or `[{"note_id": ..., "vector": [...]}, ...]` JSON."""
    from .models import EmbeddingVector

    try:
        data = json.loads(Path(path).read_text())
        if isinstance(data, dict):
            records = [EmbeddingVector(note_id=str(k), vector=list(v)) for k, v in data.items()]
        elif isinstance(data, list):
            records = [
                EmbeddingVector(note_id=str(r.get("note_id", r.get("noteId"))), vector=list(r["vector"]))
                for r in data
            ]
        else:
            raise ValueError("expected an object or a list of records")
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError, ValueError) as e:
        raise click.ClickException(f"Invalid embeddings file: {e}")
    return {r.note_id: r.vector for r in records}


def _embedding_source(config: dict, embeddings_path: str | None):
    """Precomputed vectors from a JSON file, or a lazy sentence-transformers embedder."""
    if embeddings_path:
        return _load_embeddings(embeddings_path)

    def _embed(notes):
        try:
            from .embeddings.embedder import NoteEmbedder
            from .embeddings.store import EmbeddingCache
        except ImportError as e:
            raise click.ClickException(
                f"Embedding support is not installed ({e.name}). "
                "Install note-archivist[embeddings] or pass --embeddings."
            )
        cache = EmbeddingCache(config["chroma_path"], model_name=config["embedding_model"])
        return NoteEmbedder(config, cache=cache).embed(notes)

    return _embed


def _resolve(source, notes):
    return source(notes) if callable(source) else source


embeddings_option = click.option(
    "--embeddings", "embeddings_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file of precomputed vectors: {note_id: vector} or [{note_id, vector}, ...]",
)


@cli.command()
@embeddings_option
@click.option("--threshold", type=float, default=None, help="Minimum cosine similarity")
@click.pass_context
def duplicates(ctx, embeddings_path, threshold):
    """Find near-duplicate notes by embedding similarity."""
    from .analysis import detect_duplicates

    config = _get_config(ctx)
    notes = _load_notes(config)
    if not notes:
        console.print("[yellow]No notes found.[/]")
        return

    params = section(config, "duplicates")
    if threshold is not None:
        params["threshold"] = threshold

    vectors = _resolve(_embedding_source(config, embeddings_path), notes)
    pairs = detect_duplicates(notes, vectors, **params)
    if not pairs:
        console.print("[green]No duplicates found.[/]")
        return

    table = Table(title="Possible Duplicates")
    table.add_column("Note A", style="cyan")
    table.add_column("Note B", style="cyan")
    table.add_column("Similarity", justify="right", style="green")
    for p in pairs:
        table.add_row(p.title_a, p.title_b, f"{p.score:.3f}")
    console.print(table)


@cli.command()
@click.pass_context
def contradictions(ctx):
    """Find numeric claims that disagree across related notes."""
    from .analysis import detect_contradictions

    config = _get_config(ctx)
    notes = _load_notes(config)
    found = detect_contradictions(notes, **section(config, "contradictions"))
    if not found:
        console.print("[green]No contradictions found.[/]")
        return

    table = Table(title="Possible Contradictions")
    table.add_column("Unit", style="magenta")
    table.add_column("Note A", style="cyan")
    table.add_column("Claim A")
    table.add_column("Note B", style="cyan")
    table.add_column("Claim B")
    table.add_column("Topics", style="dim")
    for c in found:
        table.add_row(c.unit, c.title_a, c.claim_a, c.title_b, c.claim_b, ", ".join(c.topics))
    console.print(table)


@cli.command()
@click.pass_context
def merges(ctx):
    """Find notes that could be combined."""
    from .analysis import detect_merge_candidates

    config = _get_config(ctx)
    notes = _load_notes(config)
    candidates = detect_merge_candidates(notes, **section(config, "merges"))
    if not candidates:
        console.print("[green]No merge candidates found.[/]")
        return

    console.print(f"[green]✓ Found {len(candidates)} merge candidate(s)[/]")
    for m in candidates:
        label = f'prefix "{m.prefix}"' if m.kind == "shared_prefix" else f"title similarity {m.score:.2f}"
        console.print(f"  [bold]{label}[/]")
        for title in m.titles:
            console.print(f"    • {title}")


@cli.command()
@embeddings_option
@click.pass_context
def connections(ctx, embeddings_path):
    """Suggest links for notes that have no outgoing wikilinks."""
    from .analysis import suggest_connections

    config = _get_config(ctx)
    notes = _load_notes(config)
    if not notes:
        console.print("[yellow]No notes found.[/]")
        return

    vectors = _resolve(_embedding_source(config, embeddings_path), notes)
    links = suggest_connections(notes, vectors, **section(config, "connections"))
    if not links:
        console.print("[green]No new connections to suggest.[/]")
        return

    for link in links:
        console.print(f"  [[{link.source_title}]] → [[{link.target_title}]] (score: {link.score:.3f})")


@cli.command()
@click.pass_context
def clusters(ctx):
    """Group notes into clusters connected by wikilinks."""
    from .clustering.graph import concept_graph_from_notes, find_concept_clusters

    config = _get_config(ctx)
    notes = _load_notes(config)
    nodes = concept_graph_from_notes(notes)
    found = find_concept_clusters(nodes)
    if not found:
        console.print("[yellow]No clusters found. Link some notes with [[wikilinks]].[/]")
        return

    names = {n.id: n.name for n in nodes}
    console.print(f"[green]✓ Found {len(found)} cluster(s)[/]")
    for i, c in enumerate(found, 1):
        console.print(f"  Cluster {i}: {c.size} notes")
        for concept_id in c.concept_ids:
            console.print(f"    • {names.get(concept_id, concept_id)}")


@cli.command()
@click.argument("title")
@click.option("--depth", "-d", default=1, help="Number of hops to traverse")
@click.pass_context
def related(ctx, title, depth):
    """Find notes connected to a note through wikilinks."""
    from .clustering.graph import concept_graph_from_notes, related_concepts

    config = _get_config(ctx)
    notes = _load_notes(config)
    start = next((n for n in notes if n.title.casefold() == title.casefold()), None)
    if start is None:
        raise click.ClickException(f"No note titled {title!r}")

    nodes = concept_graph_from_notes(notes)
    names = {n.id: n.name for n in nodes}
    levels = related_concepts(nodes, start.id, depth=depth)
    total = sum(len(ids) for ids in levels.values())
    console.print(f"[bold]{start.title}[/] ({total} related)")
    for d, ids in levels.items():
        for concept_id in ids:
            console.print(f"  {'  ' * (d - 1)}[{d}] {names[concept_id]}")


@cli.command()
@click.argument("positions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--heatmap", is_flag=True, help="Also print the activity heatmap")
@click.pass_context
def regions(ctx, positions_file, heatmap):
    """Cluster canvas positions from a JSON list of {x, y, owner_id} objects."""
    from .clustering.spatial import activity_insights, detect_regions, generate_heatmap
    from .models import Position

    config = _get_config(ctx)
    params = section(config, "regions")
    heatmap_grid = params.pop("heatmap_grid")

    try:
        raw = json.loads(Path(positions_file).read_text())
        positions = [
            Position(x=float(p["x"]), y=float(p["y"]), owner_id=str(p.get("owner_id", p.get("ownerId", ""))))
            for p in raw
        ]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid positions file: {e}")

    found = detect_regions(positions, **params)
    table = Table(title="Activity Regions")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Events", justify="right", style="green")
    table.add_column("Owners", style="cyan")
    for r in found:
        table.add_row(f"{r.x:.0f}", f"{r.y:.0f}", f"{r.width:.0f}×{r.height:.0f}", str(r.event_count), ", ".join(r.owner_ids))
    console.print(table)

    for insight in activity_insights(positions, **params):
        console.print(f"  [bold]{insight.title}[/]: {insight.description}")

    if heatmap:
        for cell in generate_heatmap(positions, grid_size=heatmap_grid):
            console.print(f"  ({cell.x:.0f}, {cell.y:.0f}) {'█' * max(1, round(cell.intensity * 10))}")


@cli.command()
@click.argument("capabilities", nargs=-1)
@embeddings_option
@click.pass_context
def run(ctx, capabilities, embeddings_path):
    """Run archivist agent capabilities through the task queue."""
    from .agents import TaskQueue, register_archivist
    from .storage import get_note_repository

    config = _get_config(ctx)
    try:
        repository = get_note_repository(config)
    except ValueError as e:
        raise click.ClickException(str(e))

    queue = TaskQueue(daily_budget=section(config, "agents")["daily_budget"])
    register_archivist(queue, repository, _embedding_source(config, embeddings_path), config)

    available = [key.split(":", 1)[1] for key in queue.capabilities()]
    if not capabilities:
        capabilities = ("surfaceContradictions", "suggestMerges")
    for capability in capabilities:
        if capability not in available:
            raise click.ClickException(f"Unknown capability {capability!r} (choose from {', '.join(available)})")
        queue.submit("archivist", capability)

    queue.run_pending()

    for task in queue.tasks():
        if task.status == "completed":
            console.print(f"[green]✓ {task.capability_id}: {task.result.summary}[/]")
        else:
            console.print(f"[red]✗ {task.capability_id}: {task.error}[/]")

    suggestions = sorted(queue.suggestions(), key=lambda s: s.priority)
    if suggestions:
        table = Table(title="Suggestions")
        table.add_column("P", style="dim", width=2)
        table.add_column("Type", style="magenta")
        table.add_column("Suggestion", style="cyan")
        table.add_column("Details", max_width=60)
        for s in suggestions:
            table.add_row(str(s.priority), s.type, s.title, s.description)
        console.print(table)


if __name__ == "__main__":
    cli()
