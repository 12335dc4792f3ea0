"""Configuration management for the archivist."""

import copy
import os
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG = {
    "vault_path": "~/.archivist/vault",
    "chroma_path": "~/.archivist/chroma",
    "storage_backend": "vault",
    "embedding_model": "intfloat/e5-large-v2",
    "duplicates": {"threshold": 0.85, "min_content_length": 50},
    "contradictions": {"min_keyword_length": 5, "min_group_size": 2, "drop_stopwords": True},
    "merges": {
        "title_threshold": 0.8,
        "min_title_word_length": 3,
        "min_group_size": 3,
        "short_note_length": 500,
        "drop_stopwords": True,
    },
    "connections": {
        "min_content_length": 100,
        "max_notes": 10,
        "max_per_note": 3,
        "min_similarity": 0.5,
    },
    "regions": {"compact_size": 500, "grid_divisions": 3, "min_events": 2, "heatmap_grid": 20},
    "agents": {"daily_budget": 50},
}

ENV_OVERRIDES = {
    "ARCHIVIST_VAULT_PATH": "vault_path",
    "ARCHIVIST_CHROMA_PATH": "chroma_path",
    "ARCHIVIST_EMBEDDING_MODEL": "embedding_model",
}


def _find_config_file() -> Path | None:
    """Look for config.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".archivist" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ValueError(f"Config file not found: {path}")
    else:
        path = _find_config_file()

    if path:
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        if not isinstance(file_cfg, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        _deep_merge(cfg, file_cfg)

    for env_var, key in ENV_OVERRIDES.items():
        if value := os.environ.get(env_var):
            cfg[key] = value

    # Expand paths
    for key in ("vault_path", "chroma_path"):
        cfg[key] = str(Path(cfg[key]).expanduser().resolve())

    return cfg


def section(config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config section with defaults filled in for missing keys."""
    merged = dict(DEFAULT_CONFIG.get(name, {}))
    merged.update(config.get(name) or {})
    return merged


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
