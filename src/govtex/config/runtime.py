from __future__ import annotations

from pathlib import Path
from typing import Dict

from omegaconf import OmegaConf
from pydantic import BaseModel, Field

RUNTIME_CONFIG_NAME = "govtex.yaml"

DEFAULT_TITLES: Dict[str, str] = {
    "bylaws": "Bylaws",
    "bylaws-fr": "Les Statuts",
    "constitution": "Constitution",
    "constitution-fr": "La Constitution",
    "policies": "Policy Manual",
    "policies-fr": "Le Manuel de politiques",
}


class RuntimeConfig(BaseModel):
    """Typed view over the repository-level YAML configuration."""

    titles: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TITLES))

    def title_for(self, document_name: str) -> str:
        return self.titles.get(document_name, "")


def load_runtime_config(repo_root: Path | str) -> RuntimeConfig:
    """Load ``govtex.yaml`` from the repository root over the built-in defaults.

    A missing file yields the defaults. A ``titles`` mapping in the file adds
    to or replaces individual default titles; an empty string drops one.
    """
    defaults = OmegaConf.create({"titles": dict(DEFAULT_TITLES)})
    config_path = Path(repo_root) / RUNTIME_CONFIG_NAME
    overlay = OmegaConf.load(config_path) if config_path.exists() else OmegaConf.create({})

    merged = OmegaConf.merge(defaults, overlay)
    container = OmegaConf.to_container(merged, resolve=True)  # type: ignore[arg-type]
    raw_titles = container.get("titles", {}) if isinstance(container, dict) else {}

    titles = {str(name): str(title) for name, title in (raw_titles or {}).items() if title}
    return RuntimeConfig(titles=titles)


__all__ = ["RuntimeConfig", "load_runtime_config", "DEFAULT_TITLES", "RUNTIME_CONFIG_NAME"]
