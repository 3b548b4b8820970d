"""YAML manifest loader with validation."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from initorder.core.graph import Graph

logger = logging.getLogger(__name__)


@dataclass
class ElementSpec:
    """One element declared in a manifest."""
    id: str
    depends_on: List[str] = field(default_factory=list)


@dataclass
class Config:
    """Manifest contents plus run settings."""
    elements: List[ElementSpec] = field(default_factory=list)
    json_logs: bool = False
    verbosity: int = 0

    def build_graph(self) -> Graph:
        """Add every declared element to a new graph, in manifest order.

        Graph errors (empty or duplicate IDs) propagate unchanged.
        """
        graph = Graph()
        for spec in self.elements:
            graph.add_element(spec.id, spec.depends_on)
            logger.debug(f"Added element {spec.id} depending on {spec.depends_on}",
                         extra={"element_id": spec.id, "action": "add_element"})
        return graph


def load_config(path: Optional[str] = None) -> Config:
    """Load a manifest from a YAML file or return defaults.

    Args:
        path: Path to YAML manifest. If None, returns an empty config.

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If specified path doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the manifest structure is malformed
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Manifest file not found: {path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Manifest {path} must be a mapping, got {type(data).__name__}")

    config = _parse_config(data)
    logger.info(f"Loaded {len(config.elements)} elements from {path}",
                extra={"manifest": str(path), "action": "load_config"})
    return config


def _parse_config(data: Dict[str, Any]) -> Config:
    """Parse manifest dict into Config dataclass."""
    return Config(
        elements=_parse_elements(data.get("elements", [])),
        json_logs=_as_setting(data, "json_logs", bool, False),
        verbosity=_as_setting(data, "verbosity", int, 0),
    )


def _as_setting(data: Dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key, default)
    # bool is an int subclass; `verbosity: true` is not a level
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"'{key}' must be {'an integer' if kind is int else 'a boolean'}, "
                         f"got {value!r}")
    return value


def _parse_elements(raw: Any) -> List[ElementSpec]:
    # Mapping shorthand: {name: [deps]}
    if isinstance(raw, dict):
        raw = [{"id": name, "depends_on": deps} for name, deps in raw.items()]
    if not isinstance(raw, list):
        raise ValueError("'elements' must be a list or a mapping")

    elements = []
    for index, entry in enumerate(raw):
        if isinstance(entry, str):
            entry = {"id": entry}
        if not isinstance(entry, dict) or "id" not in entry:
            raise ValueError(f"Element #{index} must be a mapping with an 'id' key: {entry!r}")
        depends_on = entry.get("depends_on") or []
        if isinstance(depends_on, str):
            depends_on = [depends_on]
        if not isinstance(depends_on, list):
            raise ValueError(f"Element {entry['id']!r}: 'depends_on' must be a list")
        elements.append(ElementSpec(
            id=_as_id(entry["id"]),
            depends_on=[_as_id(dep) for dep in depends_on],
        ))
    return elements


def _as_id(value: Any) -> str:
    # YAML turns bare `null` into None; keep it as an empty ID so the graph rejects it.
    return "" if value is None else str(value)
