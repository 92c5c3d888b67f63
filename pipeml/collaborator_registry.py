"""
Collaborator registry for pipeml.

pipeml does not implement any learning algorithm itself. Trainers,
evaluators and cross validators are provided by collaborator packages,
discovered from:

- the ``pipeml.collaborators`` entry point group (each entry point loads a
  CollaboratorSpec or a sequence of them),
- modules listed in the settings file or PIPEML_COLLABORATORS, which expose
  ``COLLABORATOR_SPECS``,
- explicit ``register_collaborator`` calls.
"""

from __future__ import annotations

import importlib
import logging
from importlib import metadata
from typing import Any, Dict, Iterable, Iterator, Optional

from .collaborator_spec import CollaboratorSpec
from .errors import CollaboratorError, ConfigurationError
from .settings import get_collaborator_modules

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "pipeml.collaborators"

_ROLE_LABELS = {
    "trainer": "training",
    "evaluator": "evaluation",
    "cross_validator": "cross validation",
}


class CollaboratorRegistry:
    """Task name -> CollaboratorSpec."""

    def __init__(self) -> None:
        self._specs: Dict[str, CollaboratorSpec] = {}

    def register(self, spec: CollaboratorSpec) -> None:
        if spec.task in self._specs:
            logger.debug("Replacing collaborator for task '%s'", spec.task)
        self._specs[spec.task] = spec

    def get(self, task: str) -> Optional[CollaboratorSpec]:
        return self._specs.get(task)

    def tasks(self) -> list[str]:
        return sorted(self._specs)

    def factory(self, task: str, role: str) -> Any:
        """
        Return the ``role`` factory registered for ``task``.

        Raises:
            CollaboratorError: if nothing is registered for the task or the
                spec does not provide the role.
        """
        spec = self._specs.get(task)
        if spec is None:
            registered = ", ".join(self.tasks()) or "none"
            raise CollaboratorError(
                f"No collaborator registered for '{task}' models (registered: {registered}). "
                f"Install a package providing the '{ENTRY_POINT_GROUP}' entry point or list a module in the settings."
            )
        factory = getattr(spec, role)
        if factory is None:
            raise CollaboratorError(f"The '{task}' collaborator does not support {_ROLE_LABELS.get(role, role)}")
        logger.info(
            "Using %s collaborator for %s: %s",
            task, _ROLE_LABELS.get(role, role), spec.description or "no description",
        )
        return factory


def _as_specs(value: Any, origin: str) -> Iterator[CollaboratorSpec]:
    if isinstance(value, CollaboratorSpec):
        yield value
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, CollaboratorSpec):
                yield item
            else:
                logger.warning("%s provided a non-CollaboratorSpec entry: %r", origin, item)
        return
    logger.warning("%s did not provide CollaboratorSpec instances", origin)


def _iter_entry_point_specs() -> Iterator[CollaboratorSpec]:
    for ep in metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            value = ep.load()
        except Exception as exc:
            logger.warning("Failed to load collaborator entry point '%s': %s", ep.name, exc)
            continue
        yield from _as_specs(value, f"Entry point '{ep.name}'")


def _iter_module_specs(module_names: Iterable[str]) -> Iterator[CollaboratorSpec]:
    for module_name in module_names:
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise ConfigurationError(f"Cannot import collaborator module '{module_name}': {exc}") from exc
        specs = getattr(module, "COLLABORATOR_SPECS", None)
        if specs is None:
            raise ConfigurationError(f"Module '{module_name}' does not define COLLABORATOR_SPECS")
        yield from _as_specs(specs, f"Module '{module_name}'")


def discover_collaborators(config: Optional[Dict[str, Any]] = None) -> CollaboratorRegistry:
    """Build a registry from entry points, then configured modules (later registrations win)."""
    registry = CollaboratorRegistry()
    for spec in _iter_entry_point_specs():
        registry.register(spec)
    for spec in _iter_module_specs(get_collaborator_modules(config)):
        registry.register(spec)
    logger.debug("Registered collaborators: %s", ", ".join(registry.tasks()) or "none")
    return registry


_DEFAULT_REGISTRY: Optional[CollaboratorRegistry] = None


def register_collaborator(spec: CollaboratorSpec) -> None:
    """Register a collaborator in the process-wide registry."""
    get_registry().register(spec)


def get_registry() -> CollaboratorRegistry:
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = discover_collaborators()
    return _DEFAULT_REGISTRY


def reset_registry() -> None:
    global _DEFAULT_REGISTRY
    _DEFAULT_REGISTRY = None
