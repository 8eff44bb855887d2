"""
Emitter registry: the explicit mapping from node kind to emitter.

A registry is built once, when a target generator is constructed, and never
changes while passes run. Emitters are plain callables
``emit(pass_, node)`` returning ``(code, Order)`` for value nodes, a
statement string for effecting nodes, or ``None`` when all output went into
the definitions set.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

Emitter = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class EmitterSpec:
    """A registered emitter and how the engine should treat it."""
    kind: str
    emit: Emitter
    # Emitter injects statement prefix/suffix itself
    suppress_prefix_suffix: bool = False
    category: str = ''


class EmitterRegistry:
    """Registry of emitters keyed by node kind."""

    def __init__(self):
        self._emitters: Dict[str, EmitterSpec] = {}

    def register(self, kind: str, emit: Emitter, suppress_prefix_suffix: bool = False,
                 category: str = '') -> EmitterSpec:
        """Register an emitter. Registering a kind twice is an error."""
        if kind in self._emitters:
            raise ValueError(f"Emitter already registered for kind '{kind}'")
        spec = EmitterSpec(kind, emit, suppress_prefix_suffix, category)
        self._emitters[kind] = spec
        return spec

    def alias(self, kind: str, existing: str) -> EmitterSpec:
        """Register ``kind`` with the same emitter as ``existing``."""
        spec = self._emitters[existing]
        return self.register(kind, spec.emit, spec.suppress_prefix_suffix, spec.category)

    def get(self, kind: str) -> Optional[EmitterSpec]:
        return self._emitters.get(kind)

    def __contains__(self, kind: str) -> bool:
        return kind in self._emitters

    def __len__(self) -> int:
        return len(self._emitters)

    def __iter__(self) -> Iterator[EmitterSpec]:
        return iter(self._emitters.values())

    def kinds(self) -> List[str]:
        return sorted(self._emitters)

    def categories(self) -> Dict[str, List[str]]:
        """Registered kinds grouped by category."""
        grouped: Dict[str, List[str]] = {}
        for spec in self._emitters.values():
            grouped.setdefault(spec.category or 'other', []).append(spec.kind)
        return {name: sorted(kinds) for name, kinds in sorted(grouped.items())}
