"""
Zig target for the block code generator.
"""

from typing import Optional

from ..config import GeneratorConfig
from ..registry import EmitterRegistry
from . import colour, iot, lists, logic, loops, maths, procedures, texts, variables
from .generator import ZigGenerator

EMITTER_MODULES = (logic, loops, maths, texts, lists, colour, variables, procedures, iot)


def build_registry() -> EmitterRegistry:
    """Build the registry holding every Zig emitter."""
    registry = EmitterRegistry()
    for module in EMITTER_MODULES:
        module.register(registry)
    return registry


def create_generator(config: Optional[GeneratorConfig] = None) -> ZigGenerator:
    """Create a Zig generator with the full emitter catalog."""
    return ZigGenerator(build_registry(), config)


__all__ = ['ZigGenerator', 'build_registry', 'create_generator']
