"""
Visual Codegen - turns visually composed block programs into source code.

The engine walks a block graph and emits correctly parenthesized,
uniquely named, helper-deduplicated text. It is language agnostic; the Zig
target ships with a full emitter catalog.
"""

__version__ = "0.1.0"

from .config import GeneratorConfig
from .definitions import DefinitionsSet, HelperTable
from .exceptions import (
    CodegenError, ConfigurationError, GraphValidationError, SynthesisError,
    UnhandledNodeKindError
)
from .generator import CodeGenerator, CompilationPass
from .models import Node, Workspace
from .names import NameRegistry, NameType
from .precedence import Order, needs_parentheses
from .quoting import adjust_index, quote_text
from .registry import EmitterRegistry, EmitterSpec
from .zig import ZigGenerator, create_generator

__all__ = [
    # Models
    'Node', 'Workspace',
    # Engine
    'CodeGenerator', 'CompilationPass', 'GeneratorConfig', 'EmitterRegistry', 'EmitterSpec',
    'NameRegistry', 'NameType', 'DefinitionsSet', 'HelperTable',
    'Order', 'needs_parentheses', 'adjust_index', 'quote_text',
    # Zig target
    'ZigGenerator', 'create_generator',
    # Errors
    'CodegenError', 'ConfigurationError', 'GraphValidationError', 'SynthesisError',
    'UnhandledNodeKindError',
]
