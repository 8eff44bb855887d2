"""
Imports and small helpers shared by the Zig emitters.
"""

import re
from typing import NamedTuple

from ..generator import CompilationPass
from ..precedence import Order

IMPORTS = {
    'math': 'const math = std.math;',
    'debug': 'const debug = std.log.debug;',
    'allocator': 'const allocator = std.heap.page_allocator;',
    'sen': 'const sen = @import("./sensor.zig");',
    'c': 'const c = sen.c;',
    'cbor': 'const composeCbor = @import("./cbor.zig").composeCbor;',
    'lorawan': 'const transmitLorawan = @import("./lorawan.zig").transmitLorawan;',
}

LIST_TYPE = 'std.ArrayList(f32)'
EMPTY_LIST = LIST_TYPE + '.init(allocator)'

# Random source used by generated helpers and inline code.
RANDOM = 'std.crypto.random'

# Zig puts == != < > <= >= on one non-associative level.
COMPARISON = Order.EQUALITY

# Kinds outside math_* that produce numbers.
NUMBER_KINDS = frozenset([
    'text_length', 'text_indexOf', 'text_count', 'lists_length', 'lists_indexOf', 'bme280',
])

# A bare identifier or literal: safe to evaluate more than once.
SIMPLE_EXPRESSION = re.compile(r'^\w+$')


def require(pass_: CompilationPass, *tags: str) -> None:
    """Require one or more of the standard imports above."""
    for tag in tags:
        pass_.require_import(tag, IMPORTS[tag])


class ListCache(NamedTuple):
    """A list expression plus the statement that caches it, if any."""
    expression: str
    setup: str


def cache_list(pass_: CompilationPass, expression: str) -> ListCache:
    """
    Make ``expression`` safe to evaluate several times.

    Bare identifiers are returned as is. Anything else is stored in a fresh
    temporary, declared by ``setup``.
    """
    if SIMPLE_EXPRESSION.match(expression):
        return ListCache(expression, '')
    name = pass_.get_distinct_name('tmp_list')
    return ListCache(name, f'var {name} = {expression};\n')


def format_spec(node) -> str:
    """``std.fmt`` placeholder for the value produced by ``node``."""
    if node is None:
        return '{s}'
    if node.kind in NUMBER_KINDS or (node.kind.startswith('math_') and node.kind != 'math_on_list'):
        return '{d}'
    if node.kind.startswith('text_prompt') and node.get_field('TYPE') == 'NUMBER':
        return '{d}'
    if node.kind.startswith(('text', 'colour')):
        return '{s}'
    return '{any}'


def field_text(node, name: str, default: str = '') -> str:
    value = node.get_field(name, default)
    return default if value is None else str(value)
