"""
Zig target: reserved words, quoting and program layout.
"""

import re
from typing import Tuple

from ..generator import CodeGenerator, CompilationPass
from ..models import Workspace
from ..precedence import Order, OrderOverride
from ..quoting import prefix_lines

PROLOGUE = 'const std = @import("std");'

# https://ziglang.org/documentation/master/#Keyword-Reference
KEYWORDS = (
    'addrspace', 'align', 'allowzero', 'and', 'anyframe', 'anytype', 'asm', 'async',
    'await', 'break', 'callconv', 'catch', 'comptime', 'const', 'continue', 'defer',
    'else', 'enum', 'errdefer', 'error', 'export', 'extern', 'fn', 'for', 'if',
    'inline', 'linksection', 'noalias', 'noinline', 'nosuspend', 'opaque', 'or',
    'orelse', 'packed', 'pub', 'resume', 'return', 'struct', 'suspend', 'switch',
    'test', 'threadlocal', 'try', 'union', 'unreachable', 'usingnamespace', 'var',
    'volatile', 'while',
)

PRIMITIVES = (
    'i8', 'u8', 'i16', 'u16', 'i32', 'u32', 'i64', 'u64', 'i128', 'u128', 'isize',
    'usize', 'c_char', 'c_short', 'c_ushort', 'c_int', 'c_uint', 'c_long', 'c_ulong',
    'c_longlong', 'c_ulonglong', 'c_longdouble', 'f16', 'f32', 'f64', 'f80', 'f128',
    'bool', 'anyopaque', 'void', 'noreturn', 'type', 'anyerror', 'comptime_int',
    'comptime_float', 'true', 'false', 'null', 'undefined',
)

# Names bound by generated imports and the program entry point.
PROGRAM_NAMES = (
    'std', 'math', 'debug', 'allocator', 'main', 'composeCbor', 'transmitLorawan',
)

# Bound only in programs that read sensors.
SENSOR_NAMES = ('sen', 'c')
SENSOR_KINDS = ('every', 'bme280')

_EXTRA_BLANK_LINES = re.compile(r'\n\n+')


class ZigGenerator(CodeGenerator):
    """Generates a Zig program from a block workspace."""

    name = 'zig'
    RESERVED_WORDS = KEYWORDS + PRIMITIVES + PROGRAM_NAMES
    ORDER_OVERRIDES: Tuple[OrderOverride, ...] = (
        # a and b and c
        (Order.LOGICAL_AND, Order.LOGICAL_AND),
        # a or b or c
        (Order.LOGICAL_OR, Order.LOGICAL_OR),
        # a.b.c, a[0].b
        (Order.UNARY_POSTFIX, Order.UNARY_POSTFIX),
    )
    COMMENT_PREFIX = '// '
    STRING_DELIMITER = '"'
    CONCAT_JOINER = ' ++ "\\n" ++\n'

    def scrub_naked_value(self, code: str) -> str:
        # Zig rejects unused values.
        return f'_ = {code};\n'

    def init_pass(self, pass_: CompilationPass, workspace: Workspace) -> None:
        """Declare every workspace variable at container level."""
        if any(node.kind in SENSOR_KINDS for node in workspace.all_nodes()):
            pass_.names.reserve(SENSOR_NAMES)
        declarations = [
            f'var {pass_.get_variable_name(name)}: f32 = 0;'
            for name in workspace.all_variables()
        ]
        if declarations:
            pass_.add_definition('variables', '\n'.join(declarations))

    def finish(self, pass_: CompilationPass, code: str) -> str:
        if code:
            code = prefix_lines(code, pass_.indent)
        main = 'pub fn main() !void {\n' + code + '}'

        header = '\n'.join([PROLOGUE] + pass_.definitions.imports())
        definitions = '\n\n'.join([header] + pass_.definitions.definitions())
        definitions = _EXTRA_BLANK_LINES.sub('\n\n', definitions).rstrip('\n')
        return definitions + '\n\n' + main + '\n'
