"""
Index and quoting utilities.

Pure text helpers used by the synthesizer and by emitters: index folding for
one-based/zero-based conversion, string literal escaping, line prefixing and
number formatting.
"""

import math
import re
from typing import Any, Iterable

from .precedence import Order, OrderOverride, needs_parentheses

_NUMBER = re.compile(r'^\s*-?\d+(\.\d+)?\s*$')
_INTEGER = re.compile(r'^\s*-?\d+\s*$')
_INNER_NEWLINE = re.compile(r'\n(?!\Z)')
_EXPONENT = re.compile(r'e([+-])0*(\d)')

_ESCAPES = {
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
}


def is_number(text: str) -> bool:
    """True for integer or decimal literal text such as ``'4'`` or ``'-2.5'``."""
    return bool(_NUMBER.match(text))


def format_number(value: Any) -> str:
    """
    Render a number the way a JavaScript ``String(Number(value))`` would,
    except that integers and integer text keep every digit.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str) and _INTEGER.match(value):
        return str(int(value))
    number = float(value)
    if math.isnan(number):
        return 'NaN'
    if math.isinf(number):
        return 'Infinity' if number > 0 else '-Infinity'
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return _EXPONENT.sub(r'e\1\2', repr(number))


def prefix_lines(text: str, prefix: str) -> str:
    """Prepend ``prefix`` to every line of ``text``."""
    return prefix + _INNER_NEWLINE.sub(lambda _: '\n' + prefix, text)


def inject_id(template: str, quoted_id: str) -> str:
    """Replace each ``%1`` in ``template`` with the quoted node id."""
    return template.replace('%1', quoted_id)


def quote_text(text: str, delimiter: str = '"') -> str:
    """Escape ``text`` and wrap it in ``delimiter``."""
    out = []
    for char in text:
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif char == delimiter:
            out.append('\\' + char)
        elif ord(char) < 0x20 or ord(char) == 0x7f:
            out.append('\\x%02x' % ord(char))
        else:
            out.append(char)
    return delimiter + ''.join(out) + delimiter


def multiline_quote(text: str, delimiter: str = '"',
                    joiner: str = ' ++ "\\n" ++\n') -> str:
    """Quote each line separately and join them with the concatenation operator."""
    return joiner.join(quote_text(line, delimiter) for line in text.split('\n'))


def adjust_index(code: str, delta: int = 0, negate: bool = False,
                 order: Order = Order.NONE,
                 overrides: Iterable[OrderOverride] = ()) -> str:
    """
    Add ``delta`` to an index expression.

    Integer literals are folded at synthesis time (``'5'`` with ``-1`` gives
    ``'4'``). Anything else becomes ``code + delta`` evaluated by the target,
    wrapped when the surrounding ``order`` binds at least as tightly.
    """
    if is_number(code):
        value = (int(code) if _INTEGER.match(code) else float(code)) + delta
        if negate:
            value = -value
        return format_number(value)
    inner = None
    if delta > 0:
        code = f'{code} + {delta}'
        inner = Order.ADDITIVE
    elif delta < 0:
        code = f'{code} - {-delta}'
        inner = Order.ADDITIVE
    if negate:
        code = f'-({code})' if delta else f'-{code}'
        inner = Order.UNARY_PREFIX
    if inner is not None and needs_parentheses(Order(order), inner, overrides):
        code = f'({code})'
    return code
