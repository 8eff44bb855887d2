"""
Operator precedence model shared by every target language.

Lower values bind tighter. A child expression is wrapped in parentheses when
it binds no tighter than the context it is substituted into.
"""

from enum import IntEnum
from typing import Iterable, Tuple


class Order(IntEnum):
    """Binding strength of a generated expression."""
    ATOMIC = 0            # 0  "text"  name
    UNARY_POSTFIX = 1     # expr.field  expr[i]  expr()
    UNARY_PREFIX = 2      # -expr  !expr  try expr
    MULTIPLICATIVE = 3    # *  /  %
    ADDITIVE = 4          # +  -  ++
    SHIFT = 5             # <<  >>
    BITWISE_AND = 6       # &
    BITWISE_XOR = 7       # ^
    BITWISE_OR = 8        # |
    RELATIONAL = 9        # <  <=  >  >=
    EQUALITY = 10         # ==  !=
    LOGICAL_AND = 11      # and
    LOGICAL_OR = 12       # or
    IF_NULL = 13          # orelse
    CONDITIONAL = 14      # if (c) a else b
    CASCADE = 15
    ASSIGNMENT = 16       # =  +=  -=
    NONE = 99             # (...)

    def binds_tighter_than(self, other: 'Order') -> bool:
        """True when this order binds strictly tighter than ``other``."""
        return self < other


OrderOverride = Tuple[Order, Order]


def needs_parentheses(outer: Order, inner: Order,
                      overrides: Iterable[OrderOverride] = ()) -> bool:
    """
    Decide whether code of order ``inner`` must be wrapped before being
    substituted into a context that requires ``outer``.

    ``overrides`` lists (outer, inner) pairs that are safe without
    parentheses even though they share a binding level, e.g. ``a and b and c``.
    """
    if inner.binds_tighter_than(outer):
        return False
    if outer == inner and outer in (Order.ATOMIC, Order.NONE):
        return False
    return (outer, inner) not in tuple(overrides)
