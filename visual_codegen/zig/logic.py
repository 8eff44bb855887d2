"""
Zig emitters for logic blocks.
"""

from ..precedence import Order
from .common import COMPARISON, field_text

OPERATORS = {'EQ': '==', 'NEQ': '!=', 'LT': '<', 'LTE': '<=', 'GT': '>', 'GTE': '>='}


def _branch_count(node) -> int:
    count = 1 + int(node.mutation.get('else_if', 0))
    while f'IF{count}' in node.inputs or f'DO{count}' in node.statements:
        count += 1
    return count


def controls_if(pass_, node):
    """If/elseif/else condition."""
    code = ''
    # Automatic prefix insertion is switched off for this block.
    code += pass_.statement_prefix_code(node)
    for n in range(_branch_count(node)):
        condition = pass_.value_to_code(node, f'IF{n}', Order.NONE) or 'false'
        branch = pass_.statement_suffix_code(node) + pass_.statement_to_code(node, f'DO{n}')
        code += ('else ' if n > 0 else '') + f'if ({condition}) {{\n{branch}}}'
        if n + 1 < _branch_count(node):
            code += ' '

    if node.mutation.get('has_else') or 'ELSE' in node.statements \
            or pass_.config.statement_suffix:
        branch = pass_.statement_suffix_code(node) + pass_.statement_to_code(node, 'ELSE')
        code += f' else {{\n{branch}}}'
    return code + '\n'


def logic_compare(pass_, node):
    op = node.get_field('OP')
    if op not in OPERATORS:
        raise pass_.unhandled(node, op)
    operator = OPERATORS[op]
    left = pass_.value_to_code(node, 'A', COMPARISON) or '0'
    right = pass_.value_to_code(node, 'B', COMPARISON) or '0'
    return f'{left} {operator} {right}', COMPARISON


def logic_operation(pass_, node):
    """Operations 'and', 'or'."""
    op = node.get_field('OP')
    if op == 'AND':
        operator, order = 'and', Order.LOGICAL_AND
    elif op == 'OR':
        operator, order = 'or', Order.LOGICAL_OR
    else:
        raise pass_.unhandled(node, op)
    left = pass_.value_to_code(node, 'A', order)
    right = pass_.value_to_code(node, 'B', order)
    if not left and not right:
        left = right = 'false'
    else:
        # A single missing argument has no effect on the result.
        default = 'true' if operator == 'and' else 'false'
        left = left or default
        right = right or default
    return f'{left} {operator} {right}', order


def logic_negate(pass_, node):
    argument = pass_.value_to_code(node, 'BOOL', Order.UNARY_PREFIX) or 'true'
    return '!' + argument, Order.UNARY_PREFIX


def logic_boolean(pass_, node):
    return ('true' if field_text(node, 'BOOL') == 'TRUE' else 'false'), Order.ATOMIC


def logic_null(pass_, node):
    return 'null', Order.ATOMIC


def logic_ternary(pass_, node):
    condition = pass_.value_to_code(node, 'IF', Order.NONE) or 'false'
    then = pass_.value_to_code(node, 'THEN', Order.CONDITIONAL) or 'null'
    otherwise = pass_.value_to_code(node, 'ELSE', Order.CONDITIONAL) or 'null'
    return f'if ({condition}) {then} else {otherwise}', Order.CONDITIONAL


def register(registry):
    registry.register('controls_if', controls_if, suppress_prefix_suffix=True, category='logic')
    registry.alias('controls_ifelse', 'controls_if')
    registry.register('logic_compare', logic_compare, category='logic')
    registry.register('logic_operation', logic_operation, category='logic')
    registry.register('logic_negate', logic_negate, category='logic')
    registry.register('logic_boolean', logic_boolean, category='logic')
    registry.register('logic_null', logic_null, category='logic')
    registry.register('logic_ternary', logic_ternary, category='logic')
