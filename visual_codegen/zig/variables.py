"""
Zig emitters for variable blocks.
"""

from ..precedence import Order
from .common import field_text


def variables_get(pass_, node):
    return pass_.get_variable_name(field_text(node, 'VAR')), Order.ATOMIC


def variables_set(pass_, node):
    value = pass_.value_to_code(node, 'VALUE', Order.ASSIGNMENT) or '0'
    name = pass_.get_variable_name(field_text(node, 'VAR'))
    return f'{name} = {value};\n'


def register(registry):
    registry.register('variables_get', variables_get, category='variables')
    registry.register('variables_set', variables_set, category='variables')
    # Typed and dynamic variables render the same way.
    registry.alias('variables_get_dynamic', 'variables_get')
    registry.alias('variables_set_dynamic', 'variables_set')
