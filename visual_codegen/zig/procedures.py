"""
Zig emitters for procedure blocks.

Definitions go into the definitions set under ``'%' + name`` so they never
collide with helper keys. Calls are ``try`` expressions since every
generated function returns an error union.
"""

from ..precedence import Order
from ..quoting import prefix_lines
from .common import field_text


def procedures_defreturn(pass_, node):
    """Define a procedure with or without a return value."""
    name = pass_.get_procedure_name(field_text(node, 'NAME'))
    xfix1 = ''
    if pass_.config.statement_prefix:
        xfix1 += pass_.inject_id(pass_.config.statement_prefix, node)
    if pass_.config.statement_suffix:
        xfix1 += pass_.inject_id(pass_.config.statement_suffix, node)
    if xfix1:
        xfix1 = prefix_lines(xfix1, pass_.indent)
    loop_trap = ''
    if pass_.config.infinite_loop_trap:
        loop_trap = prefix_lines(pass_.inject_id(pass_.config.infinite_loop_trap, node),
                                 pass_.indent)

    with pass_.detached_scope():
        branch = pass_.statement_to_code(node, 'STACK')
    return_value = pass_.value_to_code(node, 'RETURN', Order.NONE)
    xfix2 = ''
    if branch and return_value:
        # After the body runs, this block is revisited for the return.
        xfix2 = xfix1
    if return_value:
        return_value = f'{pass_.indent}return {return_value};\n'
    return_type = '!f32' if return_value else '!void'

    args = [f'{pass_.get_variable_name(param)}: f32' for param in node.get_vars()]
    code = (f'fn {name}({", ".join(args)}) {return_type} {{\n'
            + xfix1 + loop_trap + branch + xfix2 + return_value + '}')
    code = pass_.scrub(node, code)
    pass_.add_definition('%' + name, code)
    return None


def procedures_callreturn(pass_, node):
    """Call a procedure with a return value."""
    name = pass_.get_procedure_name(field_text(node, 'NAME'))
    args = [pass_.value_to_code(node, f'ARG{i}', Order.NONE) or 'null'
            for i in range(len(node.get_vars()))]
    return f'try {name}({", ".join(args)})', Order.UNARY_PREFIX


def procedures_callnoreturn(pass_, node):
    """Call a procedure with no return value."""
    code, _ = procedures_callreturn(pass_, node)
    return code + ';\n'


def procedures_ifreturn(pass_, node):
    """Conditionally return from a procedure."""
    condition = pass_.value_to_code(node, 'CONDITION', Order.NONE) or 'false'
    code = f'if ({condition}) {{\n'
    # The regular suffix after this block is skipped when the return fires.
    code += pass_.statement_suffix_code(node)
    flag = node.mutation.get('has_return_value')
    if flag is None:
        has_return_value = 'VALUE' in node.inputs
    else:
        has_return_value = str(flag).lower() in ('1', 'true')
    if has_return_value:
        value = pass_.value_to_code(node, 'VALUE', Order.NONE) or 'null'
        code += f'{pass_.indent}return {value};\n'
    else:
        code += f'{pass_.indent}return;\n'
    return code + '}\n'


def register(registry):
    registry.register('procedures_defreturn', procedures_defreturn,
                      suppress_prefix_suffix=True, category='procedures')
    registry.alias('procedures_defnoreturn', 'procedures_defreturn')
    registry.register('procedures_callreturn', procedures_callreturn, category='procedures')
    registry.register('procedures_callnoreturn', procedures_callnoreturn, category='procedures')
    registry.register('procedures_ifreturn', procedures_ifreturn, category='procedures')
