"""
Zig emitters for loop blocks.

Counting loops use ``while`` with a continue expression. Bounds that are not
bare identifiers or literals are cached in temporaries so they are evaluated
once.
"""

from ..precedence import Order
from ..quoting import format_number, is_number
from .common import EMPTY_LIST, SIMPLE_EXPRESSION, field_text, require


def _cached(pass_, code: str, name: str):
    """Return ``(expression, setup)``, caching non-trivial ``code`` in ``name``."""
    if SIMPLE_EXPRESSION.match(code) or is_number(code):
        return code, ''
    var = pass_.get_distinct_name(name)
    return var, f'var {var} = {code};\n'


def _loop_body(pass_, node, slot='DO'):
    with pass_.enclosing_loop(node):
        branch = pass_.statement_to_code(node, slot)
    return pass_.add_loop_trap(branch, node)


def controls_repeat_ext(pass_, node):
    """Repeat n times."""
    if node.has_field('TIMES'):
        value = node.get_field('TIMES')
        try:
            repeats = format_number(int(float(value)))
        except (TypeError, ValueError, OverflowError):
            raise pass_.unhandled(node, value)
    else:
        repeats = pass_.value_to_code(node, 'TIMES', Order.ASSIGNMENT) or '0'
    branch = _loop_body(pass_, node)
    loop_var = pass_.get_distinct_name('count')
    end_var, code = _cached(pass_, repeats, 'repeat_end')
    code += f'var {loop_var}: f32 = 0;\n'
    code += f'while ({loop_var} < {end_var}) : ({loop_var} += 1) {{\n{branch}}}\n'
    return code


def controls_while_until(pass_, node):
    """Do while/until loop."""
    mode = node.get_field('MODE', 'WHILE')
    if mode == 'WHILE':
        condition = pass_.value_to_code(node, 'BOOL', Order.NONE) or 'false'
    elif mode == 'UNTIL':
        condition = '!' + (pass_.value_to_code(node, 'BOOL', Order.UNARY_PREFIX) or 'false')
    else:
        raise pass_.unhandled(node, mode)
    branch = _loop_body(pass_, node)
    return f'while ({condition}) {{\n{branch}}}\n'


def controls_for(pass_, node):
    """For loop with start, end and step."""
    variable = pass_.get_variable_name(field_text(node, 'VAR'))
    start = pass_.value_to_code(node, 'FROM', Order.ASSIGNMENT) or '0'
    end = pass_.value_to_code(node, 'TO', Order.ASSIGNMENT) or '0'
    step = pass_.value_to_code(node, 'BY', Order.ASSIGNMENT) or '1'
    branch = _loop_body(pass_, node)

    if is_number(start) and is_number(end) and is_number(step):
        # All arguments are simple numbers.
        up = float(start) <= float(end)
        amount = format_number(abs(float(step)))
        code = f'{variable} = {start};\n'
        code += (f'while ({variable} {"<=" if up else ">="} {end}) : '
                 f'({variable} {"+=" if up else "-="} {amount}) {{\n{branch}}}\n')
        return code

    start_var, code = _cached(pass_, start, variable + '_start')
    end_var, setup = _cached(pass_, end, variable + '_end')
    code += setup
    # Loop direction is fixed when the loop starts.
    inc_var = pass_.get_distinct_name(variable + '_inc')
    if is_number(step):
        code += f'var {inc_var}: f32 = {format_number(abs(float(step)))};\n'
    else:
        code += f'var {inc_var}: f32 = @abs({step});\n'
    code += f'if ({start_var} > {end_var}) {{\n'
    code += f'{pass_.indent}{inc_var} = -{inc_var};\n'
    code += '}\n'
    code += f'{variable} = {start_var};\n'
    code += (f'while (if ({inc_var} >= 0) {variable} <= {end_var} '
             f'else {variable} >= {end_var}) : ({variable} += {inc_var}) {{\n{branch}}}\n')
    return code


def controls_for_each(pass_, node):
    """For each loop."""
    variable = pass_.get_variable_name(field_text(node, 'VAR'))
    items = pass_.value_to_code(node, 'LIST', Order.UNARY_POSTFIX)
    if not items:
        require(pass_, 'allocator')
        items = EMPTY_LIST
    branch = _loop_body(pass_, node)
    capture = pass_.get_distinct_name(variable + '_item')
    branch = f'{pass_.indent}{variable} = {capture};\n' + branch
    return f'for ({items}.items) |{capture}| {{\n{branch}}}\n'


def controls_flow_statements(pass_, node):
    """Flow statements: continue, break."""
    flow = node.get_field('FLOW')
    xfix = ''
    if pass_.config.statement_prefix:
        xfix += pass_.inject_id(pass_.config.statement_prefix, node)
    if pass_.config.statement_suffix:
        # Inject the suffix here since the regular one will be skipped.
        xfix += pass_.inject_id(pass_.config.statement_suffix, node)
    if pass_.config.statement_prefix:
        loop = pass_.current_loop
        if loop is not None and not pass_.generator.registry.get(loop.kind).suppress_prefix_suffix:
            # Inject the loop's prefix, its next iteration starts here.
            xfix += pass_.inject_id(pass_.config.statement_prefix, loop)
    if flow == 'BREAK':
        return xfix + 'break;\n'
    if flow == 'CONTINUE':
        return xfix + 'continue;\n'
    raise pass_.unhandled(node, flow)


def register(registry):
    registry.register('controls_repeat_ext', controls_repeat_ext, category='loops')
    registry.alias('controls_repeat', 'controls_repeat_ext')
    registry.register('controls_whileUntil', controls_while_until, category='loops')
    registry.register('controls_for', controls_for, category='loops')
    registry.register('controls_forEach', controls_for_each, category='loops')
    registry.register('controls_flow_statements', controls_flow_statements,
                      suppress_prefix_suffix=True, category='loops')
