"""
Unit tests for the Zig loop emitters.
"""

import pytest
from hypothesis import given, strategies as st

from visual_codegen.config import GeneratorConfig
from visual_codegen.exceptions import UnhandledNodeKindError
from visual_codegen.models import Node
from visual_codegen.zig import create_generator


def num(value):
    return Node('math_number', fields={'NUM': value})


def var(name):
    return Node('variables_get', fields={'VAR': name})


def set_var(name, value):
    return Node('variables_set', fields={'VAR': name}, inputs={'VALUE': value})


def repeat(times, body=None):
    statements = {'DO': body} if body else {}
    return Node('controls_repeat_ext', fields={'TIMES': times}, statements=statements)


def count_loop(start, end, step=None, body=None):
    inputs = {'FROM': start, 'TO': end}
    if step is not None:
        inputs['BY'] = step
    statements = {'DO': body} if body else {}
    return Node('controls_for', fields={'VAR': 'i'}, inputs=inputs, statements=statements)


def render(node, **config):
    return create_generator(GeneratorConfig(**config)).node_to_code(node)


class TestRepeat:
    """Test cases for the repeat emitter."""

    def test_repeat_field(self):
        assert render(repeat(10, set_var('x', num(1)))) == (
            'var count: f32 = 0;\n'
            'while (count < 10) : (count += 1) {\n'
            '    x = 1;\n'
            '}\n')

    def test_repeat_input_is_cached(self):
        node = Node('controls_repeat', inputs={'TIMES': Node(
            'math_arithmetic', fields={'OP': 'ADD'}, inputs={'A': var('n'), 'B': num(1)})})
        assert render(node) == (
            'var repeat_end = n + 1;\n'
            'var count: f32 = 0;\n'
            'while (count < repeat_end) : (count += 1) {\n'
            '}\n')

    @pytest.mark.parametrize('times', ['abc', 'Infinity', 'NaN'])
    def test_bad_count(self, times):
        with pytest.raises(UnhandledNodeKindError) as exc_info:
            render(repeat(times))
        assert exc_info.value.value == times

    def test_nested_counters_are_distinct(self):
        assert render(repeat(2, repeat(3))) == (
            'var count2: f32 = 0;\n'
            'while (count2 < 2) : (count2 += 1) {\n'
            '    var count: f32 = 0;\n'
            '    while (count < 3) : (count += 1) {\n'
            '    }\n'
            '}\n')


class TestWhileUntil:
    """Test cases for the while/until emitter."""

    def test_while(self):
        node = Node('controls_whileUntil', fields={'MODE': 'WHILE'}, inputs={
            'BOOL': Node('logic_boolean', fields={'BOOL': 'TRUE'})})
        assert render(node) == 'while (true) {\n}\n'

    def test_until_negates_condition(self):
        condition = Node('logic_compare', fields={'OP': 'EQ'},
                         inputs={'A': var('x'), 'B': num(1)})
        node = Node('controls_whileUntil', fields={'MODE': 'UNTIL'},
                    inputs={'BOOL': condition})
        assert render(node) == 'while (!(x == 1)) {\n}\n'

    def test_unknown_mode(self):
        with pytest.raises(UnhandledNodeKindError):
            render(Node('controls_whileUntil', fields={'MODE': 'FOREVER'}))

    def test_trap_prefix_and_suffix(self):
        node = Node('controls_whileUntil', id='w')
        assert render(node, infinite_loop_trap='t(%1);\n', statement_prefix='p(%1);\n',
                      statement_suffix='s(%1);\n') == (
            'p("w");\n'
            'while (false) {\n'
            '    s("w");\n'
            '    t("w");\n'
            '    p("w");\n'
            '}\n'
            's("w");\n')


class TestCountingLoop:
    """Test cases for the for emitter."""

    def test_literal_bounds_counting_up(self):
        assert render(count_loop(num(1), num(10), num(2))) == (
            'i = 1;\nwhile (i <= 10) : (i += 2) {\n}\n')

    def test_literal_bounds_counting_down(self):
        assert render(count_loop(num(10), num(1), num(1))) == (
            'i = 10;\nwhile (i >= 1) : (i -= 1) {\n}\n')

    def test_runtime_bounds(self):
        assert render(count_loop(num(1), var('n'))) == (
            'var i_inc: f32 = 1;\n'
            'if (1 > n) {\n'
            '    i_inc = -i_inc;\n'
            '}\n'
            'i = 1;\n'
            'while (if (i_inc >= 0) i <= n else i >= n) : (i += i_inc) {\n'
            '}\n')

    def test_runtime_step(self):
        code = render(count_loop(num(0), num(5), var('step')))
        assert 'var i_inc: f32 = @abs(step);\n' in code


class TestForEach:
    """Test cases for the for-each emitter."""

    def test_for_each(self):
        node = Node('controls_forEach', fields={'VAR': 'x'}, inputs={'LIST': var('l')},
                    statements={'DO': set_var('y', var('x'))})
        assert render(node) == (
            'for (l.items) |x_item| {\n'
            '    x = x_item;\n'
            '    y = x;\n'
            '}\n')

    def test_missing_list(self):
        code = render(Node('controls_forEach', fields={'VAR': 'x'}))
        assert code.startswith('for (std.ArrayList(f32).init(allocator).items) |x_item| {')


class TestFlowStatements:
    """Test cases for break and continue."""

    @pytest.mark.parametrize('flow,expected', [
        ('BREAK', 'break;\n'), ('CONTINUE', 'continue;\n'),
    ])
    def test_flow(self, flow, expected):
        assert render(Node('controls_flow_statements', fields={'FLOW': flow})) == expected

    def test_unknown_flow(self):
        with pytest.raises(UnhandledNodeKindError):
            render(Node('controls_flow_statements', fields={'FLOW': 'RETURN'}))

    def test_loop_prefix_repeated_before_break(self):
        """The enclosing loop's prefix marks where its next iteration starts."""
        node = Node('controls_whileUntil', id='w', statements={
            'DO': Node('controls_flow_statements', id='f', fields={'FLOW': 'BREAK'})})
        assert render(node, statement_prefix='p(%1);\n') == (
            'p("w");\n'
            'while (false) {\n'
            '    p("f");\n'
            '    p("w");\n'
            '    break;\n'
            '    p("w");\n'
            '}\n')


@given(st.integers(min_value=-50, max_value=50), st.integers(min_value=-50, max_value=50))
def test_literal_loop_direction_property(start, end):
    """Property: literal bounds pick the comparison from their order."""
    code = render(count_loop(num(start), num(end), num(1)))
    if start <= end:
        assert f'while (i <= {end}) : (i += 1)' in code
    else:
        assert f'while (i >= {end}) : (i -= 1)' in code
