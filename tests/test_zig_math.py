"""
Unit tests for the Zig math emitters.
"""

import pytest
from hypothesis import given, strategies as st

from visual_codegen.exceptions import UnhandledNodeKindError
from visual_codegen.models import Node, Workspace
from visual_codegen.zig import create_generator


def num(value):
    return Node('math_number', fields={'NUM': value})


def var(name):
    return Node('variables_get', fields={'VAR': name})


def arith(op, a=None, b=None):
    inputs = {key: child for key, child in (('A', a), ('B', b)) if child is not None}
    return Node('math_arithmetic', fields={'OP': op}, inputs=inputs)


def single(op, value=None, kind='math_single'):
    return Node(kind, fields={'OP': op}, inputs={'NUM': value} if value else {})


def render(node):
    return create_generator().node_to_code(node)


def program(node):
    """Full program text with ``node`` assigned to ``r``."""
    workspace = Workspace(top_nodes=[Node('variables_set', fields={'VAR': 'r'},
                                          inputs={'VALUE': node})])
    return create_generator().workspace_to_code(workspace)


class TestNumbers:
    """Test cases for numeric literals."""

    @pytest.mark.parametrize('value,expected', [
        (3, '3'), ('2.50', '2.5'), (-1, '-1'), ('1e3', '1000'),
    ])
    def test_number(self, value, expected):
        assert render(num(value)) == expected

    def test_large_integer(self):
        assert render(num('12345678901234567890')) == '12345678901234567890'

    def test_infinity(self):
        assert render(num('Infinity')) == 'math.inf(f32)'
        assert render(num('-Infinity')) == '-math.inf(f32)'

    def test_invalid_number(self):
        with pytest.raises(UnhandledNodeKindError):
            render(num('twelve'))

    def test_negative_literal_binds_as_prefix(self):
        node = arith('MULTIPLY', num(-2), num(3))
        assert render(node) == '-2 * 3'
        assert render(Node('math_number_property', fields={'PROPERTY': 'POSITIVE'},
                           inputs={'NUMBER_TO_CHECK': num(-2)})) == '-2 > 0'


class TestArithmetic:
    """Test cases for arithmetic emitters."""

    @pytest.mark.parametrize('op,symbol', [
        ('ADD', '+'), ('MINUS', '-'), ('MULTIPLY', '*'), ('DIVIDE', '/'),
    ])
    def test_operators(self, op, symbol):
        assert render(arith(op, var('a'), var('b'))) == f'a {symbol} b'

    def test_power(self):
        assert render(arith('POWER', var('a'), num(2))) == 'math.pow(f32, a, 2)'
        assert 'const math = std.math;' in program(arith('POWER', var('a'), num(2)))

    def test_defaults(self):
        assert render(arith('ADD')) == '0 + 0'

    def test_unknown_operator(self):
        with pytest.raises(UnhandledNodeKindError):
            render(arith('XOR'))

    def test_modulo(self):
        node = Node('math_modulo', inputs={'DIVIDEND': var('a'), 'DIVISOR': num(3)})
        assert render(node) == '@mod(a, 3)'

    def test_constrain(self):
        node = Node('math_constrain', inputs={'VALUE': var('v'), 'LOW': num(1)})
        assert render(node) == '@min(@max(v, 1), math.inf(f32))'

    def test_atan2(self):
        node = Node('math_atan2', inputs={'X': var('x'), 'Y': var('y')})
        assert render(node) == 'math.atan2(y, x) / math.pi * 180'

    def test_change(self):
        node = Node('math_change', fields={'VAR': 'x'}, inputs={'DELTA': num(2)})
        assert render(node) == 'x += 2;\n'


class TestSingle:
    """Test cases for single-operand emitters."""

    @pytest.mark.parametrize('op,expected', [
        ('ABS', '@abs(x)'), ('ROOT', '@sqrt(x)'), ('LN', '@log(x)'), ('EXP', '@exp(x)'),
        ('POW10', 'math.pow(f32, 10, x)'), ('ASIN', 'math.asin(x) / math.pi * 180'),
    ])
    def test_single(self, op, expected):
        assert render(single(op, var('x'))) == expected

    def test_negate(self):
        assert render(single('NEG', var('x'))) == '-x'
        assert render(single('NEG', num(-3))) == '-(-3)'

    def test_trig_converts_degrees(self):
        node = single('SIN', arith('ADD', var('a'), var('b')), kind='math_trig')
        assert render(node) == '@sin((a + b) / 180 * math.pi)'

    def test_round(self):
        assert render(single('ROUNDUP', var('x'), kind='math_round')) == '@ceil(x)'

    def test_unknown_operator(self):
        with pytest.raises(UnhandledNodeKindError):
            render(single('CUBE', var('x')))

    def test_constant(self):
        assert render(Node('math_constant', fields={'CONSTANT': 'PI'})) == 'math.pi'
        with pytest.raises(UnhandledNodeKindError):
            render(Node('math_constant', fields={'CONSTANT': 'TAU'}))


class TestNumberProperty:
    """Test cases for the number property emitter."""

    def check(self, prop, **inputs):
        inputs.setdefault('NUMBER_TO_CHECK', var('n'))
        return Node('math_number_property', fields={'PROPERTY': prop}, inputs=inputs)

    def test_even(self):
        assert render(self.check('EVEN')) == '@mod(n, 2) == 0'

    def test_divisible_by(self):
        assert render(self.check('DIVISIBLE_BY', DIVISOR=num(3))) == '@mod(n, 3) == 0'
        assert render(self.check('DIVISIBLE_BY')) == 'false'

    def test_prime_uses_helper(self):
        code = program(self.check('PRIME'))
        assert 'r = math_isPrime(n);' in code
        assert code.count('fn math_isPrime(n: f32) bool {') == 1

    def test_even_in_negation_is_wrapped(self):
        node = Node('logic_negate', inputs={'BOOL': self.check('ODD')})
        assert render(node) == '!(@mod(n, 2) == 1)'


class TestLists:
    """Test cases for list statistics."""

    def test_sum(self):
        node = Node('math_on_list', fields={'OP': 'SUM'}, inputs={'LIST': var('l')})
        assert render(node) == 'math_sum(l)'

    def test_median_is_fallible(self):
        node = Node('math_on_list', fields={'OP': 'MEDIAN'}, inputs={'LIST': var('l')})
        code = program(node)
        assert 'r = try math_median(l);' in code
        assert 'const allocator = std.heap.page_allocator;' in code

    def test_missing_list(self):
        node = Node('math_on_list', fields={'OP': 'MAX'})
        assert render(node) == 'math_max(std.ArrayList(f32).init(allocator))'

    def test_unknown_operator(self):
        with pytest.raises(UnhandledNodeKindError):
            render(Node('math_on_list', fields={'OP': 'PRODUCT'}))

    def test_helpers_shared_across_call_sites(self):
        first = Node('math_on_list', fields={'OP': 'AVERAGE'}, inputs={'LIST': var('a')})
        second = Node('math_on_list', fields={'OP': 'AVERAGE'}, inputs={'LIST': var('b')})
        code = program(arith('ADD', first, second))
        assert code.count('fn math_mean(') == 1
        assert 'r = math_mean(a) + math_mean(b);' in code


class TestRandom:
    """Test cases for random number emitters."""

    def test_random_int(self):
        node = Node('math_random_int', inputs={'FROM': num(1), 'TO': num(6)})
        assert render(node) == 'math_random_int(1, 6)'

    def test_random_float(self):
        assert render(Node('math_random_float')) == 'std.crypto.random.float(f32)'


@given(st.integers(min_value=-10**6, max_value=10**6))
def test_integer_literal_property(value):
    """Property: integer literals render as their decimal text."""
    assert render(num(value)) == str(value)
