"""
Unit tests for the Zig list emitters.
"""

import pytest
from hypothesis import given, strategies as st

from visual_codegen.config import GeneratorConfig
from visual_codegen.exceptions import UnhandledNodeKindError
from visual_codegen.models import Node, Workspace
from visual_codegen.zig import create_generator
from visual_codegen.zig.common import ListCache, cache_list


def num(value):
    return Node('math_number', fields={'NUM': value})


def text(value):
    return Node('text', fields={'TEXT': value})


def var(name):
    return Node('variables_get', fields={'VAR': name})


def reverse(items):
    return Node('lists_reverse', inputs={'LIST': items})


def get_index(mode, where, items=None, at=None):
    inputs = {'VALUE': items or var('l')}
    if at is not None:
        inputs['AT'] = at
    return Node('lists_getIndex', fields={'MODE': mode, 'WHERE': where}, inputs=inputs)


def set_index(mode, where, at=None):
    inputs = {'LIST': var('l'), 'TO': num(5)}
    if at is not None:
        inputs['AT'] = at
    return Node('lists_setIndex', fields={'MODE': mode, 'WHERE': where}, inputs=inputs)


def render(node, **config):
    return create_generator(GeneratorConfig(**config)).node_to_code(node)


def program(node):
    workspace = Workspace(top_nodes=[Node('variables_set', fields={'VAR': 'r'},
                                          inputs={'VALUE': node})])
    return create_generator().workspace_to_code(workspace)


class TestCreate:
    """Test cases for building lists."""

    def test_create_empty(self):
        assert render(Node('lists_create_empty')) == 'std.ArrayList(f32).init(allocator)'

    def test_create_with(self):
        node = Node('lists_create_with', inputs={'ADD0': num(1), 'ADD1': num(2)})
        assert render(node) == 'try lists_create_with(&[_]f32{ 1, 2 })'

    def test_create_with_empty_socket(self):
        node = Node('lists_create_with', mutation={'items': 3},
                    inputs={'ADD0': num(1), 'ADD1': num(2)})
        assert render(node) == 'try lists_create_with(&[_]f32{ 1, 2, 0 })'

    def test_create_with_helper_and_allocator(self):
        code = program(Node('lists_create_with', inputs={'ADD0': num(1)}))
        assert 'const allocator = std.heap.page_allocator;' in code
        assert code.count('fn lists_create_with(items: []const f32) !std.ArrayList(f32) {') == 1

    def test_repeat(self):
        node = Node('lists_repeat', inputs={'ITEM': num(5), 'NUM': num(3)})
        assert render(node) == 'try lists_repeat(5, 3)'


class TestInspect:
    """Test cases for length, emptiness and search."""

    def test_length_and_empty(self):
        assert render(Node('lists_length', inputs={'VALUE': var('l')})) == 'l.items.len'
        assert render(Node('lists_isEmpty', inputs={'VALUE': var('l')})) == 'l.items.len == 0'

    def test_missing_list(self):
        assert render(Node('lists_length')) == 'std.ArrayList(f32).init(allocator).items.len'

    def test_index_of(self):
        node = Node('lists_indexOf', fields={'END': 'FIRST'},
                    inputs={'VALUE': var('l'), 'FIND': num(3)})
        assert render(node) == 'lists_index_of(l, 3, false) + 1'
        assert render(node, one_based_index=False) == 'lists_index_of(l, 3, false)'


class TestGetIndex:
    """Test cases for reading and removing elements."""

    @pytest.mark.parametrize('mode,where,expected', [
        ('GET', 'FIRST', 'l.items[0]'),
        ('GET_REMOVE', 'FIRST', 'l.orderedRemove(0)'),
        ('REMOVE', 'FIRST', '_ = l.orderedRemove(0);\n'),
        ('GET', 'LAST', 'l.getLast()'),
        ('GET_REMOVE', 'LAST', 'l.pop()'),
        ('REMOVE', 'LAST', '_ = l.pop();\n'),
        ('GET', 'RANDOM', 'lists_get_random_item(l)'),
        ('GET_REMOVE', 'RANDOM', 'lists_remove_random_item(l)'),
    ])
    def test_simple_list(self, mode, where, expected):
        assert render(get_index(mode, where)) == expected

    def test_from_start(self):
        assert render(get_index('GET', 'FROM_START', at=num(2))) == 'l.items[1]'
        assert render(get_index('GET', 'FROM_START', at=var('i'))) == 'l.items[i - 1]'
        assert render(get_index('REMOVE', 'FROM_START', at=num(1))) == \
            '_ = l.orderedRemove(0);\n'

    def test_from_end(self):
        assert render(get_index('GET', 'FROM_END', at=num(2))) == \
            'l.items[l.items.len - 2]'

    def test_from_end_complex_list_uses_helper(self):
        node = get_index('GET', 'FROM_END', reverse(var('l')), num(2))
        assert render(node) == 'lists_get_from_end(try lists_reverse(l), 2)'

    def test_from_end_complex_list_remove_is_cached(self):
        node = get_index('REMOVE', 'FROM_END', reverse(var('l')), num(2))
        assert render(node) == (
            'var tmp_list = try lists_reverse(l);\n'
            '_ = tmp_list.orderedRemove(tmp_list.items.len - 2);\n')

    def test_random_remove(self):
        assert render(get_index('REMOVE', 'RANDOM')) == (
            'const tmp_x = std.crypto.random.uintLessThan(usize, l.items.len);\n'
            '_ = l.orderedRemove(tmp_x);\n')

    def test_unhandled_combination(self):
        with pytest.raises(UnhandledNodeKindError) as exc_info:
            render(get_index('PEEK', 'FIRST'))
        assert exc_info.value.value == 'PEEK FIRST'


class TestSetIndex:
    """Test cases for setting and inserting elements."""

    @pytest.mark.parametrize('mode,where,at,expected', [
        ('SET', 'FIRST', None, 'l.items[0] = 5;\n'),
        ('INSERT', 'FIRST', None, 'try l.insert(0, 5);\n'),
        ('SET', 'LAST', None, 'l.items[l.items.len - 1] = 5;\n'),
        ('INSERT', 'LAST', None, 'try l.append(5);\n'),
        ('SET', 'FROM_START', 2, 'l.items[1] = 5;\n'),
        ('INSERT', 'FROM_START', 2, 'try l.insert(1, 5);\n'),
        ('SET', 'FROM_END', 1, 'l.items[l.items.len - 1] = 5;\n'),
    ])
    def test_set_index(self, mode, where, at, expected):
        node = set_index(mode, where, num(at) if at is not None else None)
        assert render(node) == expected

    def test_random(self):
        assert render(set_index('SET', 'RANDOM')) == (
            'const tmp_x = std.crypto.random.uintLessThan(usize, l.items.len);\n'
            'l.items[tmp_x] = 5;\n')

    def test_unknown_mode(self):
        with pytest.raises(UnhandledNodeKindError):
            render(set_index('SWAP', 'FIRST'))


class TestSublist:
    """Test cases for copying part of a list."""

    def sublist(self, items, where1, where2, at1=None, at2=None):
        inputs = {'LIST': items}
        if at1 is not None:
            inputs['AT1'] = at1
        if at2 is not None:
            inputs['AT2'] = at2
        return Node('lists_getSublist', fields={'WHERE1': where1, 'WHERE2': where2},
                    inputs=inputs)

    def test_slice(self):
        node = self.sublist(var('l'), 'FROM_START', 'FROM_START', num(2), num(4))
        assert render(node) == 'try lists_create_with(l.items[1..4])'
        assert render(self.sublist(var('l'), 'FIRST', 'LAST')) == \
            'try lists_create_with(l.items[0..])'

    def test_complex_list_uses_helper(self):
        node = self.sublist(reverse(var('l')), 'FROM_END', 'LAST', num(2))
        code = program(node)
        assert ('r = try lists_get_sublist((try lists_reverse(l)), "FROM_END", 1, "LAST", 0);'
                in code)
        assert 'return lists_create_with(list.items[start..end]);' in code
        assert code.count('fn sequence_index(') == 1


class TestSortSplitReverse:
    """Test cases for sorting, splitting and reversing."""

    def test_sort(self):
        node = Node('lists_sort', fields={'TYPE': 'NUMERIC', 'DIRECTION': '-1'},
                    inputs={'LIST': var('l')})
        assert render(node) == 'try lists_sort(l, "NUMERIC", -1)'

    def test_sort_unknown_type(self):
        with pytest.raises(UnhandledNodeKindError):
            render(Node('lists_sort', fields={'TYPE': 'DATE'}))

    def test_split_and_join(self):
        split = Node('lists_split', fields={'MODE': 'SPLIT'},
                     inputs={'INPUT': text('a,b'), 'DELIM': text(',')})
        assert render(split) == 'try lists_split("a,b", ",")'
        join = Node('lists_split', fields={'MODE': 'JOIN'},
                    inputs={'INPUT': var('l'), 'DELIM': text(',')})
        assert render(join) == 'try std.mem.join(allocator, ",", l.items)'

    def test_split_unknown_mode(self):
        with pytest.raises(UnhandledNodeKindError):
            render(Node('lists_split', fields={'MODE': 'ZIP'}))

    def test_reverse(self):
        assert render(reverse(var('l'))) == 'try lists_reverse(l)'


class TestCacheList:
    """Test cases for the list caching helper."""

    def test_identifier_not_cached(self):
        pass_ = create_generator().create_pass()
        assert cache_list(pass_, 'items') == ListCache('items', '')

    def test_expression_cached_in_fresh_temporaries(self):
        pass_ = create_generator().create_pass()
        first = cache_list(pass_, 'try f()')
        second = cache_list(pass_, 'try g()')
        assert first == ListCache('tmp_list', 'var tmp_list = try f();\n')
        assert second.expression == 'tmp_list2'


@given(st.integers(min_value=1, max_value=1000))
def test_one_based_literal_index_property(at):
    """Property: a literal one-based index is folded to at - 1."""
    assert render(get_index('GET', 'FROM_START', at=num(at))) == f'l.items[{at - 1}]'
