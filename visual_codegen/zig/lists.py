"""
Zig emitters for list blocks.

Lists are ``std.ArrayList(f32)`` values allocated from the program-wide
``allocator``.
"""

from ..generator import iter_items
from ..precedence import Order
from .common import (
    COMPARISON, EMPTY_LIST, RANDOM, SIMPLE_EXPRESSION, cache_list, field_text, require
)
from .texts import sequence_index_helper

CREATE_WITH = '''
fn {FUNCTION_NAME}(items: []const f32) !std.ArrayList(f32) {
  var list = std.ArrayList(f32).init(allocator);
  try list.appendSlice(items);
  return list;
}
'''

REPEAT = '''
fn {FUNCTION_NAME}(item: f32, n: f32) !std.ArrayList(f32) {
  var list = std.ArrayList(f32).init(allocator);
  try list.appendNTimes(item, @intFromFloat(n));
  return list;
}
'''

INDEX_OF = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32), item: f32, from_end: bool) f32 {
  const index = if (from_end) std.mem.lastIndexOfScalar(f32, list.items, item) else std.mem.indexOfScalar(f32, list.items, item);
  return if (index) |i| @floatFromInt(i) else -1;
}
'''

GET_FROM_END = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32), x: usize) f32 {
  return list.items[list.items.len - x];
}
'''

REMOVE_FROM_END = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32), x: usize) f32 {
  var my_list = list;
  return my_list.orderedRemove(my_list.items.len - x);
}
'''

GET_RANDOM_ITEM = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  const x = std.crypto.random.uintLessThan(usize, list.items.len);
  return list.items[x];
}
'''

REMOVE_RANDOM_ITEM = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  var my_list = list;
  const x = std.crypto.random.uintLessThan(usize, my_list.items.len);
  return my_list.orderedRemove(x);
}
'''

GET_SUBLIST = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32), where1: []const u8, at1: usize, where2: []const u8, at2: usize) !std.ArrayList(f32) {
  const start = {SEQUENCE_INDEX}(list.items.len, where1, at1);
  const end = {SEQUENCE_INDEX}(list.items.len, where2, at2) + 1;
  return {CREATE_WITH}(list.items[start..end]);
}
'''

SORT = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32), sort_type: []const u8, direction: f32) !std.ArrayList(f32) {
  // Every element is an f32, so all sort types compare numerically.
  _ = sort_type;
  var result = try list.clone();
  if (direction > 0) {
    std.mem.sort(f32, result.items, {}, std.sort.asc(f32));
  } else {
    std.mem.sort(f32, result.items, {}, std.sort.desc(f32));
  }
  return result;
}
'''

SPLIT = '''
fn {FUNCTION_NAME}(text: []const u8, delimiter: []const u8) !std.ArrayList([]const u8) {
  var list = std.ArrayList([]const u8).init(allocator);
  var it = std.mem.splitSequence(u8, text, delimiter);
  while (it.next()) |part| {
    try list.append(part);
  }
  return list;
}
'''

REVERSE = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) !std.ArrayList(f32) {
  var result = try list.clone();
  std.mem.reverse(f32, result.items);
  return result;
}
'''

SORT_TYPES = ('NUMERIC', 'TEXT', 'IGNORE_CASE')


def _list_input(pass_, node, slot, order):
    code = pass_.value_to_code(node, slot, order)
    if not code:
        require(pass_, 'allocator')
        code = EMPTY_LIST
    return code


def _create_with_helper(pass_):
    require(pass_, 'allocator')
    return pass_.provide_function('lists_create_with', CREATE_WITH)


def lists_create_empty(pass_, node):
    require(pass_, 'allocator')
    return EMPTY_LIST, Order.UNARY_POSTFIX


def lists_create_with(pass_, node):
    """Create a list with any number of elements."""
    elements = list(iter_items(pass_, node, Order.NONE, '0'))
    name = _create_with_helper(pass_)
    return f'try {name}(&[_]f32{{ {", ".join(elements)} }})', Order.UNARY_PREFIX


def lists_repeat(pass_, node):
    """Create a list with one element repeated."""
    element = pass_.value_to_code(node, 'ITEM', Order.NONE) or '0'
    count = pass_.value_to_code(node, 'NUM', Order.NONE) or '0'
    require(pass_, 'allocator')
    name = pass_.provide_function('lists_repeat', REPEAT)
    return f'try {name}({element}, {count})', Order.UNARY_PREFIX


def lists_length(pass_, node):
    items = _list_input(pass_, node, 'VALUE', Order.UNARY_POSTFIX)
    return f'{items}.items.len', Order.UNARY_POSTFIX


def lists_is_empty(pass_, node):
    items = _list_input(pass_, node, 'VALUE', Order.UNARY_POSTFIX)
    return f'{items}.items.len == 0', COMPARISON


def lists_index_of(pass_, node):
    """Find an item in the list."""
    end = node.get_field('END', 'FIRST')
    if end not in ('FIRST', 'LAST'):
        raise pass_.unhandled(node, end)
    item = pass_.value_to_code(node, 'FIND', Order.NONE) or '0'
    items = _list_input(pass_, node, 'VALUE', Order.NONE)
    name = pass_.provide_function('lists_index_of', INDEX_OF)
    code = f'{name}({items}, {item}, {"true" if end == "LAST" else "false"})'
    if pass_.one_based_index:
        return code + ' + 1', Order.ADDITIVE
    return code, Order.UNARY_POSTFIX


def lists_get_index(pass_, node):
    """Get, remove, or get and remove the element at an index."""
    mode = node.get_field('MODE', 'GET')
    where = node.get_field('WHERE', 'FROM_START')
    list_order = Order.NONE if where in ('RANDOM', 'FROM_END') else Order.UNARY_POSTFIX
    items = _list_input(pass_, node, 'VALUE', list_order)

    # RANDOM REMOVE and FROM_END read the list twice.
    if ((where == 'RANDOM' and mode == 'REMOVE') or where == 'FROM_END') \
            and not SIMPLE_EXPRESSION.match(items):
        if where == 'RANDOM':
            cache = cache_list(pass_, items)
            x_var = pass_.get_distinct_name('tmp_x')
            code = cache.setup
            code += f'const {x_var} = {RANDOM}.uintLessThan(usize, {cache.expression}.items.len);\n'
            code += f'_ = {cache.expression}.orderedRemove({x_var});\n'
            return code
        if mode == 'REMOVE':
            at = pass_.get_adjusted(node, 'AT', 1, False, Order.ADDITIVE)
            cache = cache_list(pass_, items)
            return cache.setup + (f'_ = {cache.expression}.orderedRemove('
                                  f'{cache.expression}.items.len - {at});\n')
        if mode == 'GET':
            at = pass_.get_adjusted(node, 'AT', 1)
            name = pass_.provide_function('lists_get_from_end', GET_FROM_END)
            return f'{name}({items}, {at})', Order.UNARY_POSTFIX
        if mode == 'GET_REMOVE':
            at = pass_.get_adjusted(node, 'AT', 1)
            name = pass_.provide_function('lists_remove_from_end', REMOVE_FROM_END)
            return f'{name}({items}, {at})', Order.UNARY_POSTFIX
        raise pass_.unhandled(node, mode)

    # The list is a bare identifier, or is only read once.
    if where == 'FIRST':
        if mode == 'GET':
            return f'{items}.items[0]', Order.UNARY_POSTFIX
        if mode == 'GET_REMOVE':
            return f'{items}.orderedRemove(0)', Order.UNARY_POSTFIX
        if mode == 'REMOVE':
            return f'_ = {items}.orderedRemove(0);\n'
    elif where == 'LAST':
        if mode == 'GET':
            return f'{items}.getLast()', Order.UNARY_POSTFIX
        if mode == 'GET_REMOVE':
            return f'{items}.pop()', Order.UNARY_POSTFIX
        if mode == 'REMOVE':
            return f'_ = {items}.pop();\n'
    elif where == 'FROM_START':
        at = pass_.get_adjusted(node, 'AT')
        if mode == 'GET':
            return f'{items}.items[{at}]', Order.UNARY_POSTFIX
        if mode == 'GET_REMOVE':
            return f'{items}.orderedRemove({at})', Order.UNARY_POSTFIX
        if mode == 'REMOVE':
            return f'_ = {items}.orderedRemove({at});\n'
    elif where == 'FROM_END':
        at = pass_.get_adjusted(node, 'AT', 1, False, Order.ADDITIVE)
        if mode == 'GET':
            return f'{items}.items[{items}.items.len - {at}]', Order.UNARY_POSTFIX
        if mode == 'GET_REMOVE':
            return f'{items}.orderedRemove({items}.items.len - {at})', Order.UNARY_POSTFIX
        if mode == 'REMOVE':
            return f'_ = {items}.orderedRemove({items}.items.len - {at});\n'
    elif where == 'RANDOM':
        if mode == 'REMOVE':
            x_var = pass_.get_distinct_name('tmp_x')
            code = f'const {x_var} = {RANDOM}.uintLessThan(usize, {items}.items.len);\n'
            code += f'_ = {items}.orderedRemove({x_var});\n'
            return code
        if mode == 'GET':
            name = pass_.provide_function('lists_get_random_item', GET_RANDOM_ITEM)
            return f'{name}({items})', Order.UNARY_POSTFIX
        if mode == 'GET_REMOVE':
            name = pass_.provide_function('lists_remove_random_item', REMOVE_RANDOM_ITEM)
            return f'{name}({items})', Order.UNARY_POSTFIX
    raise pass_.unhandled(node, f'{mode} {where}')


def lists_set_index(pass_, node):
    """Set or insert the element at an index."""
    mode = node.get_field('MODE', 'SET')
    where = node.get_field('WHERE', 'FROM_START')
    items = _list_input(pass_, node, 'LIST', Order.UNARY_POSTFIX)
    value = pass_.value_to_code(node, 'TO', Order.ASSIGNMENT) or '0'
    if mode not in ('SET', 'INSERT'):
        raise pass_.unhandled(node, mode)

    if where == 'FIRST':
        if mode == 'SET':
            return f'{items}.items[0] = {value};\n'
        return f'try {items}.insert(0, {value});\n'
    if where == 'LAST':
        if mode == 'SET':
            cache = cache_list(pass_, items)
            target = cache.expression
            return cache.setup + f'{target}.items[{target}.items.len - 1] = {value};\n'
        return f'try {items}.append({value});\n'
    if where == 'FROM_START':
        at = pass_.get_adjusted(node, 'AT')
        if mode == 'SET':
            return f'{items}.items[{at}] = {value};\n'
        return f'try {items}.insert({at}, {value});\n'
    if where == 'FROM_END':
        at = pass_.get_adjusted(node, 'AT', 1, False, Order.ADDITIVE)
        cache = cache_list(pass_, items)
        target = cache.expression
        if mode == 'SET':
            return cache.setup + f'{target}.items[{target}.items.len - {at}] = {value};\n'
        return cache.setup + f'try {target}.insert({target}.items.len - {at}, {value});\n'
    if where == 'RANDOM':
        cache = cache_list(pass_, items)
        target = cache.expression
        x_var = pass_.get_distinct_name('tmp_x')
        code = cache.setup
        code += f'const {x_var} = {RANDOM}.uintLessThan(usize, {target}.items.len);\n'
        if mode == 'SET':
            return code + f'{target}.items[{x_var}] = {value};\n'
        return code + f'try {target}.insert({x_var}, {value});\n'
    raise pass_.unhandled(node, where)


def lists_get_sublist(pass_, node):
    """Get a copy of part of a list."""
    items = _list_input(pass_, node, 'LIST', Order.UNARY_POSTFIX)
    where1 = node.get_field('WHERE1')
    where2 = node.get_field('WHERE2')
    create_with = _create_with_helper(pass_)

    if SIMPLE_EXPRESSION.match(items) or (where1 != 'FROM_END' and where2 == 'FROM_START'):
        # No helper needed when the list is an identifier or its length is not read.
        if where1 == 'FROM_START':
            at1 = pass_.get_adjusted(node, 'AT1')
        elif where1 == 'FROM_END':
            at1 = pass_.get_adjusted(node, 'AT1', 1, False, Order.ADDITIVE)
            at1 = f'{items}.items.len - {at1}'
        elif where1 == 'FIRST':
            at1 = '0'
        else:
            raise pass_.unhandled(node, where1)

        if where2 == 'FROM_START':
            at2 = pass_.get_adjusted(node, 'AT2', 1)
        elif where2 == 'FROM_END':
            at2 = pass_.get_adjusted(node, 'AT2', 0, False, Order.ADDITIVE)
            at2 = f'{items}.items.len - {at2}'
        elif where2 == 'LAST':
            at2 = ''
        else:
            raise pass_.unhandled(node, where2)
        return f'try {create_with}({items}.items[{at1}..{at2}])', Order.UNARY_PREFIX

    for where in (where1, where2):
        if where not in ('FROM_START', 'FROM_END', 'FIRST', 'LAST'):
            raise pass_.unhandled(node, where)
    at1 = pass_.get_adjusted(node, 'AT1')
    at2 = pass_.get_adjusted(node, 'AT2')
    template = GET_SUBLIST.replace('{SEQUENCE_INDEX}', sequence_index_helper(pass_))
    template = template.replace('{CREATE_WITH}', create_with)
    name = pass_.provide_function('lists_get_sublist', template)
    quote = pass_.generator.quote
    code = f'try {name}({items}, {quote(where1)}, {at1}, {quote(where2)}, {at2})'
    return code, Order.UNARY_PREFIX


def lists_sort(pass_, node):
    """Sort a copy of a list."""
    items = _list_input(pass_, node, 'LIST', Order.NONE)
    sort_type = node.get_field('TYPE', 'NUMERIC')
    if sort_type not in SORT_TYPES:
        raise pass_.unhandled(node, sort_type)
    direction = '1' if field_text(node, 'DIRECTION', '1') == '1' else '-1'
    name = pass_.provide_function('lists_sort', SORT)
    quote = pass_.generator.quote
    return f'try {name}({items}, {quote(sort_type)}, {direction})', Order.UNARY_PREFIX


def lists_split(pass_, node):
    """Split text into a list, or join a list into text."""
    mode = node.get_field('MODE')
    delimiter = pass_.value_to_code(node, 'DELIM', Order.NONE) or '""'
    require(pass_, 'allocator')
    if mode == 'SPLIT':
        text = pass_.value_to_code(node, 'INPUT', Order.NONE) or '""'
        name = pass_.provide_function('lists_split', SPLIT)
        return f'try {name}({text}, {delimiter})', Order.UNARY_PREFIX
    if mode == 'JOIN':
        items = _list_input(pass_, node, 'INPUT', Order.UNARY_POSTFIX)
        return f'try std.mem.join(allocator, {delimiter}, {items}.items)', Order.UNARY_PREFIX
    raise pass_.unhandled(node, mode)


def lists_reverse(pass_, node):
    items = _list_input(pass_, node, 'LIST', Order.NONE)
    name = pass_.provide_function('lists_reverse', REVERSE)
    return f'try {name}({items})', Order.UNARY_PREFIX


def register(registry):
    registry.register('lists_create_empty', lists_create_empty, category='lists')
    registry.register('lists_create_with', lists_create_with, category='lists')
    registry.register('lists_repeat', lists_repeat, category='lists')
    registry.register('lists_length', lists_length, category='lists')
    registry.register('lists_isEmpty', lists_is_empty, category='lists')
    registry.register('lists_indexOf', lists_index_of, category='lists')
    registry.register('lists_getIndex', lists_get_index, category='lists')
    registry.register('lists_setIndex', lists_set_index, category='lists')
    registry.register('lists_getSublist', lists_get_sublist, category='lists')
    registry.register('lists_sort', lists_sort, category='lists')
    registry.register('lists_split', lists_split, category='lists')
    registry.register('lists_reverse', lists_reverse, category='lists')
