"""
Zig emitters for text blocks.

Text values are ``[]const u8`` slices. Anything that builds a new string
allocates from the program-wide ``allocator`` and so needs ``try``.
"""

import re

from ..precedence import Order
from .common import COMPARISON, field_text, format_spec, require

_SIMPLE_TEXT = re.compile(r'^"?\w+"?$')

WHITESPACE = '" \\t\\r\\n"'

TRIM_FUNCTIONS = {
    'LEFT': 'std.mem.trimLeft',
    'RIGHT': 'std.mem.trimRight',
    'BOTH': 'std.mem.trim',
}

CASE_FUNCTIONS = {
    'UPPERCASE': 'std.ascii.allocUpperString',
    'LOWERCASE': 'std.ascii.allocLowerString',
}

INDEX_OF = '''
fn {FUNCTION_NAME}(text: []const u8, sub: []const u8, from_end: bool) f32 {
  const index = if (from_end) std.mem.lastIndexOf(u8, text, sub) else std.mem.indexOf(u8, text, sub);
  return if (index) |i| @floatFromInt(i) else -1;
}
'''

GET_FROM_END = '''
fn {FUNCTION_NAME}(text: []const u8, x: usize) u8 {
  return text[text.len - x];
}
'''

RANDOM_LETTER = '''
fn {FUNCTION_NAME}(text: []const u8) u8 {
  const x = std.crypto.random.uintLessThan(usize, text.len);
  return text[x];
}
'''

# Shared with lists: resolve FIRST/LAST/FROM_START/FROM_END to a zero-based index.
SEQUENCE_INDEX = '''
fn {FUNCTION_NAME}(len: usize, where: []const u8, at: usize) usize {
  if (std.mem.eql(u8, where, "FROM_END")) {
    return len - 1 - at;
  } else if (std.mem.eql(u8, where, "FIRST")) {
    return 0;
  } else if (std.mem.eql(u8, where, "LAST")) {
    return len - 1;
  }
  return at;
}
'''

GET_SUBSTRING = '''
fn {FUNCTION_NAME}(text: []const u8, where1: []const u8, at1: usize, where2: []const u8, at2: usize) []const u8 {
  const start = {SEQUENCE_INDEX}(text.len, where1, at1);
  const end = {SEQUENCE_INDEX}(text.len, where2, at2) + 1;
  return text[start..end];
}
'''

TITLE_CASE = '''
fn {FUNCTION_NAME}(str: []const u8) ![]u8 {
  const title = try allocator.alloc(u8, str.len);
  var start_of_word = true;
  for (str, 0..) |char, i| {
    title[i] = if (start_of_word) std.ascii.toUpper(char) else std.ascii.toLower(char);
    start_of_word = std.ascii.isWhitespace(char);
  }
  return title;
}
'''

PROMPT = '''
fn {FUNCTION_NAME}(msg: []const u8) ![]const u8 {
  try std.io.getStdOut().writer().print("{s}", .{ msg });
  const line = try std.io.getStdIn().reader().readUntilDelimiterAlloc(allocator, '\\n', 1024);
  return std.mem.trimRight(u8, line, "\\r");
}
'''

COUNT = '''
fn {FUNCTION_NAME}(haystack: []const u8, needle: []const u8) f32 {
  if (needle.len == 0) {
    return @floatFromInt(haystack.len + 1);
  }
  return @floatFromInt(std.mem.count(u8, haystack, needle));
}
'''

REVERSE = '''
fn {FUNCTION_NAME}(text: []const u8) ![]u8 {
  const result = try allocator.dupe(u8, text);
  std.mem.reverse(u8, result);
  return result;
}
'''


def sequence_index_helper(pass_) -> str:
    return pass_.provide_function('sequence_index', SEQUENCE_INDEX)


def text(pass_, node):
    """Text value."""
    return pass_.generator.quote(field_text(node, 'TEXT')), Order.ATOMIC


def text_multiline(pass_, node):
    code = pass_.generator.multiline_quote(field_text(node, 'TEXT'))
    order = Order.ADDITIVE if '++' in code else Order.ATOMIC
    return code, order


def _format(pass_, specs, values):
    require(pass_, 'allocator')
    pattern = pass_.generator.quote(''.join(specs))
    return f'try std.fmt.allocPrint(allocator, {pattern}, .{{ {", ".join(values)} }})'


def text_join(pass_, node):
    """Create a string made up of any number of elements of any type."""
    count = node.item_count
    if count == 0:
        return '""', Order.ATOMIC
    specs, values = [], []
    for i in range(count):
        child = node.get_input(f'ADD{i}')
        specs.append(format_spec(child))
        values.append(pass_.value_to_code(node, f'ADD{i}', Order.NONE) or '""')
    return _format(pass_, specs, values), Order.UNARY_PREFIX


def text_append(pass_, node):
    """Append to a variable in place."""
    variable = pass_.get_variable_name(field_text(node, 'VAR'))
    value = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    code = _format(pass_, ['{s}', format_spec(node.get_input('TEXT'))], [variable, value])
    return f'{variable} = {code};\n'


def text_length(pass_, node):
    value = pass_.value_to_code(node, 'VALUE', Order.UNARY_POSTFIX) or '""'
    return f'{value}.len', Order.UNARY_POSTFIX


def text_is_empty(pass_, node):
    value = pass_.value_to_code(node, 'VALUE', Order.UNARY_POSTFIX) or '""'
    return f'{value}.len == 0', COMPARISON


def text_index_of(pass_, node):
    """Search the text for a substring."""
    end = node.get_field('END', 'FIRST')
    if end not in ('FIRST', 'LAST'):
        raise pass_.unhandled(node, end)
    substring = pass_.value_to_code(node, 'FIND', Order.NONE) or '""'
    value = pass_.value_to_code(node, 'VALUE', Order.NONE) or '""'
    name = pass_.provide_function('text_index_of', INDEX_OF)
    from_end = 'true' if end == 'LAST' else 'false'
    code = f'{name}({value}, {substring}, {from_end})'
    if pass_.one_based_index:
        return code + ' + 1', Order.ADDITIVE
    return code, Order.UNARY_POSTFIX


def text_char_at(pass_, node):
    """Get letter at index."""
    where = node.get_field('WHERE', 'FROM_START')
    value_order = Order.UNARY_POSTFIX if where in ('FIRST', 'FROM_START') else Order.NONE
    value = pass_.value_to_code(node, 'VALUE', value_order) or '""'
    if where == 'FIRST':
        return f'{value}[0]', Order.UNARY_POSTFIX
    if where == 'FROM_START':
        at = pass_.get_adjusted(node, 'AT')
        return f'{value}[{at}]', Order.UNARY_POSTFIX
    if where in ('LAST', 'FROM_END'):
        # LAST has no AT input, so the adjusted default is 1.
        at = pass_.get_adjusted(node, 'AT', 1)
        name = pass_.provide_function('text_get_from_end', GET_FROM_END)
        return f'{name}({value}, {at})', Order.UNARY_POSTFIX
    if where == 'RANDOM':
        name = pass_.provide_function('text_random_letter', RANDOM_LETTER)
        return f'{name}({value})', Order.UNARY_POSTFIX
    raise pass_.unhandled(node, where)


def text_get_substring(pass_, node):
    """Get substring."""
    where1 = node.get_field('WHERE1')
    where2 = node.get_field('WHERE2')
    requires_length_call = where1 != 'FROM_END' and where2 == 'FROM_START'
    value_order = Order.UNARY_POSTFIX if requires_length_call else Order.NONE
    value = pass_.value_to_code(node, 'STRING', value_order) or '""'

    if where1 == 'FIRST' and where2 == 'LAST':
        return value, Order.NONE

    if _SIMPLE_TEXT.match(value) or requires_length_call:
        # Text is a variable or a literal, or needs no length: slice inline.
        if where1 == 'FROM_START':
            at1 = pass_.get_adjusted(node, 'AT1')
        elif where1 == 'FROM_END':
            at1 = pass_.get_adjusted(node, 'AT1', 1, False, Order.ADDITIVE)
            at1 = f'{value}.len - {at1}'
        elif where1 == 'FIRST':
            at1 = '0'
        else:
            raise pass_.unhandled(node, where1)

        if where2 == 'FROM_START':
            at2 = pass_.get_adjusted(node, 'AT2', 1)
        elif where2 == 'FROM_END':
            at2 = pass_.get_adjusted(node, 'AT2', 0, False, Order.ADDITIVE)
            at2 = f'{value}.len - {at2}'
        elif where2 == 'LAST':
            at2 = ''
        else:
            raise pass_.unhandled(node, where2)
        return f'{value}[{at1}..{at2}]', Order.UNARY_POSTFIX

    for where in (where1, where2):
        if where not in ('FROM_START', 'FROM_END', 'FIRST', 'LAST'):
            raise pass_.unhandled(node, where)
    at1 = pass_.get_adjusted(node, 'AT1')
    at2 = pass_.get_adjusted(node, 'AT2')
    index_name = sequence_index_helper(pass_)
    name = pass_.provide_function(
        'text_get_substring', GET_SUBSTRING.replace('{SEQUENCE_INDEX}', index_name))
    quote = pass_.generator.quote
    code = f'{name}({value}, {quote(where1)}, {at1}, {quote(where2)}, {at2})'
    return code, Order.UNARY_POSTFIX


def text_change_case(pass_, node):
    """Change capitalization."""
    case = node.get_field('CASE')
    value = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    require(pass_, 'allocator')
    if case in CASE_FUNCTIONS:
        return f'try {CASE_FUNCTIONS[case]}(allocator, {value})', Order.UNARY_PREFIX
    if case == 'TITLECASE':
        name = pass_.provide_function('text_toTitleCase', TITLE_CASE)
        return f'try {name}({value})', Order.UNARY_PREFIX
    raise pass_.unhandled(node, case)


def text_trim(pass_, node):
    """Trim spaces."""
    mode = node.get_field('MODE')
    if mode not in TRIM_FUNCTIONS:
        raise pass_.unhandled(node, mode)
    value = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    return f'{TRIM_FUNCTIONS[mode]}(u8, {value}, {WHITESPACE})', Order.UNARY_POSTFIX


def text_print(pass_, node):
    """Print statement."""
    require(pass_, 'debug')
    message = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    spec = pass_.generator.quote(format_spec(node.get_input('TEXT')))
    return f'debug({spec}, .{{ {message} }});\n'


def text_prompt_ext(pass_, node):
    """Prompt function."""
    if node.has_field('TEXT'):
        # Internal message.
        message = pass_.generator.quote(field_text(node, 'TEXT'))
    else:
        # External message.
        message = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    require(pass_, 'allocator')
    name = pass_.provide_function('text_prompt', PROMPT)
    code = f'try {name}({message})'
    if node.get_field('TYPE') == 'NUMBER':
        code = f'try std.fmt.parseFloat(f32, {code})'
    return code, Order.UNARY_PREFIX


def text_count(pass_, node):
    value = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    sub = pass_.value_to_code(node, 'SUB', Order.NONE) or '""'
    name = pass_.provide_function('text_count', COUNT)
    return f'{name}({value}, {sub})', Order.UNARY_POSTFIX


def text_replace(pass_, node):
    value = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    old = pass_.value_to_code(node, 'FROM', Order.NONE) or '""'
    new = pass_.value_to_code(node, 'TO', Order.NONE) or '""'
    require(pass_, 'allocator')
    return f'try std.mem.replaceOwned(u8, allocator, {value}, {old}, {new})', Order.UNARY_PREFIX


def text_reverse(pass_, node):
    value = pass_.value_to_code(node, 'TEXT', Order.NONE) or '""'
    require(pass_, 'allocator')
    name = pass_.provide_function('text_reverse', REVERSE)
    return f'try {name}({value})', Order.UNARY_PREFIX


def register(registry):
    registry.register('text', text, category='text')
    registry.register('text_multiline', text_multiline, category='text')
    registry.register('text_join', text_join, category='text')
    registry.register('text_append', text_append, category='text')
    registry.register('text_length', text_length, category='text')
    registry.register('text_isEmpty', text_is_empty, category='text')
    registry.register('text_indexOf', text_index_of, category='text')
    registry.register('text_charAt', text_char_at, category='text')
    registry.register('text_getSubstring', text_get_substring, category='text')
    registry.register('text_changeCase', text_change_case, category='text')
    registry.register('text_trim', text_trim, category='text')
    registry.register('text_print', text_print, category='text')
    registry.register('text_prompt_ext', text_prompt_ext, category='text')
    registry.alias('text_prompt', 'text_prompt_ext')
    registry.register('text_count', text_count, category='text')
    registry.register('text_replace', text_replace, category='text')
    registry.register('text_reverse', text_reverse, category='text')
