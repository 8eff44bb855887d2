"""
Zig emitters for math blocks.

Floating point values are ``f32`` throughout. List statistics are shared
helpers that take an ``std.ArrayList(f32)``.
"""

import math

from ..precedence import Order
from ..quoting import format_number
from .common import COMPARISON, RANDOM, field_text, require

ARITHMETIC = {
    'ADD': (' + ', Order.ADDITIVE),
    'MINUS': (' - ', Order.ADDITIVE),
    'MULTIPLY': (' * ', Order.MULTIPLICATIVE),
    'DIVIDE': (' / ', Order.MULTIPLICATIVE),
    'POWER': (None, Order.NONE),  # math.pow(), see below
}

# Builtins and std.math calls that wrap a single argument.
SINGLE_CALLS = {
    'ABS': '@abs({})',
    'ROOT': '@sqrt({})',
    'LN': '@log({})',
    'LOG10': '@log10({})',
    'EXP': '@exp({})',
    'POW10': 'math.pow(f32, 10, {})',
    'ROUND': '@round({})',
    'ROUNDUP': '@ceil({})',
    'ROUNDDOWN': '@floor({})',
    'SIN': '@sin({} / 180 * math.pi)',
    'COS': '@cos({} / 180 * math.pi)',
    'TAN': '@tan({} / 180 * math.pi)',
}

INVERSE_TRIG = {
    'ASIN': 'math.asin({}) / math.pi * 180',
    'ACOS': 'math.acos({}) / math.pi * 180',
    'ATAN': 'math.atan({}) / math.pi * 180',
}

CONSTANTS = {
    'PI': ('math.pi', Order.UNARY_POSTFIX),
    'E': ('math.e', Order.UNARY_POSTFIX),
    'GOLDEN_RATIO': ('math.phi', Order.UNARY_POSTFIX),
    'SQRT2': ('math.sqrt2', Order.UNARY_POSTFIX),
    'SQRT1_2': ('math.sqrt1_2', Order.UNARY_POSTFIX),
    'INFINITY': ('math.inf(f32)', Order.UNARY_POSTFIX),
}

# property -> (suffix, input order, output order)
PROPERTIES = {
    'EVEN': (', 2) == 0', Order.NONE, COMPARISON),
    'ODD': (', 2) == 1', Order.NONE, COMPARISON),
    'WHOLE': (', 1) == 0', Order.NONE, COMPARISON),
    'POSITIVE': (' > 0', COMPARISON, COMPARISON),
    'NEGATIVE': (' < 0', COMPARISON, COMPARISON),
    'DIVISIBLE_BY': (None, Order.NONE, COMPARISON),
    'PRIME': (None, Order.NONE, Order.UNARY_POSTFIX),
}

IS_PRIME = '''
fn {FUNCTION_NAME}(n: f32) bool {
  // https://en.wikipedia.org/wiki/Primality_test#Naive_methods
  if (n == 2 or n == 3) {
    return true;
  }
  // False if n is negative, is 1, or not whole.
  // And false if n is divisible by 2 or 3.
  if (n <= 1 or @mod(n, 1) != 0 or @mod(n, 2) == 0 or @mod(n, 3) == 0) {
    return false;
  }
  // Check all the numbers of form 6k +/- 1, up to sqrt(n).
  var x: f32 = 6;
  while (x <= @sqrt(n) + 1) : (x += 6) {
    if (@mod(n, x - 1) == 0 or @mod(n, x + 1) == 0) {
      return false;
    }
  }
  return true;
}
'''

LIST_SUM = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  var sum: f32 = 0;
  for (list.items) |entry| {
    sum += entry;
  }
  return sum;
}
'''

LIST_MIN = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  if (list.items.len == 0) return 0;
  var min_val = list.items[0];
  for (list.items) |entry| {
    min_val = @min(min_val, entry);
  }
  return min_val;
}
'''

LIST_MAX = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  if (list.items.len == 0) return 0;
  var max_val = list.items[0];
  for (list.items) |entry| {
    max_val = @max(max_val, entry);
  }
  return max_val;
}
'''

LIST_MEAN = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  if (list.items.len == 0) return 0;
  var sum: f32 = 0;
  for (list.items) |entry| {
    sum += entry;
  }
  return sum / @as(f32, @floatFromInt(list.items.len));
}
'''

LIST_MEDIAN = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) !f32 {
  // Sort a copy, then take the middle value or the mean of the two middle values.
  if (list.items.len == 0) return 0;
  const local = try allocator.dupe(f32, list.items);
  defer allocator.free(local);
  std.mem.sort(f32, local, {}, std.sort.asc(f32));
  const index = local.len / 2;
  if (local.len % 2 == 1) {
    return local[index];
  }
  return (local[index - 1] + local[index]) / 2;
}
'''

LIST_MODES = '''
fn {FUNCTION_NAME}(values: std.ArrayList(f32)) !std.ArrayList(f32) {
  // A list can have more than one mode, so the result is a list.
  var modes = std.ArrayList(f32).init(allocator);
  var counts = std.AutoArrayHashMap(u32, usize).init(allocator);
  defer counts.deinit();
  var max_count: usize = 0;
  for (values.items) |value| {
    const entry = try counts.getOrPutValue(@bitCast(value), 0);
    entry.value_ptr.* += 1;
    max_count = @max(max_count, entry.value_ptr.*);
  }
  var it = counts.iterator();
  while (it.next()) |entry| {
    if (entry.value_ptr.* == max_count) {
      try modes.append(@bitCast(entry.key_ptr.*));
    }
  }
  return modes;
}
'''

LIST_STD_DEV = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  if (list.items.len == 0) return 0;
  const n: f32 = @floatFromInt(list.items.len);
  var sum: f32 = 0;
  for (list.items) |x| {
    sum += x;
  }
  const mean = sum / n;
  var sum_square: f32 = 0;
  for (list.items) |x| {
    sum_square += math.pow(f32, x - mean, 2);
  }
  return @sqrt(sum_square / n);
}
'''

LIST_RANDOM_ITEM = '''
fn {FUNCTION_NAME}(list: std.ArrayList(f32)) f32 {
  const x = std.crypto.random.uintLessThan(usize, list.items.len);
  return list.items[x];
}
'''

RANDOM_INT = '''
fn {FUNCTION_NAME}(a: f32, b: f32) f32 {
  // Swap a and b to ensure a is smaller.
  const low: i32 = @intFromFloat(@min(a, b));
  const high: i32 = @intFromFloat(@max(a, b));
  return @floatFromInt(std.crypto.random.intRangeAtMost(i32, low, high));
}
'''

# op -> (helper key, template, imports, returns an error union)
LIST_FUNCTIONS = {
    'SUM': ('math_sum', LIST_SUM, (), False),
    'MIN': ('math_min', LIST_MIN, (), False),
    'MAX': ('math_max', LIST_MAX, (), False),
    'AVERAGE': ('math_mean', LIST_MEAN, (), False),
    'MEDIAN': ('math_median', LIST_MEDIAN, ('allocator',), True),
    'MODE': ('math_modes', LIST_MODES, ('allocator',), True),
    'STD_DEV': ('math_standard_deviation', LIST_STD_DEV, ('math',), False),
    'RANDOM': ('math_random_item', LIST_RANDOM_ITEM, (), False),
}


def math_number(pass_, node):
    """Numeric value."""
    value = node.get_field('NUM', 0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise pass_.unhandled(node, value)
    if math.isinf(number):
        require(pass_, 'math')
        if number > 0:
            return 'math.inf(f32)', Order.UNARY_POSTFIX
        return '-math.inf(f32)', Order.UNARY_PREFIX
    if math.isnan(number):
        require(pass_, 'math')
        return 'math.nan(f32)', Order.UNARY_POSTFIX
    # A negative literal is the negation operator applied to a number.
    order = Order.UNARY_PREFIX if number < 0 else Order.ATOMIC
    return format_number(value), order


def math_arithmetic(pass_, node):
    """Basic arithmetic operators, and power."""
    op = node.get_field('OP')
    if op not in ARITHMETIC:
        raise pass_.unhandled(node, op)
    operator, order = ARITHMETIC[op]
    left = pass_.value_to_code(node, 'A', order) or '0'
    right = pass_.value_to_code(node, 'B', order) or '0'
    if operator is None:
        # Power needs a function call.
        require(pass_, 'math')
        return f'math.pow(f32, {left}, {right})', Order.UNARY_POSTFIX
    return left + operator + right, order


def math_single(pass_, node):
    """Math operators with a single operand."""
    op = node.get_field('OP')
    if op == 'NEG':
        # A negative operand is wrapped, so this never renders as --x.
        argument = pass_.value_to_code(node, 'NUM', Order.UNARY_PREFIX) or '0'
        return '-' + argument, Order.UNARY_PREFIX

    if op in ('SIN', 'COS', 'TAN'):
        argument = pass_.value_to_code(node, 'NUM', Order.MULTIPLICATIVE) or '0'
    else:
        argument = pass_.value_to_code(node, 'NUM', Order.NONE) or '0'

    if op in SINGLE_CALLS:
        code = SINGLE_CALLS[op].format(argument)
        if 'math.' in code:
            require(pass_, 'math')
        return code, Order.UNARY_POSTFIX
    if op in INVERSE_TRIG:
        require(pass_, 'math')
        return INVERSE_TRIG[op].format(argument), Order.MULTIPLICATIVE
    raise pass_.unhandled(node, op)


def math_constant(pass_, node):
    """Constants: PI, E, the Golden Ratio, sqrt(2), 1/sqrt(2), INFINITY."""
    constant = node.get_field('CONSTANT')
    if constant not in CONSTANTS:
        raise pass_.unhandled(node, constant)
    require(pass_, 'math')
    return CONSTANTS[constant]


def math_number_property(pass_, node):
    """Check if a number is even, odd, prime, whole, positive, negative or divisible."""
    prop = node.get_field('PROPERTY')
    if prop not in PROPERTIES:
        raise pass_.unhandled(node, prop)
    suffix, input_order, output_order = PROPERTIES[prop]
    number = pass_.value_to_code(node, 'NUMBER_TO_CHECK', input_order) or '0'
    if prop == 'PRIME':
        name = pass_.provide_function('math_isPrime', IS_PRIME)
        return f'{name}({number})', output_order
    if prop == 'DIVISIBLE_BY':
        divisor = pass_.value_to_code(node, 'DIVISOR', Order.NONE) or '0'
        if divisor == '0':
            return 'false', Order.ATOMIC
        return f'@mod({number}, {divisor}) == 0', output_order
    if prop in ('POSITIVE', 'NEGATIVE'):
        return number + suffix, output_order
    return f'@mod({number}' + suffix, output_order


def math_change(pass_, node):
    """Add to a variable in place."""
    delta = pass_.value_to_code(node, 'DELTA', Order.ASSIGNMENT) or '0'
    variable = pass_.get_variable_name(field_text(node, 'VAR'))
    return f'{variable} += {delta};\n'


def math_on_list(pass_, node):
    """Math functions for lists."""
    op = node.get_field('OP')
    if op not in LIST_FUNCTIONS:
        raise pass_.unhandled(node, op)
    key, template, imports, fallible = LIST_FUNCTIONS[op]
    items = pass_.value_to_code(node, 'LIST', Order.NONE)
    if not items:
        imports = imports + ('allocator',)
        items = 'std.ArrayList(f32).init(allocator)'
    require(pass_, *imports)
    name = pass_.provide_function(key, template)
    if fallible:
        return f'try {name}({items})', Order.UNARY_PREFIX
    return f'{name}({items})', Order.UNARY_POSTFIX


def math_modulo(pass_, node):
    """Remainder computation."""
    dividend = pass_.value_to_code(node, 'DIVIDEND', Order.NONE) or '0'
    divisor = pass_.value_to_code(node, 'DIVISOR', Order.NONE) or '0'
    return f'@mod({dividend}, {divisor})', Order.UNARY_POSTFIX


def math_constrain(pass_, node):
    """Constrain a number between two limits."""
    value = pass_.value_to_code(node, 'VALUE', Order.NONE) or '0'
    low = pass_.value_to_code(node, 'LOW', Order.NONE) or '0'
    high = pass_.value_to_code(node, 'HIGH', Order.NONE)
    if not high:
        require(pass_, 'math')
        high = 'math.inf(f32)'
    return f'@min(@max({value}, {low}), {high})', Order.UNARY_POSTFIX


def math_random_int(pass_, node):
    """Random integer between [X] and [Y]."""
    low = pass_.value_to_code(node, 'FROM', Order.NONE) or '0'
    high = pass_.value_to_code(node, 'TO', Order.NONE) or '0'
    name = pass_.provide_function('math_random_int', RANDOM_INT)
    return f'{name}({low}, {high})', Order.UNARY_POSTFIX


def math_random_float(pass_, node):
    """Random fraction between 0 and 1."""
    return f'{RANDOM}.float(f32)', Order.UNARY_POSTFIX


def math_atan2(pass_, node):
    """Arctangent of point (X, Y) in degrees from -180 to 180."""
    require(pass_, 'math')
    x = pass_.value_to_code(node, 'X', Order.NONE) or '0'
    y = pass_.value_to_code(node, 'Y', Order.NONE) or '0'
    return f'math.atan2({y}, {x}) / math.pi * 180', Order.MULTIPLICATIVE


def register(registry):
    registry.register('math_number', math_number, category='math')
    registry.register('math_arithmetic', math_arithmetic, category='math')
    registry.register('math_single', math_single, category='math')
    # Rounding and trigonometry share the single operand emitter.
    registry.alias('math_round', 'math_single')
    registry.alias('math_trig', 'math_single')
    registry.register('math_constant', math_constant, category='math')
    registry.register('math_number_property', math_number_property, category='math')
    registry.register('math_change', math_change, category='math')
    registry.register('math_on_list', math_on_list, category='math')
    registry.register('math_modulo', math_modulo, category='math')
    registry.register('math_constrain', math_constrain, category='math')
    registry.register('math_random_int', math_random_int, category='math')
    registry.register('math_random_float', math_random_float, category='math')
    registry.register('math_atan2', math_atan2, category='math')
