"""
Zig emitters for colour blocks. Colours are ``"#rrggbb"`` strings.
"""

from ..precedence import Order
from .common import field_text, require

RANDOM_COLOUR = '''
fn {FUNCTION_NAME}() ![]u8 {
  const rgb = std.crypto.random.int(u24);
  return std.fmt.allocPrint(allocator, "#{x:0>6}", .{ rgb });
}
'''

RGB = '''
fn {FUNCTION_NAME}(r: f32, g: f32, b: f32) ![]u8 {
  const rn: u8 = @intFromFloat(@round(@max(@min(r, 100), 0) * 2.55));
  const gn: u8 = @intFromFloat(@round(@max(@min(g, 100), 0) * 2.55));
  const bn: u8 = @intFromFloat(@round(@max(@min(b, 100), 0) * 2.55));
  return std.fmt.allocPrint(allocator, "#{x:0>2}{x:0>2}{x:0>2}", .{ rn, gn, bn });
}
'''

BLEND = '''
fn {FUNCTION_NAME}(c1: []const u8, c2: []const u8, ratio: f32) ![]u8 {
  const r = @max(@min(ratio, 1), 0);
  var mixed: [3]u8 = undefined;
  for (&mixed, 0..) |*channel, i| {
    const x1: f32 = @floatFromInt(try std.fmt.parseInt(u8, c1[1 + i * 2 .. 3 + i * 2], 16));
    const x2: f32 = @floatFromInt(try std.fmt.parseInt(u8, c2[1 + i * 2 .. 3 + i * 2], 16));
    channel.* = @intFromFloat(@round(x1 * (1 - r) + x2 * r));
  }
  return std.fmt.allocPrint(allocator, "#{x:0>2}{x:0>2}{x:0>2}", .{ mixed[0], mixed[1], mixed[2] });
}
'''


def colour_picker(pass_, node):
    return pass_.generator.quote(field_text(node, 'COLOUR', '#000000')), Order.ATOMIC


def colour_random(pass_, node):
    """Generate a random colour."""
    require(pass_, 'allocator')
    name = pass_.provide_function('colour_random', RANDOM_COLOUR)
    return f'try {name}()', Order.UNARY_PREFIX


def colour_rgb(pass_, node):
    """Compose a colour from RGB components expressed as percentages."""
    red = pass_.value_to_code(node, 'RED', Order.NONE) or '0'
    green = pass_.value_to_code(node, 'GREEN', Order.NONE) or '0'
    blue = pass_.value_to_code(node, 'BLUE', Order.NONE) or '0'
    require(pass_, 'allocator')
    name = pass_.provide_function('colour_rgb', RGB)
    return f'try {name}({red}, {green}, {blue})', Order.UNARY_PREFIX


def colour_blend(pass_, node):
    """Blend two colours together."""
    c1 = pass_.value_to_code(node, 'COLOUR1', Order.NONE) or '"#000000"'
    c2 = pass_.value_to_code(node, 'COLOUR2', Order.NONE) or '"#000000"'
    ratio = pass_.value_to_code(node, 'RATIO', Order.NONE) or '0.5'
    require(pass_, 'allocator')
    name = pass_.provide_function('colour_blend', BLEND)
    return f'try {name}({c1}, {c2}, {ratio})', Order.UNARY_PREFIX


def register(registry):
    registry.register('colour_picker', colour_picker, category='colour')
    registry.register('colour_random', colour_random, category='colour')
    registry.register('colour_rgb', colour_rgb, category='colour')
    registry.register('colour_blend', colour_blend, category='colour')
