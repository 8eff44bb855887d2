"""
Zig emitters for the sensor and messaging blocks.

These target a NuttX board: sensors are read through ``sen``, messages are
CBOR-encoded and sent over LoRaWAN.
"""

from typing import List

from ..generator import iter_items
from ..precedence import Order
from ..quoting import prefix_lines
from .common import field_text, require

SENSOR_FIELDS = ('temperature', 'pressure', 'humidity')

DESTINATIONS = ('lorawan',)


def align_comments(lines: List[str]) -> List[str]:
    """Line up the ``//`` comments of every line except the first."""
    column = max((line.find('//') for line in lines[1:] if '//' in line), default=-1)
    if column < 0:
        return lines
    result = lines[:1]
    for line in lines[1:]:
        i = line.find('//')
        if i < 0:
            result.append(line)
        else:
            result.append(line[:i] + ' ' * (column - i) + line[i:])
    return result


def compose_msg(pass_, node):
    """Combine message fields into a CBOR message."""
    require(pass_, 'cbor')
    elements = list(iter_items(pass_, node, Order.NONE, '""'))
    code = '\n'.join([
        'try composeCbor(.{  // Compose CBOR Message',
        prefix_lines('\n'.join(elements), pass_.indent),
        '})',
    ])
    return code, Order.UNARY_PREFIX


def field(pass_, node):
    """A name/value field of a CBOR message."""
    name = pass_.generator.quote(field_text(node, 'NAME'))
    value = pass_.value_to_code(node, 'name', Order.ATOMIC) or '0'
    return f'{name}, {value},', Order.NONE


def every(pass_, node):
    """Run the nested statements every N seconds."""
    require(pass_, 'sen', 'c')
    duration = field_text(node, 'DURATION', '10')
    with pass_.enclosing_loop(node):
        statements = pass_.statement_to_code(node, 'STMTS')
    statements = pass_.add_loop_trap(statements, node)
    return ''.join([
        f'// Every {duration} seconds...\n',
        'while (true) {\n',
        statements,
        f'{pass_.indent}// Wait {duration} seconds\n',
        f'{pass_.indent}_ = c.sleep({duration});\n',
        '}\n',
    ])


def bme280(pass_, node):
    """Read a field from the BME280 sensor."""
    sensor_field = node.get_field('FIELD', 'temperature')
    if sensor_field not in SENSOR_FIELDS:
        raise pass_.unhandled(node, sensor_field)
    require(pass_, 'sen', 'c')
    path = pass_.generator.quote(field_text(node, 'PATH', '/dev/sensor/sensor_baro0'))
    # Humidity comes from the humidity sensor struct, the rest from the barometer.
    struct = 'struct_sensor_humi' if sensor_field == 'humidity' else 'struct_sensor_baro'
    code = '\n'.join(align_comments([
        'try sen.readSensor(  // Read BME280 Sensor',
        f'{pass_.indent}c.{struct},  // Sensor Data Struct',
        f'{pass_.indent}{pass_.generator.quote(sensor_field)},  // Sensor Data Field',
        f'{pass_.indent}{path}  // Path of Sensor Device',
        ')',
    ]))
    return code, Order.UNARY_PREFIX


def transmit_msg(pass_, node):
    """Transmit a CBOR message."""
    destination = node.get_field('TO', 'lorawan')
    if destination not in DESTINATIONS:
        raise pass_.unhandled(node, destination)
    require(pass_, 'lorawan')
    message = pass_.value_to_code(node, 'MSG', Order.NONE) or '""'
    return f'// Transmit message to LoRaWAN\ntry transmitLorawan({message});\n'


def register(registry):
    registry.register('compose_msg', compose_msg, category='iot')
    registry.register('field', field, category='iot')
    registry.register('every', every, category='iot')
    registry.register('bme280', bme280, category='iot')
    registry.register('transmit_msg', transmit_msg, category='iot')
