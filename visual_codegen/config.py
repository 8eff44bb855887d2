"""
Generator configuration.

Settings come from code, from a JSON-shaped dict (CLI/HTTP callers) or from
``VISUAL_CODEGEN_*`` environment variables. The configuration is fixed for
the lifetime of a generator; every pass reads it, none writes it.
"""

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from .exceptions import ConfigurationError

DEFAULT_INDENT = '    '

# setting -> environment variable, value type
ENV_SETTINGS = {
    'indent_unit': {'env': 'VISUAL_CODEGEN_INDENT', 'type': 'text'},
    'one_based_index': {'env': 'VISUAL_CODEGEN_ONE_BASED', 'type': 'boolean'},
    'statement_prefix': {'env': 'VISUAL_CODEGEN_STATEMENT_PREFIX', 'type': 'text'},
    'statement_suffix': {'env': 'VISUAL_CODEGEN_STATEMENT_SUFFIX', 'type': 'text'},
    'infinite_loop_trap': {'env': 'VISUAL_CODEGEN_LOOP_TRAP', 'type': 'text'},
    'variable_prefix': {'env': 'VISUAL_CODEGEN_VARIABLE_PREFIX', 'type': 'text'},
}

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off')


def _to_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(f"Setting '{name}' expects a boolean, got {value!r}",
                             {'setting': name, 'value': value})


@dataclass(frozen=True)
class GeneratorConfig:
    """Pass-wide settings accepted at generator construction."""
    indent_unit: str = DEFAULT_INDENT
    reserved_words: FrozenSet[str] = field(default_factory=frozenset)
    statement_prefix: Optional[str] = None
    statement_suffix: Optional[str] = None
    one_based_index: bool = True
    infinite_loop_trap: Optional[str] = None
    variable_prefix: str = ''

    def __post_init__(self):
        if not isinstance(self.reserved_words, frozenset):
            object.__setattr__(self, 'reserved_words', _word_set(self.reserved_words))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'GeneratorConfig':
        """Build a config from a dict, rejecting unknown keys."""
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError("config must be an object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}",
                                     {'unknown': unknown})
        values = dict(data)
        if 'one_based_index' in values:
            values['one_based_index'] = _to_bool('one_based_index', values['one_based_index'])
        for name in ('indent_unit', 'variable_prefix'):
            if name in values and not isinstance(values[name], str):
                raise ConfigurationError(f"Setting '{name}' expects text",
                                         {'setting': name, 'value': values[name]})
        for name in ('statement_prefix', 'statement_suffix', 'infinite_loop_trap'):
            if values.get(name) is not None and not isinstance(values[name], str):
                raise ConfigurationError(f"Setting '{name}' expects text or null",
                                         {'setting': name, 'value': values[name]})
        if 'reserved_words' in values:
            values['reserved_words'] = _word_set(values['reserved_words'])
        return cls(**values)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'GeneratorConfig':
        """Build a config from ``VISUAL_CODEGEN_*`` environment variables."""
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name, meta in ENV_SETTINGS.items():
            raw = environ.get(meta['env'])
            if raw is None or raw == '':
                continue
            if meta['type'] == 'boolean':
                values[name] = _to_bool(name, raw)
            else:
                # Escaped tabs/newlines are allowed in env values.
                values[name] = raw.replace('\\t', '\t').replace('\\n', '\n')
        reserved = environ.get('VISUAL_CODEGEN_RESERVED_WORDS')
        if reserved:
            values['reserved_words'] = _word_set(reserved)
        return cls(**values)

    def merged(self, **overrides: Any) -> 'GeneratorConfig':
        """Copy with ``overrides`` applied. ``None`` values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if 'reserved_words' in changes:
            changes['reserved_words'] = self.reserved_words | _word_set(changes['reserved_words'])
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'indent_unit': self.indent_unit,
            'reserved_words': sorted(self.reserved_words),
            'statement_prefix': self.statement_prefix,
            'statement_suffix': self.statement_suffix,
            'one_based_index': self.one_based_index,
            'infinite_loop_trap': self.infinite_loop_trap,
            'variable_prefix': self.variable_prefix,
        }


def _word_set(words: Any) -> FrozenSet[str]:
    if isinstance(words, str):
        words = words.split(',')
    if not isinstance(words, Iterable):
        raise ConfigurationError("reserved_words must be a list or comma-separated text")
    return frozenset(str(w).strip() for w in words if str(w).strip())
