"""
Name registry: maps logical names to safe, unique identifiers.

One registry lives for exactly one compilation pass. Identifiers are unique
across every namespace and never equal a reserved word.
"""

import logging
import re
from enum import Enum
from typing import Dict, Iterable, Optional, Set, Union
from urllib.parse import quote

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r'[^A-Za-z0-9_]')


class NameType(Enum):
    """Namespaces a logical name can live in."""
    DEVELOPER_VARIABLE = 'DEVELOPER_VARIABLE'
    VARIABLE = 'VARIABLE'
    PROCEDURE = 'PROCEDURE'


_VARIABLE_TYPES = (NameType.VARIABLE, NameType.DEVELOPER_VARIABLE)


class NameRegistry:
    """Allocates collision-free identifiers per (namespace, logical name)."""

    def __init__(self, reserved_words: Optional[Union[str, Iterable[str]]] = None,
                 variable_prefix: str = ''):
        self.variable_prefix = variable_prefix
        self._reserved: Set[str] = set()
        self._db: Dict[NameType, Dict[str, str]] = {}
        self._issued: Set[str] = set()
        if reserved_words:
            self.reserve(reserved_words)

    def reset(self) -> None:
        """Forget every issued identifier. Reserved words are kept."""
        self._db.clear()
        self._issued.clear()

    def reserve(self, words: Union[str, Iterable[str]]) -> None:
        """Add words that must never be produced as identifiers."""
        if isinstance(words, str):
            words = words.split(',')
        for word in words:
            word = word.strip()
            if word:
                self._reserved.add(word)

    def is_reserved(self, word: str) -> bool:
        return word in self._reserved

    @property
    def issued_names(self) -> Set[str]:
        return set(self._issued)

    def get_name(self, name: str, namespace: NameType) -> str:
        """
        Resolve a logical name to its identifier for this pass.

        The same name in the same namespace always yields the same identifier.
        Logical names compare case-insensitively.
        """
        normalized = (name or '').lower()
        type_db = self._db.setdefault(namespace, {})
        if normalized in type_db:
            return type_db[normalized]
        identifier = self.get_distinct_name(name, namespace)
        type_db[normalized] = identifier
        return identifier

    def get_distinct_name(self, name: str, namespace: NameType) -> str:
        """Allocate a brand-new identifier derived from ``name``."""
        prefix = self.variable_prefix if namespace in _VARIABLE_TYPES else ''
        base = self.safe_name(name)
        suffix = ''
        while self._collides(prefix, base + suffix):
            suffix = str(int(suffix) + 1) if suffix else '2'
        identifier = prefix + base + suffix
        self._issued.add(identifier)
        logger.debug("Issued %s identifier %r for %r", namespace.value, identifier, name)
        return identifier

    def _collides(self, prefix: str, candidate: str) -> bool:
        full = prefix + candidate
        return (full in self._issued or candidate in self._reserved
                or full in self._reserved)

    @staticmethod
    def safe_name(name: str) -> str:
        """Turn arbitrary text into a legal identifier."""
        if not name:
            return 'unnamed'
        safe = _NON_WORD.sub('_', quote(name.replace(' ', '_'), safe=''))
        if safe[0].isdigit():
            safe = 'my_' + safe
        return safe

    @staticmethod
    def equals(name1: str, name2: str) -> bool:
        """Logical names are case-insensitive."""
        return name1.lower() == name2.lower()
