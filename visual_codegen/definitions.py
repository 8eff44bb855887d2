"""
Definitions set and helper emission table.

The definitions set accumulates header material (imports, helper routines,
procedure bodies) during a pass; the target's ``finish`` step drains it in
insertion order. The helper table guarantees each helper is realized once.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .names import NameRegistry, NameType

logger = logging.getLogger(__name__)

FUNCTION_NAME_PLACEHOLDER = '{FUNCTION_NAME}'

TEMPLATE_INDENT = '  '


class DefinitionsSet:
    """Insertion-ordered mapping of definition key to source text."""

    def __init__(self):
        self._entries: Dict[str, str] = {}
        self._imports: List[str] = []

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def add(self, key: str, text: str, is_import: bool = False) -> None:
        """Store ``text`` under ``key``. Re-adding replaces in place."""
        self._entries[key] = text
        if is_import and key not in self._imports:
            self._imports.append(key)

    def setdefault(self, key: str, text: str, is_import: bool = False) -> bool:
        """Store ``text`` unless ``key`` is present. Returns True if stored."""
        if key in self._entries:
            return False
        self.add(key, text, is_import)
        return True

    def items(self) -> List[Tuple[str, str]]:
        return list(self._entries.items())

    def imports(self) -> List[str]:
        """Import statements, in the order they were first required."""
        return [self._entries[key] for key in self._imports]

    def definitions(self) -> List[str]:
        """Everything that is not an import, in insertion order."""
        imports = set(self._imports)
        return [text for key, text in self._entries.items() if key not in imports]


class HelperTable:
    """Realizes each shared helper routine at most once per pass."""

    def __init__(self, names: NameRegistry, definitions: DefinitionsSet,
                 indent: str = TEMPLATE_INDENT):
        self._names = names
        self._definitions = definitions
        self.indent = indent
        self._helpers: Dict[str, Tuple[str, str]] = {}

    def helper_name(self, key: str) -> Optional[str]:
        entry = self._helpers.get(key)
        return entry[0] if entry else None

    def provide_function(self, key: str, template: str) -> str:
        """
        Return the helper name for ``key``, realizing ``template`` on first use.

        ``template`` must spell the helper's own name as
        ``{FUNCTION_NAME}``. A second request for ``key`` with a different
        template gets its own helper instead of silently reusing the first.
        """
        entry = self._helpers.get(key)
        if entry is None:
            return self._realize(key, key, template)
        name, known_template = entry
        if known_template == template:
            return name
        return self._provide_variant(key, template)

    def _provide_variant(self, key: str, template: str) -> str:
        n = 2
        while True:
            variant = f'{key}_{n}'
            entry = self._helpers.get(variant)
            if entry is None:
                logger.warning(
                    "Helper %r requested with a different body; emitting %r", key, variant)
                return self._realize(variant, key, template)
            if entry[1] == template:
                return entry[0]
            n += 1

    def _realize(self, key: str, desired_name: str, template: str) -> str:
        name = self._names.get_distinct_name(desired_name, NameType.PROCEDURE)
        text = template.strip().replace(FUNCTION_NAME_PLACEHOLDER, name)
        self._helpers[key] = (name, template)
        self._definitions.add(key, self._reindent(text))
        logger.debug("Realized helper %r as %s", key, name)
        return name

    def _reindent(self, text: str) -> str:
        """Convert two-space template indentation to the pass indent unit."""
        if self.indent == TEMPLATE_INDENT:
            return text
        lines = []
        for line in text.split('\n'):
            body = line.lstrip(' ')
            depth, odd = divmod(len(line) - len(body), len(TEMPLATE_INDENT))
            lines.append(self.indent * depth + ' ' * odd + body)
        return '\n'.join(lines)

    def require_import(self, tag: str, statement: str) -> None:
        """Insert an import statement once per pass."""
        self._definitions.setdefault(tag, statement, is_import=True)
