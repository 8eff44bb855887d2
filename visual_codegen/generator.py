"""
Code generator base class and the compilation pass.

``CodeGenerator`` holds what a target language fixes once: its emitter
registry, reserved words, order overrides, quoting and program layout.
``CompilationPass`` holds what lives for exactly one run over a workspace:
the name registry, the definitions set and the helper table. Every call to
``workspace_to_code`` gets a fresh pass, so one generator can serve many
independent graphs, including from several threads.
"""

import logging
import re
import textwrap
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union

from .config import GeneratorConfig
from .definitions import DefinitionsSet, HelperTable
from .exceptions import SynthesisError, UnhandledNodeKindError
from .models import Node, Workspace
from .names import NameRegistry, NameType
from .precedence import Order, OrderOverride, needs_parentheses
from .quoting import adjust_index, inject_id, multiline_quote, prefix_lines, quote_text
from .registry import EmitterRegistry, EmitterSpec

logger = logging.getLogger(__name__)

Emission = Union[str, Tuple[str, Order], None]

COMMENT_WRAP = 60

_LEADING_BLANK = re.compile(r'^\s+\n')
_TRAILING_BLANK = re.compile(r'\n\s+$')
_TRAILING_SPACE = re.compile(r'[ \t]+\n')


class CodeGenerator:
    """Base class for target-language generators."""

    name = 'generic'
    RESERVED_WORDS: Tuple[str, ...] = ()
    ORDER_OVERRIDES: Tuple[OrderOverride, ...] = ()
    COMMENT_PREFIX = '// '
    STRING_DELIMITER = '"'
    CONCAT_JOINER = ' + "\\n" +\n'

    def __init__(self, registry: EmitterRegistry, config: Optional[GeneratorConfig] = None):
        self.registry = registry
        self.config = config or GeneratorConfig()

    @property
    def reserved_words(self) -> List[str]:
        return list(self.RESERVED_WORDS) + sorted(self.config.reserved_words)

    def create_pass(self) -> 'CompilationPass':
        return CompilationPass(self)

    def workspace_to_code(self, workspace: Workspace) -> str:
        """Generate the complete program text for a workspace."""
        return self.create_pass().generate(workspace)

    def node_to_code(self, node: Node) -> str:
        """Generate code for one chain, without program prologue or definitions."""
        code = self.create_pass().block_to_code(node)
        if isinstance(code, tuple):
            return code[0]
        return code

    # Target hooks

    def quote(self, text: str) -> str:
        return quote_text(text, self.STRING_DELIMITER)

    def multiline_quote(self, text: str) -> str:
        return multiline_quote(text, self.STRING_DELIMITER, self.CONCAT_JOINER)

    def comment(self, text: str) -> str:
        """Render ``text`` (already newline-terminated) as a line comment."""
        return prefix_lines(text, self.COMMENT_PREFIX)

    def scrub_naked_value(self, code: str) -> str:
        """Turn a value that is not plugged into anything into a statement."""
        return code + '\n'

    def init_pass(self, pass_: 'CompilationPass', workspace: Workspace) -> None:
        pass

    def finish(self, pass_: 'CompilationPass', code: str) -> str:
        """Prepend the definitions set to the program body."""
        definitions = pass_.definitions.imports() + pass_.definitions.definitions()
        if not definitions:
            return code
        return '\n\n'.join(definitions) + '\n\n' + code


class CompilationPass:
    """
    State and algorithms for one full-graph compilation.

    Emitters receive the pass as their first argument and call back into it
    for child values (``value_to_code``), nested statements
    (``statement_to_code``), identifiers and helpers.
    """

    def __init__(self, generator: CodeGenerator):
        self.generator = generator
        self.config = generator.config
        self.indent = self.config.indent_unit
        self.names = NameRegistry(generator.reserved_words, self.config.variable_prefix)
        self.definitions = DefinitionsSet()
        self.helpers = HelperTable(self.names, self.definitions, self.indent)
        self.workspace: Optional[Workspace] = None
        self._loops: List[Node] = []

    @property
    def one_based_index(self) -> bool:
        return self.config.one_based_index

    @property
    def order_overrides(self) -> Tuple[OrderOverride, ...]:
        return self.generator.ORDER_OVERRIDES

    def generate(self, workspace: Workspace) -> str:
        """Render every top-level chain and assemble the final program text."""
        logger.debug("Starting %s pass over %d top-level chains",
                     self.generator.name, len(workspace.top_nodes))
        self.workspace = workspace
        self.generator.init_pass(self, workspace)

        chunks = []
        for top in workspace.top_nodes:
            line = self.block_to_code(top)
            if isinstance(line, tuple):
                # Value node with nothing to plug into.
                line = line[0]
                if line:
                    line = self.generator.scrub_naked_value(line)
                    spec = self.generator.registry.get(top.kind)
                    if spec is None or not spec.suppress_prefix_suffix:
                        if self.config.statement_prefix:
                            line = self.inject_id(self.config.statement_prefix, top) + line
                        if self.config.statement_suffix:
                            line = line + self.inject_id(self.config.statement_suffix, top)
            if line:
                chunks.append(line)

        code = self.generator.finish(self, '\n'.join(chunks))
        code = _LEADING_BLANK.sub('', code)
        code = _TRAILING_BLANK.sub('\n', code)
        code = _TRAILING_SPACE.sub('\n', code)
        logger.debug("Finished %s pass: %d definitions, %d characters",
                     self.generator.name, len(self.definitions), len(code))
        return code

    def block_to_code(self, node: Optional[Node], this_only: bool = False) -> Emission:
        """
        Render one node and, unless ``this_only``, the rest of its chain.

        Returns a ``(code, Order)`` tuple for value nodes and a string for
        statement chains.
        """
        return self._emit(node, this_only, nested=False)

    def _emit(self, node: Optional[Node], this_only: bool, nested: bool) -> Emission:
        if node is None:
            return ''
        if node.disabled:
            return '' if this_only else self._emit(node.next, False, nested)

        spec = self._lookup(node)
        code = spec.emit(self, node)
        if isinstance(code, tuple):
            if len(code) != 2 or not isinstance(code[1], int):
                raise SynthesisError(f"Emitter for {node.kind} returned a malformed value",
                                     kind=node.kind, node_id=node.id)
            return self.scrub(node, code[0], this_only, nested), Order(code[1])
        if isinstance(code, str):
            if not spec.suppress_prefix_suffix:
                if self.config.statement_prefix:
                    code = self.inject_id(self.config.statement_prefix, node) + code
                if self.config.statement_suffix:
                    code = code + self.inject_id(self.config.statement_suffix, node)
            return self.scrub(node, code, this_only, nested)
        if code is None:
            # All output went into the definitions set.
            return ''
        raise SynthesisError(f"Invalid code generated: {code!r}",
                             kind=node.kind, node_id=node.id)

    def _lookup(self, node: Node) -> EmitterSpec:
        spec = self.generator.registry.get(node.kind)
        if spec is None:
            raise UnhandledNodeKindError(node.kind, node.id)
        return spec

    def render_sequence(self, first: Optional[Node]) -> str:
        """Render a chain of statement nodes starting at ``first``."""
        code = self.block_to_code(first)
        if not isinstance(code, str):
            raise SynthesisError(f"Expecting code from statement node {first.kind}",
                                 kind=first.kind, node_id=first.id)
        return code

    def render_value(self, node: Optional[Node], order: Order) -> str:
        """
        Render a value node for a context binding at ``order``.

        An absent node yields ``''`` so the requesting emitter can substitute
        its own default. The result is wrapped in parentheses only when the
        child binds no tighter than ``order``.
        """
        if node is None:
            return ''
        result = self._emit(node, False, nested=True)
        if result == '':
            return ''
        if not isinstance(result, tuple):
            raise SynthesisError(f"Expecting tuple from value node {node.kind}",
                                 kind=node.kind, node_id=node.id)
        code, inner = result
        if not code:
            return ''
        if needs_parentheses(Order(order), inner, self.order_overrides):
            code = f'({code})'
        return code

    def value_to_code(self, node: Node, slot: str, order: Order) -> str:
        """Render the value input ``slot`` of ``node``."""
        return self.render_value(node.get_input(slot), order)

    def statement_to_code(self, node: Node, slot: str) -> str:
        """Render the statement input ``slot`` of ``node``, indented one level."""
        target = node.get_statement(slot)
        code = self.render_sequence(target)
        if code:
            code = prefix_lines(code, self.indent)
        return code

    def scrub(self, node: Node, code: str, this_only: bool = False,
              nested: bool = False) -> str:
        """Attach the node's comments and the code of the rest of its chain."""
        comment_code = ''
        if not nested:
            if node.comment:
                comment_code += self.generator.comment(_wrap(node.comment) + '\n')
            for child in node.inputs.values():
                comments = self.nested_comments(child)
                if comments:
                    comment_code += self.generator.comment(comments)
        next_code = '' if this_only else self._emit(node.next, False, nested=False)
        return comment_code + code + (next_code or '')

    @staticmethod
    def nested_comments(node: Node) -> str:
        comments = [_wrap(n.comment) for n in node.descendants() if n.comment]
        if comments:
            comments.append('')
        return '\n'.join(comments)

    # Cross-cutting injection

    def inject_id(self, template: str, node: Node) -> str:
        """Substitute ``%1`` in ``template`` with the node's quoted id."""
        return inject_id(template, self.generator.quote(node.id))

    def add_loop_trap(self, branch: str, node: Node) -> str:
        """Add the loop trap and statement prefix/suffix to a loop body."""
        suppress = self._lookup(node).suppress_prefix_suffix
        if self.config.infinite_loop_trap:
            branch = prefix_lines(self.inject_id(self.config.infinite_loop_trap, node),
                                  self.indent) + branch
        if self.config.statement_suffix and not suppress:
            branch = prefix_lines(self.inject_id(self.config.statement_suffix, node),
                                  self.indent) + branch
        if self.config.statement_prefix and not suppress:
            branch = branch + prefix_lines(self.inject_id(self.config.statement_prefix, node),
                                           self.indent)
        return branch

    def statement_prefix_code(self, node: Node) -> str:
        if not self.config.statement_prefix:
            return ''
        return self.inject_id(self.config.statement_prefix, node)

    def statement_suffix_code(self, node: Node, indented: bool = True) -> str:
        """Suffix text for an early exit point, indented one level by default."""
        if not self.config.statement_suffix:
            return ''
        code = self.inject_id(self.config.statement_suffix, node)
        return prefix_lines(code, self.indent) if indented else code

    # Index handling

    def get_adjusted(self, node: Node, slot: str, delta: int = 0, negate: bool = False,
                     order: Order = Order.NONE) -> str:
        """
        Render an index input, converting it to the zero-based convention.

        Under one-based indexing an extra ``-1`` is applied. An unconnected
        slot defaults to the first index of the active convention.
        """
        if self.one_based_index:
            delta -= 1
        default = '1' if self.one_based_index else '0'
        if delta > 0 or delta < 0:
            input_order = Order.ADDITIVE
        elif negate:
            input_order = Order.UNARY_PREFIX
        else:
            input_order = order
        at = self.value_to_code(node, slot, input_order) or default
        return adjust_index(at, delta, negate, order, self.order_overrides)

    # Names and definitions

    def get_variable_name(self, name: str) -> str:
        return self.names.get_name(name, NameType.VARIABLE)

    def get_procedure_name(self, name: str) -> str:
        return self.names.get_name(name, NameType.PROCEDURE)

    def get_distinct_name(self, name: str, namespace: NameType = NameType.VARIABLE) -> str:
        return self.names.get_distinct_name(name, namespace)

    def provide_function(self, key: str, template: str) -> str:
        return self.helpers.provide_function(key, template)

    def require_import(self, tag: str, statement: str) -> None:
        self.helpers.require_import(tag, statement)

    def add_definition(self, key: str, text: str) -> None:
        """Store ``text`` under ``key`` unconditionally (procedure bodies)."""
        self.definitions.add(key, text)

    # Loop tracking

    @contextmanager
    def enclosing_loop(self, node: Node) -> Iterator[Node]:
        """Mark ``node`` as the innermost loop while its body is rendered."""
        self._loops.append(node)
        try:
            yield node
        finally:
            self._loops.pop()

    @contextmanager
    def detached_scope(self) -> Iterator[None]:
        """Hide enclosing loops while a procedure body is rendered."""
        saved, self._loops = self._loops, []
        try:
            yield
        finally:
            self._loops = saved

    @property
    def current_loop(self) -> Optional[Node]:
        return self._loops[-1] if self._loops else None

    def unhandled(self, node: Node, value: Any) -> UnhandledNodeKindError:
        """Build the fault for an unrecognized field option on ``node``."""
        return UnhandledNodeKindError(node.kind, node.id, value)


def _wrap(comment: str) -> str:
    lines = []
    for paragraph in comment.split('\n'):
        lines.append(textwrap.fill(paragraph, COMMENT_WRAP - 3) if paragraph else '')
    return '\n'.join(lines)


def iter_items(pass_: CompilationPass, node: Node, order: Order,
               default: str) -> Iterable[str]:
    """Render the variadic ``ADD0`` ... ``ADDn`` inputs of ``node``."""
    for i in range(node.item_count):
        yield pass_.value_to_code(node, f'ADD{i}', order) or default
