"""
Core data models for the code generator.

This module defines the node graph handed over by the visual editor: blocks
(nodes) with fields, value inputs, statement inputs and a ``next`` link, and
the workspace holding the top-level chains.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
import uuid

from .exceptions import GraphValidationError


@dataclass
class Node:
    """A block in the visual program graph."""
    kind: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    fields: Dict[str, Any] = field(default_factory=dict)
    inputs: Dict[str, 'Node'] = field(default_factory=dict)  # Value inputs
    statements: Dict[str, 'Node'] = field(default_factory=dict)  # Statement inputs
    next: Optional['Node'] = None
    mutation: Dict[str, Any] = field(default_factory=dict)  # Editor shape data
    comment: Optional[str] = None
    disabled: bool = False

    def get_field(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get_input(self, name: str) -> Optional['Node']:
        """Get the node connected to a value input."""
        return self.inputs.get(name)

    def get_statement(self, name: str) -> Optional['Node']:
        """Get the first node of the chain in a statement input."""
        return self.statements.get(name)

    def has_input(self, name: str) -> bool:
        return name in self.inputs or name in self.statements

    @property
    def item_count(self) -> int:
        """Number of variadic inputs (``ADD0`` ... ``ADDn``)."""
        if 'items' in self.mutation:
            return int(self.mutation['items'])
        count = 0
        while f'ADD{count}' in self.inputs:
            count += 1
        return count

    def get_vars(self) -> List[str]:
        """Parameter names of a procedure definition or call."""
        return list(self.mutation.get('params', []))

    def children(self) -> Iterator['Node']:
        """Nodes connected to inputs, then statement chains, then ``next``."""
        yield from self.inputs.values()
        yield from self.statements.values()
        if self.next is not None:
            yield self.next

    def descendants(self) -> Iterator['Node']:
        """This node and everything reachable from it, depth-first."""
        stack = [self]
        seen = set()
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            stack.extend(reversed(list(node.children())))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'kind': self.kind, 'id': self.id}
        if self.fields:
            data['fields'] = dict(self.fields)
        if self.inputs:
            data['inputs'] = {name: child.to_dict() for name, child in self.inputs.items()}
        if self.statements:
            data['statements'] = {name: child.to_dict() for name, child in self.statements.items()}
        if self.next is not None:
            data['next'] = self.next.to_dict()
        if self.mutation:
            data['mutation'] = dict(self.mutation)
        if self.comment:
            data['comment'] = self.comment
        if self.disabled:
            data['disabled'] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'node') -> 'Node':
        """Build a node tree from its JSON-shaped representation."""
        if not isinstance(data, dict):
            raise GraphValidationError("expected an object", path)
        kind = data.get('kind', data.get('type'))
        if not isinstance(kind, str) or not kind:
            raise GraphValidationError("missing 'kind'", path)

        node = cls(kind=kind)
        if data.get('id') is not None:
            node.id = str(data['id'])
        node.fields = dict(_mapping(data, 'fields', path))
        node.mutation = dict(_mapping(data, 'mutation', path))
        node.comment = data.get('comment')
        node.disabled = bool(data.get('disabled', False))
        node.inputs = {
            name: cls.from_dict(child, f'{path}.inputs.{name}')
            for name, child in _mapping(data, 'inputs', path).items()
            if child is not None
        }
        node.statements = {
            name: cls.from_dict(child, f'{path}.statements.{name}')
            for name, child in _mapping(data, 'statements', path).items()
            if child is not None
        }
        if data.get('next') is not None:
            node.next = cls.from_dict(data['next'], f'{path}.next')
        return node


def _mapping(data: Dict[str, Any], key: str, path: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise GraphValidationError(f"'{key}' must be an object", path)
    return value


@dataclass
class Workspace:
    """Top-level node chains plus the variables declared in the editor."""
    top_nodes: List[Node] = field(default_factory=list)
    variables: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_node(self, node: Node) -> str:
        """Add a top-level chain and return its first node's ID."""
        self.top_nodes.append(node)
        return node.id

    def all_nodes(self) -> Iterator[Node]:
        for top in self.top_nodes:
            yield from top.descendants()

    def find_node(self, node_id: str) -> Optional[Node]:
        for node in self.all_nodes():
            if node.id == node_id:
                return node
        return None

    def all_variables(self) -> List[str]:
        """Declared variables plus any referenced by a ``VAR`` field, in order."""
        names: List[str] = []
        seen = set()

        def add(name: Any) -> None:
            if isinstance(name, str) and name and name.lower() not in seen:
                seen.add(name.lower())
                names.append(name)

        for name in self.variables:
            add(name)
        for node in self.all_nodes():
            add(node.fields.get('VAR'))
            if node.kind.startswith('procedures_def'):
                for param in node.get_vars():
                    add(param)
        return names

    def validate_model(self) -> List[GraphValidationError]:
        """Validate the graph and return any errors."""
        errors = []
        seen_ids = set()
        for node in self.all_nodes():
            if node.id in seen_ids:
                errors.append(GraphValidationError(f"Duplicate node id: {node.id}"))
            seen_ids.add(node.id)
        if self._has_cycles():
            errors.append(GraphValidationError("Graph contains a cycle"))
        return errors

    def _has_cycles(self) -> bool:
        """Check if any node can reach itself using DFS."""
        visited = set()
        rec_stack = set()

        def dfs(node: Node) -> bool:
            key = id(node)
            if key in rec_stack:
                return True
            if key in visited:
                return False
            visited.add(key)
            rec_stack.add(key)
            for child in node.children():
                if dfs(child):
                    return True
            rec_stack.remove(key)
            return False

        return any(dfs(top) for top in self.top_nodes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'variables': list(self.variables),
            'blocks': [node.to_dict() for node in self.top_nodes],
        }
        if self.metadata:
            data['metadata'] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Workspace':
        if not isinstance(data, dict):
            raise GraphValidationError("workspace must be an object")
        blocks = data.get('blocks', [])
        if not isinstance(blocks, list):
            raise GraphValidationError("'blocks' must be a list", 'workspace')
        variables = data.get('variables', [])
        if not isinstance(variables, list):
            raise GraphValidationError("'variables' must be a list", 'workspace')
        return cls(
            top_nodes=[Node.from_dict(block, f'blocks[{i}]') for i, block in enumerate(blocks)],
            variables=[str(name) for name in variables],
            metadata=dict(data.get('metadata') or {}),
        )
