"""Import bindings of one source file.

The symbol table is built in a single pass over the file's import
declarations and is only read afterwards. The mapper, the default
inferencer and the class orchestrator all ask it the same question: which
module was this identifier imported from, and under which exported name?
"""

from __future__ import annotations

from dataclasses import dataclass

from model_schema.syntax import (
    EntityName,
    Expression,
    Identifier,
    MemberExpression,
    QualifiedName,
    SourceFile,
    entity_name_parts,
)


@dataclass(frozen=True)
class Binding:
    """An identifier bound by an import specifier."""

    local: str
    kind: str  # "default", "namespace" or "named"
    source: str
    imported: str | None = None

    @property
    def is_module_root(self) -> bool:
        """True for ``import X from`` and ``import * as X from`` bindings."""
        return self.kind in ("default", "namespace")


class SymbolTable:
    """Maps local identifiers to the imports that declared them."""

    def __init__(self, bindings: dict[str, Binding] | None = None) -> None:
        self._bindings: dict[str, Binding] = dict(bindings or {})

    @classmethod
    def from_source(cls, source_file: SourceFile) -> SymbolTable:
        """Collect the bindings of every import declaration in a file."""
        bindings: dict[str, Binding] = {}
        for declaration in source_file.imports:
            module = declaration.source.value
            for specifier in declaration.specifiers:
                # Later imports shadow earlier ones
                bindings[specifier.local] = Binding(
                    local=specifier.local,
                    kind=specifier.kind,
                    source=module,
                    imported=specifier.imported,
                )
        return cls(bindings)

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def get(self, name: str) -> Binding | None:
        return self._bindings.get(name)

    def binding_for(self, node: Expression | EntityName) -> Binding | None:
        """Return the binding of the left-most identifier of a name or member chain."""
        root = _root_identifier(node)
        if root is None:
            return None
        return self._bindings.get(root.name)

    def resolve_source(self, node: Expression | EntityName) -> str | None:
        """Return the module an identifier was imported from, or None if unresolved."""
        binding = self.binding_for(node)
        return binding.source if binding else None


def _root_identifier(node: Expression | EntityName) -> Identifier | None:
    while True:
        if isinstance(node, Identifier):
            return node
        if isinstance(node, QualifiedName):
            node = node.left
        elif isinstance(node, MemberExpression):
            node = node.object
        else:
            return None


def name_parts(node: Expression | EntityName) -> list[str] | None:
    """Dotted parts of an identifier, qualified name or member chain.

    Returns None for anything else, e.g. ``foo().bar``.
    """
    if isinstance(node, (Identifier, QualifiedName)):
        return entity_name_parts(node)
    if isinstance(node, MemberExpression):
        parts = name_parts(node.object)
        return None if parts is None else parts + [node.property]
    return None
