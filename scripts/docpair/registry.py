"""Registry of type declarations discovered while parsing source files.

Declarations are keyed by (name, file). Namespaces and partial classes are
not tracked, so two files may declare the same name, but a single file may
not declare a name twice. This keying is a known limitation: a file holding
two namespaces that each declare `Foo` fails with DuplicateTypeError.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Optional

from scripts.docpair.errors import DuplicateTypeError


class TypeKind(str, Enum):
    """Kind of declaration that introduced a type name."""

    CLASS = "class"
    STRUCT = "struct"
    ENUM = "enum"
    INTERFACE = "interface"
    DELEGATE = "delegate"


@dataclass(frozen=True)
class TypeDeclaration:
    """A type declared in a source file."""

    name: str
    kind: TypeKind
    file: str  # Relative to the run root
    line: int

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.file)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TypeDeclaration":
        return cls(
            name=data["name"],
            kind=TypeKind(data["kind"]),
            file=data["file"],
            line=int(data["line"]),
        )


class TypeRegistry:
    """Append-only store of type declarations keyed by (name, file).

    Keys compare by exact string equality on both components. Iteration
    yields declarations in insertion order and can be repeated.
    """

    def __init__(self) -> None:
        self._types: dict[tuple[str, str], TypeDeclaration] = {}

    def add(self, name: str, file: str, line: int, kind: TypeKind) -> TypeDeclaration:
        """Register a declaration.

        Raises:
            DuplicateTypeError: If (name, file) is already registered.
        """
        key = (name, file)
        existing = self._types.get(key)
        if existing is not None:
            raise DuplicateTypeError(name, file, first_line=existing.line, line=line)

        declaration = TypeDeclaration(name=name, kind=TypeKind(kind), file=file, line=line)
        self._types[key] = declaration
        return declaration

    def extend(self, declarations: Iterable[TypeDeclaration]) -> None:
        """Register several declarations, failing on the first duplicate."""
        for declaration in declarations:
            self.add(declaration.name, declaration.file, declaration.line, declaration.kind)

    def get(self, name: str, file: str) -> Optional[TypeDeclaration]:
        return self._types.get((name, file))

    def declarations(self) -> Iterator[TypeDeclaration]:
        """Lazily yield every declaration in insertion order."""
        # Snapshot so adding while iterating cannot break the iterator
        yield from list(self._types.values())

    def in_file(self, file: str) -> list[TypeDeclaration]:
        """Declarations made in one file."""
        return [d for d in self._types.values() if d.file == file]

    def names(self) -> set[str]:
        return {name for name, _ in self._types}

    def __iter__(self) -> Iterator[TypeDeclaration]:
        return self.declarations()

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, key: object) -> bool:
        return key in self._types

    def to_list(self) -> list[dict[str, Any]]:
        return [d.to_dict() for d in self._types.values()]

    @classmethod
    def from_list(cls, entries: Iterable[dict[str, Any]]) -> "TypeRegistry":
        registry = cls()
        registry.extend(TypeDeclaration.from_dict(entry) for entry in entries)
        return registry

