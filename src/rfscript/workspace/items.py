"""
ItemArena: the declaration tree of a loaded snapshot.

Items live in a flat list and point at their owning declaration by
index (`outer`), so the tree has a single direction of ownership.
"""

import ast
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .source import SourceFile, decl_first_line


@dataclass
class Item:
    """A named declaration: class, function/method or module-level variable."""
    id: int
    name: str
    kind: str  # "class", "function" or "variable"
    path: str
    qualname: str
    outer: Optional[int]  # Arena id of the owning declaration, None at module scope
    start_line: int  # Decorators included
    end_line: int
    col: int  # Indentation column of the statement
    node: ast.AST = field(repr=False, compare=False)

    @property
    def is_top_level(self) -> bool:
        return self.outer is None


class ItemArena:
    """
    Flat storage for Items with lookup by (path, qualname).
    """

    def __init__(self):
        self._items: List[Item] = []
        self._index: Dict[Tuple[str, str], int] = {}

    def add(self, name: str, kind: str, path: str, node: ast.AST, outer: Optional[Item] = None) -> Item:
        """Append a declaration owned by outer (or by the module when None)."""
        qualname = f"{outer.qualname}.{name}" if outer else name
        item = Item(
            id=len(self._items),
            name=name,
            kind=kind,
            path=path,
            qualname=qualname,
            outer=outer.id if outer else None,
            start_line=decl_first_line(node),
            end_line=node.end_lineno or node.lineno,
            col=node.col_offset,
            node=node,
        )
        self._items.append(item)
        # First definition wins for lookups; redefinitions stay reachable by iteration.
        self._index.setdefault((path, qualname), item.id)
        return item

    def get(self, item_id: int) -> Item:
        return self._items[item_id]

    def outer(self, item: Item) -> Optional[Item]:
        if item.outer is None:
            return None
        return self._items[item.outer]

    def top_item(self, item: Optional[Item]) -> Optional[Item]:
        """Walk owner links up to the enclosing top-level declaration."""
        while item is not None and item.outer is not None:
            item = self._items[item.outer]
        return item

    def find(self, path: str, qualname: str) -> Optional[Item]:
        item_id = self._index.get((path, qualname))
        return None if item_id is None else self._items[item_id]

    def find_all(self, qualname: str) -> List[Item]:
        """Every item with this qualname, across all files."""
        return [self._items[i] for (p, q), i in self._index.items() if q == qualname]

    def in_file(self, path: str) -> List[Item]:
        return [item for item in self._items if item.path == path]

    def top_level(self, path: str) -> List[Item]:
        return [item for item in self._items if item.path == path and item.outer is None]

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


def collect_items(arena: ItemArena, source: SourceFile) -> None:
    """Add every declaration of a parsed module to the arena."""
    if source.tree is None:
        return
    _collect(arena, source.path, source.tree.body, None)


def _collect(arena: ItemArena, path: str, body: List[ast.stmt], outer: Optional[Item]) -> None:
    for stmt in body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            kind = "class" if isinstance(stmt, ast.ClassDef) else "function"
            item = arena.add(stmt.name, kind, path, stmt, outer)
            _collect(arena, path, stmt.body, item)
        elif outer is None and isinstance(stmt, (ast.Assign, ast.AnnAssign)):
            targets = stmt.targets if isinstance(stmt, ast.Assign) else [stmt.target]
            for target in targets:
                if isinstance(target, ast.Name):
                    arena.add(target.id, "variable", path, stmt, None)
