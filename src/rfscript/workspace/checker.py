"""
WorkspaceChecker: static diagnostics for a loaded set of modules.

Checks performed per module:
1. Syntax - the module must parse
2. Undefined names - every loaded name is bound somewhere in the module or is a builtin
3. Import integrity - `from M import N` against workspace modules must find N
4. Redeclaration - undecorated top-level def/class names must be unique
"""

import ast
import builtins
from typing import Dict, Iterable, Iterator, List, Optional, Set

from rfscript.logging_config import logger
from rfscript.schemas import Diagnostic
from .source import SourceFile

IMPLICIT_NAMES = {
    "__file__", "__name__", "__doc__", "__spec__", "__loader__", "__package__",
    "__path__", "__builtins__", "__annotations__", "__module__", "__qualname__",
    "__class__", "__dict__",
}
BUILTIN_NAMES = set(dir(builtins)) | IMPLICIT_NAMES

DEFAULT_SOURCE_ROOTS = ("src",)

_NESTED_SCOPES = (
    ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda,
    ast.ListComp, ast.SetComp, ast.DictComp, ast.GeneratorExp,
)


class _BindingCollector(ast.NodeVisitor):
    """Collect every name bound anywhere in a module and every name loaded."""

    def __init__(self):
        self.bound: Set[str] = set()
        self.loaded: List[ast.Name] = []
        self.star_import = False

    def visit_Name(self, node: ast.Name):
        if isinstance(node.ctx, ast.Load):
            self.loaded.append(node)
        else:
            self.bound.add(node.id)

    def _visit_def(self, node):
        self.bound.add(node.name)
        self._bind_arguments(node.args)
        self.generic_visit(node)

    visit_FunctionDef = _visit_def
    visit_AsyncFunctionDef = _visit_def

    def visit_Lambda(self, node: ast.Lambda):
        self._bind_arguments(node.args)
        self.generic_visit(node)

    def visit_ClassDef(self, node: ast.ClassDef):
        self.bound.add(node.name)
        self.generic_visit(node)

    def visit_Import(self, node: ast.Import):
        for alias in node.names:
            self.bound.add(alias.asname or alias.name.split(".")[0])

    def visit_ImportFrom(self, node: ast.ImportFrom):
        for alias in node.names:
            if alias.name == "*":
                self.star_import = True
            else:
                self.bound.add(alias.asname or alias.name)

    def visit_ExceptHandler(self, node: ast.ExceptHandler):
        if node.name:
            self.bound.add(node.name)
        self.generic_visit(node)

    def visit_Global(self, node: ast.Global):
        self.bound.update(node.names)

    visit_Nonlocal = visit_Global

    def _visit_capture(self, node):
        name = getattr(node, "name", None)
        if name:
            self.bound.add(name)
        self.generic_visit(node)

    visit_MatchAs = _visit_capture
    visit_MatchStar = _visit_capture
    # PEP 695 type parameters
    visit_TypeVar = _visit_capture
    visit_ParamSpec = _visit_capture
    visit_TypeVarTuple = _visit_capture

    def visit_MatchMapping(self, node):
        if node.rest:
            self.bound.add(node.rest)
        self.generic_visit(node)

    def _bind_arguments(self, args: ast.arguments):
        for arg in args.posonlyargs + args.args + args.kwonlyargs:
            self.bound.add(arg.arg)
        for arg in (args.vararg, args.kwarg):
            if arg is not None:
                self.bound.add(arg.arg)


def _scope_nodes(node: ast.AST) -> Iterator[ast.AST]:
    """Walk a module-level statement without entering nested scopes."""
    yield node
    if isinstance(node, _NESTED_SCOPES):
        return
    for child in ast.iter_child_nodes(node):
        yield from _scope_nodes(child)


def module_scope_names(tree: ast.Module) -> Optional[Set[str]]:
    """
    Names a module binds at module scope.

    Returns:
        Set of names, or None when the module's namespace cannot be known
        statically (star import or module-level __getattr__)
    """
    names: Set[str] = set()
    for stmt in tree.body:
        for node in _scope_nodes(stmt):
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                if node.name == "__getattr__":
                    return None
                names.add(node.name)
            elif isinstance(node, ast.Name) and not isinstance(node.ctx, ast.Load):
                names.add(node.id)
            elif isinstance(node, ast.Import):
                for alias in node.names:
                    names.add(alias.asname or alias.name.split(".")[0])
            elif isinstance(node, ast.ImportFrom):
                for alias in node.names:
                    if alias.name == "*":
                        return None
                    names.add(alias.asname or alias.name)
            elif isinstance(node, ast.ExceptHandler) and node.name:
                names.add(node.name)
    return names


def resolve_import_from(source: SourceFile, node: ast.ImportFrom) -> Optional[str]:
    """Absolute module name an ImportFrom refers to, or None if it climbs above the root."""
    if node.level == 0:
        return node.module or ""
    parts = source.module_name.split(".") if source.module_name else []
    if not source.is_package:
        parts = parts[:-1]
    climb = node.level - 1
    if climb > len(parts):
        return None
    if climb:
        parts = parts[:-climb]
    if node.module:
        parts = parts + node.module.split(".")
    return ".".join(parts)


class WorkspaceChecker:
    """
    Produce diagnostics for every module of a loaded workspace.
    """

    def __init__(self, sources: Dict[str, SourceFile], source_roots: Iterable[str] = DEFAULT_SOURCE_ROOTS):
        """
        Initialize checker over parsed sources.

        Args:
            sources: Workspace-relative path -> parsed SourceFile
            source_roots: Directories whose modules import without the directory prefix
        """
        self.sources = sources
        self.import_prefixes = [""]
        for root in source_roots:
            root = root.strip("/")
            if root:
                self.import_prefixes.append(root.replace("/", ".") + ".")
        self.modules: Dict[str, SourceFile] = {}
        for source in sources.values():
            self.modules.setdefault(source.module_name, source)
        self._scope_cache: Dict[str, Optional[Set[str]]] = {}

    def check(self) -> List[Diagnostic]:
        """Check all modules in path order."""
        diagnostics: List[Diagnostic] = []
        for path in sorted(self.sources):
            diagnostics.extend(self.check_file(self.sources[path]))
        logger.debug(f"Checked {len(self.sources)} modules, {len(diagnostics)} diagnostics")
        return diagnostics

    def check_file(self, source: SourceFile) -> List[Diagnostic]:
        if source.tree is None:
            err = source.syntax_error
            return [Diagnostic(
                path=source.path,
                line=(err.lineno or 0) if err else 0,
                col=(err.offset or 0) if err else 0,
                message=f"syntax error: {err.msg if err else 'unparseable'}",
            )]
        diagnostics = []
        diagnostics.extend(self._check_undefined(source))
        diagnostics.extend(self._check_imports(source))
        diagnostics.extend(self._check_redeclared(source))
        diagnostics.sort(key=lambda d: (d.line, d.col))
        return diagnostics

    def find_module(self, name: str) -> Optional[SourceFile]:
        """Workspace module importable as name from the root or a source root."""
        for prefix in self.import_prefixes:
            source = self.modules.get(prefix + name)
            if source is not None:
                return source
        return None

    def scope_names(self, source: SourceFile) -> Optional[Set[str]]:
        if source.path not in self._scope_cache:
            names = None
            if source.tree is not None:
                names = module_scope_names(source.tree)
            self._scope_cache[source.path] = names
        return self._scope_cache[source.path]

    def _check_undefined(self, source: SourceFile) -> List[Diagnostic]:
        collector = _BindingCollector()
        collector.visit(source.tree)
        if collector.star_import:
            return []
        diagnostics = []
        seen = set()
        for node in collector.loaded:
            name = node.id
            if name in collector.bound or name in BUILTIN_NAMES:
                continue
            key = (name, node.lineno)
            if key in seen:
                continue
            seen.add(key)
            diagnostics.append(Diagnostic(
                path=source.path,
                line=node.lineno,
                col=node.col_offset + 1,
                message=f"undefined: {name}",
            ))
        return diagnostics

    def _check_imports(self, source: SourceFile) -> List[Diagnostic]:
        diagnostics = []
        for node in ast.walk(source.tree):
            if not isinstance(node, ast.ImportFrom):
                continue
            module = resolve_import_from(source, node)
            if module is None:
                continue
            target = self.find_module(module) if module else None
            if target is None:
                if node.level > 0 and module and self._package_exists(module):
                    diagnostics.append(Diagnostic(
                        path=source.path,
                        line=node.lineno,
                        col=node.col_offset + 1,
                        message=f"no module named '{module}'",
                    ))
                continue
            names = self.scope_names(target)
            if names is None:
                continue
            for alias in node.names:
                if alias.name == "*" or alias.name in names:
                    continue
                if self.find_module(f"{target.module_name}.{alias.name}") is not None:
                    continue
                diagnostics.append(Diagnostic(
                    path=source.path,
                    line=getattr(alias, "lineno", node.lineno),
                    col=getattr(alias, "col_offset", node.col_offset) + 1,
                    message=f"cannot import name '{alias.name}' from '{module}'",
                ))
        return diagnostics

    def _package_exists(self, module: str) -> bool:
        parent = module.rpartition(".")[0]
        return bool(parent) and self.find_module(parent) is not None

    def _check_redeclared(self, source: SourceFile) -> List[Diagnostic]:
        diagnostics = []
        seen: Dict[str, int] = {}
        for stmt in source.tree.body:
            if not isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                continue
            if stmt.decorator_list:
                continue
            if stmt.name in seen:
                diagnostics.append(Diagnostic(
                    path=source.path,
                    line=stmt.lineno,
                    col=stmt.col_offset + 1,
                    message=f"{stmt.name} redeclared in this module (previous declaration at line {seen[stmt.name]})",
                ))
            else:
                seen[stmt.name] = stmt.lineno

        return diagnostics
