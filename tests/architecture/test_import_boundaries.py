"""
Import-boundary enforcement.

1. Engine purity      -- ledger_engines/** may not import DB, ORM, models,
                         services or config layers.
2. Engine no-impure   -- ledger_engines/** may not call wall-clock or
                         environment functions.
3. Kernel isolation   -- ledger_kernel/** may not import engines, config or
                         services.
4. Config centralisation -- outside ledger_config, configuration is only
                         obtained through ``ledger_config`` itself.

All scanning is done via AST; these tests are read-only.
"""

import ast
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def _python_files(package: str) -> list[Path]:
    """Return all .py files under *package*, sorted for deterministic order."""
    return sorted((REPO_ROOT / package).rglob("*.py"))


def _parse(filepath: Path) -> ast.AST | None:
    try:
        return ast.parse(filepath.read_text(encoding="utf-8"), filename=str(filepath))
    except (SyntaxError, UnicodeDecodeError):
        return None


def _extract_imports(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = _parse(filepath)
    if tree is None:
        return []
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _extract_attribute_calls(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, 'receiver.attr') for two-level attribute references."""
    tree = _parse(filepath)
    if tree is None:
        return []
    return [
        (node.lineno, f"{node.value.id}.{node.attr}")
        for node in ast.walk(tree)
        if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name)
    ]


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            if _matches_any(module, forbidden):
                found.append(f"  {filepath.relative_to(REPO_ROOT)}:{lineno} imports '{module}'")
    return found


class TestEnginePurity:
    """ledger_engines/** may not import DB drivers, ORM, kernel models/db,
    services or config."""

    FORBIDDEN_PREFIXES = (
        "sqlalchemy",
        "psycopg",
        "sqlite3",
        "yaml",
        "ledger_kernel.models",
        "ledger_kernel.db",
        "ledger_kernel.selectors",
        "ledger_services",
        "ledger_config",
    )

    def test_engine_files_have_no_forbidden_imports(self):
        violations = _violations("ledger_engines", self.FORBIDDEN_PREFIXES)
        assert not violations, (
            "Engine purity violation -- ledger_engines/** must not import "
            "DB drivers, ORM, selectors, services or config:\n" + "\n".join(violations)
        )


class TestEngineNoImpureFunctions:
    """ledger_engines/** may not read the wall clock or the environment.

    time.monotonic is allowed; the tracer uses it for durations only.
    """

    FORBIDDEN_CALLS = frozenset({
        "datetime.now",
        "datetime.utcnow",
        "date.today",
        "time.time",
        "os.environ",
        "os.getenv",
    })

    def test_no_impure_calls_in_engines(self):
        violations = [
            f"  {filepath.relative_to(REPO_ROOT)}:{lineno} calls '{qualname}'"
            for filepath in _python_files("ledger_engines")
            for lineno, qualname in _extract_attribute_calls(filepath)
            if qualname in self.FORBIDDEN_CALLS
        ]
        assert not violations, (
            "Engine impurity violation -- use an explicit reference date or "
            "a Clock instead:\n" + "\n".join(violations)
        )


class TestKernelIsolation:
    FORBIDDEN_PREFIXES = ("ledger_engines", "ledger_config", "ledger_services")

    def test_kernel_imports_nothing_above_it(self):
        violations = _violations("ledger_kernel", self.FORBIDDEN_PREFIXES)
        assert not violations, (
            "Kernel boundary violation:\n" + "\n".join(violations)
        )


class TestConfigCentralization:
    """Only ledger_config itself may import its loader."""

    def test_loader_not_imported_outside_config(self):
        violations = []
        for package in ("ledger_kernel", "ledger_engines", "ledger_services"):
            violations.extend(_violations(package, ("ledger_config.loader",)))
        assert not violations, (
            "Use ledger_config.get_active_config() instead of the loader:\n"
            + "\n".join(violations)
        )
