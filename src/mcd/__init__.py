"""mcd package.

Modules:
- mcd.cli: CLI entry point package (mcd) and the root dispatcher
- mcd.cli.commands: Command registration and built-in commands
- mcd.lib.core: Command model, errors, configuration, paths, version
- mcd.lib.util: Internal helpers (logging)
"""

__all__ = ["cli", "lib"]

# Version information - single source of truth using importlib.metadata
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("mcd")
except PackageNotFoundError:
    # Fallback for development mode when package is not installed
    import tomllib
    from pathlib import Path

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        with open(pyproject_path, "rb") as f:
            __version__ = tomllib.load(f)["tool"]["poetry"]["version"]
    else:
        __version__ = "unknown"
