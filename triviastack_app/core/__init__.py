"""App wiring: bootstrap steps, blueprint mounts, errors, signals and transactions."""

from .module_registry import DEFAULT_MODULES, ModuleDefinition, register_modules

__all__ = ["DEFAULT_MODULES", "ModuleDefinition", "register_modules"]
