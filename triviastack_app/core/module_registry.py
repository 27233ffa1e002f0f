"""Declarative blueprint registration for the feature modules.

A feature module may expose more than one blueprint (the disputes module has
a player-facing and an admin-facing one); each is mounted under its own prefix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """A feature module and the (blueprint attribute, url prefix) pairs it mounts."""

    import_path: str
    mounts: Tuple[Tuple[str, str], ...]

    def blueprints(self):
        module = import_string(self.import_path)
        for attribute, url_prefix in self.mounts:
            blueprint = getattr(module, attribute, None)
            if not isinstance(blueprint, Blueprint):
                raise TypeError(f"{self.import_path}.{attribute} is not a Flask Blueprint")
            yield blueprint, url_prefix


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> None:
    for module in modules:
        for blueprint, url_prefix in module.blueprints():
            app.register_blueprint(blueprint, url_prefix=url_prefix)
            app.logger.debug(f"Mounted {blueprint.name} at {url_prefix}")


DEFAULT_MODULES: Tuple[ModuleDefinition, ...] = (
    ModuleDefinition("triviastack_app.modules.grading", (("grading_api_bp", "/api"),)),
    ModuleDefinition("triviastack_app.modules.disputes", (
        ("disputes_api_bp", "/api"),
        ("disputes_admin_api_bp", "/api/admin"),
    )),
    ModuleDefinition("triviastack_app.modules.stats", (("stats_api_bp", "/api/stats"),)),
)


def register_default_modules(app: Flask) -> None:
    register_modules(app, DEFAULT_MODULES)
