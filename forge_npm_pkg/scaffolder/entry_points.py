"""package.json entry points: ``main``, ``module``, ``types``, ``exports``, ``files``.

The shape of the entry-point block depends only on the language and the
module format.  Every one of the six combinations is spelled out in
:data:`ENTRY_POINT_TABLE`; the builder is a plain lookup with no default, so
an unhandled combination cannot slip through as a half-filled manifest.

Extension rules for TypeScript builds:

* ``"type"`` is ``"module"`` for esm and dual, ``"commonjs"`` for commonjs.
* Dual packages ship CommonJS as ``dist/index.js`` and ESM as
  ``dist/index.mjs``.  Under ``"type": "module"`` a ``.js`` file would be
  parsed as ESM, so only the explicit ``.mjs`` extension distinguishes the
  ESM artifact; the two must never be swapped.

JavaScript packages have no build step and point straight at ``src``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from forge_npm_pkg.config import Language, ModuleType, ProjectConfiguration

DIST_JS = "./dist/index.js"
DIST_MJS = "./dist/index.mjs"
DIST_DTS = "./dist/index.d.ts"
SRC_JS = "./src/index.js"


class EntryPoints(BaseModel):
    """Entry-point fields of a package manifest."""

    model_config = ConfigDict(frozen=True)

    main: str
    module: str | None = None
    types: str | None = None
    exports: dict[str, Any]
    files: list[str] = Field(default_factory=list)

    def as_manifest_fields(self) -> dict[str, Any]:
        """Ordered manifest fragment; absent fields are omitted, not ``null``."""
        fields: dict[str, Any] = {"main": self.main}
        if self.module is not None:
            fields["module"] = self.module
        if self.types is not None:
            fields["types"] = self.types
        fields["exports"] = _copy_exports(self.exports)
        fields["files"] = list(self.files)
        return fields


def _copy_exports(exports: dict[str, Any]) -> dict[str, Any]:
    return {k: dict(v) if isinstance(v, dict) else v for k, v in exports.items()}


_JS_NO_BUILD_ESM = EntryPoints(
    main=SRC_JS,
    module=SRC_JS,
    exports={".": SRC_JS},
    files=["src"],
)

_JS_NO_BUILD_CJS = EntryPoints(
    main=SRC_JS,
    exports={".": SRC_JS},
    files=["src"],
)

_TS_ESM = EntryPoints(
    main=DIST_JS,
    types=DIST_DTS,
    exports={".": {"types": DIST_DTS, "import": DIST_JS}},
    files=["dist"],
)

_TS_CJS = EntryPoints(
    main=DIST_JS,
    types=DIST_DTS,
    exports={".": {"types": DIST_DTS, "require": DIST_JS}},
    files=["dist"],
)

_TS_DUAL = EntryPoints(
    main=DIST_JS,
    module=DIST_MJS,
    types=DIST_DTS,
    exports={".": {"types": DIST_DTS, "import": DIST_MJS, "require": DIST_JS}},
    files=["dist"],
)

ENTRY_POINT_TABLE: MappingProxyType[tuple[Language, ModuleType], EntryPoints] = (
    MappingProxyType(
        {
            (Language.JAVASCRIPT, ModuleType.ESM): _JS_NO_BUILD_ESM,
            (Language.JAVASCRIPT, ModuleType.COMMONJS): _JS_NO_BUILD_CJS,
            (Language.JAVASCRIPT, ModuleType.DUAL): _JS_NO_BUILD_ESM,
            (Language.TYPESCRIPT, ModuleType.ESM): _TS_ESM,
            (Language.TYPESCRIPT, ModuleType.COMMONJS): _TS_CJS,
            (Language.TYPESCRIPT, ModuleType.DUAL): _TS_DUAL,
        }
    )
)


def build_entry_points(config: ProjectConfiguration) -> EntryPoints:
    """Return the entry points for *config*'s language and module format."""
    return ENTRY_POINT_TABLE[(config.language, config.module_type)]


def package_type(config: ProjectConfiguration) -> str:
    """Value of the manifest ``"type"`` field."""
    return "commonjs" if config.module_type is ModuleType.COMMONJS else "module"


def tsup_formats(config: ProjectConfiguration) -> list[str]:
    """tsup output formats matching the entry-point table."""
    if config.module_type is ModuleType.ESM:
        return ["esm"]
    if config.module_type is ModuleType.COMMONJS:
        return ["cjs"]
    return ["cjs", "esm"]
