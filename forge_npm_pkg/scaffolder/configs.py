"""Tooling config files and starter sources for the generated package.

JSON documents (``tsconfig.json``, ``.prettierrc``) are built as plain dicts;
everything else is rendered from the Jinja2 templates.
"""

from __future__ import annotations

from typing import Any

from forge_npm_pkg.config import ModuleType, ProjectConfiguration, TestRunner

from .entry_points import tsup_formats
from .templates import TemplateRenderer

DEFAULT_README_DESCRIPTION = "A new npm package created with forge-npm-pkg."


# ---------------------------------------------------------------------------
# JSON configs
# ---------------------------------------------------------------------------


def generate_tsconfig(config: ProjectConfiguration) -> dict[str, Any]:
    """``tsconfig.json``; CommonJS packages use node resolution, others bundler."""
    commonjs = config.module_type is ModuleType.COMMONJS
    return {
        "compilerOptions": {
            "target": "ES2022",
            "module": "CommonJS" if commonjs else "ESNext",
            "lib": ["ES2022"],
            "moduleResolution": "node" if commonjs else "bundler",
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
            "declaration": True,
            "declarationMap": True,
            "sourceMap": True,
            "noUnusedLocals": True,
            "noUnusedParameters": True,
            "noImplicitReturns": True,
            "noFallthroughCasesInSwitch": True,
            "resolveJsonModule": True,
            "allowSyntheticDefaultImports": True,
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist", "**/*.test.ts", "**/*.spec.ts"],
    }


def generate_prettier_config() -> dict[str, Any]:
    return {
        "semi": True,
        "trailingComma": "es5",
        "singleQuote": True,
        "printWidth": 100,
        "tabWidth": 2,
        "useTabs": False,
    }


# ---------------------------------------------------------------------------
# Rendered files
# ---------------------------------------------------------------------------


def _commonjs_source(config: ProjectConfiguration) -> bool:
    # TypeScript sources are always ESM syntax; tsup handles the output format.
    return not config.is_typescript and config.module_type is ModuleType.COMMONJS


class ConfigFileBuilder:
    """Renders the non-JSON tooling files from templates."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    # -- Build / lint ------------------------------------------------------

    def tsup_config(self, config: ProjectConfiguration) -> str:
        return self.renderer.render(
            "tsup.config.ts.j2",
            {
                "formats": tsup_formats(config),
                "dual": config.module_type is ModuleType.DUAL,
            },
        )

    @staticmethod
    def eslint_config_filename(config: ProjectConfiguration) -> str:
        # The flat config uses import syntax; CommonJS packages need the .mjs extension.
        if config.module_type is ModuleType.COMMONJS:
            return "eslint.config.mjs"
        return "eslint.config.js"

    def eslint_config(self, config: ProjectConfiguration) -> str:
        """Flat ESLint config with explicit Node globals."""
        return self.renderer.render(
            "eslint.config.js.j2",
            {
                "typescript": config.is_typescript,
                "source_type": "commonjs" if _commonjs_source(config) else "module",
            },
        )

    # -- Test runners ------------------------------------------------------

    @staticmethod
    def test_config_filename(config: ProjectConfiguration) -> str | None:
        if config.test_runner is TestRunner.VITEST:
            return f"vitest.config.{config.source_ext}"
        if config.test_runner is TestRunner.JEST:
            return f"jest.config.{config.source_ext}"
        return None

    def test_config(self, config: ProjectConfiguration) -> str | None:
        if config.test_runner is TestRunner.VITEST:
            return self.renderer.render("vitest.config.j2", {})
        if config.test_runner is TestRunner.JEST:
            esm = config.module_type is ModuleType.ESM
            return self.renderer.render(
                "jest.config.j2",
                {
                    "typescript": config.is_typescript,
                    "esm": esm,
                    "preset": "ts-jest/presets/default-esm" if esm else "ts-jest",
                    "export_prefix": (
                        "module.exports = " if _commonjs_source(config) else "export default "
                    ),
                },
            )
        return None

    # -- Sources -----------------------------------------------------------

    def index_source(self, config: ProjectConfiguration) -> str:
        return self.renderer.render(
            "src/index.j2",
            {
                "typescript": config.is_typescript,
                "commonjs_source": _commonjs_source(config),
            },
        )

    def index_test(self, config: ProjectConfiguration) -> str | None:
        """Example test for ``src/index``; ``None`` when no runner is chosen."""
        if not config.has_tests:
            return None

        jest = config.test_runner is TestRunner.JEST
        if _commonjs_source(config):
            import_style = "require" if jest else "create_require"
        else:
            import_style = "import"

        # ts-jest without ESM resolves extensionless specifiers only.
        ts_jest_cjs = jest and config.is_typescript and config.module_type is not ModuleType.ESM
        return self.renderer.render(
            "src/index.test.j2",
            {
                "import_style": import_style,
                "test_globals": "@jest/globals" if jest else "vitest",
                "import_path": "./index" if ts_jest_cjs else "./index.js",
            },
        )

    # -- Docs / dotfiles ---------------------------------------------------

    def readme(self, config: ProjectConfiguration) -> str:
        return self.renderer.render(
            "README.md.j2",
            {
                "package_name": config.package_name,
                "repo_name": config.repo_name,
                "github_username": config.github_username,
                "description": config.description or DEFAULT_README_DESCRIPTION,
                "language": config.language.value,
                "typescript": config.is_typescript,
                "commonjs_source": _commonjs_source(config),
                "has_tests": config.has_tests,
                "use_linting": config.use_linting,
                "use_changesets": config.use_changesets,
                "setup_ci": config.setup_ci,
                "codecov_badge": config.use_codecov and config.has_tests,
            },
        )

    def gitignore(self) -> str:
        return self.renderer.render("gitignore.j2", {})

    def editorconfig(self) -> str:
        return self.renderer.render("editorconfig.j2", {})

    def prettierignore(self) -> str:
        return self.renderer.render("prettierignore.j2", {})
