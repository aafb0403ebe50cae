"""Tests for tooling configs and starter sources (forge_npm_pkg.scaffolder.configs)."""

from __future__ import annotations

import pytest

from forge_npm_pkg.scaffolder.configs import (
    DEFAULT_README_DESCRIPTION,
    ConfigFileBuilder,
    generate_prettier_config,
    generate_tsconfig,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def builder() -> ConfigFileBuilder:
    return ConfigFileBuilder()


# ---------------------------------------------------------------------------
# JSON configs
# ---------------------------------------------------------------------------


class TestTsconfig:
    @pytest.mark.parametrize("module_type", ["esm", "dual"])
    def test_bundler_resolution(self, make_config, module_type):
        options = generate_tsconfig(make_config(module_type=module_type))["compilerOptions"]
        assert options["module"] == "ESNext"
        assert options["moduleResolution"] == "bundler"

    def test_commonjs(self, make_config):
        options = generate_tsconfig(make_config(module_type="commonjs"))["compilerOptions"]
        assert options["module"] == "CommonJS"
        assert options["moduleResolution"] == "node"

    def test_common_options(self, make_config):
        tsconfig = generate_tsconfig(make_config())
        assert tsconfig["compilerOptions"]["strict"] is True
        assert tsconfig["compilerOptions"]["outDir"] == "./dist"
        assert "**/*.test.ts" in tsconfig["exclude"]

    def test_prettier(self):
        assert generate_prettier_config()["singleQuote"] is True


# ---------------------------------------------------------------------------
# Build and lint
# ---------------------------------------------------------------------------


class TestTsup:
    def test_esm_only(self, builder, make_config):
        content = builder.tsup_config(make_config(module_type="esm"))
        assert "format: ['esm']," in content
        assert "outExtension" not in content

    def test_dual_emits_mjs(self, builder, make_config):
        content = builder.tsup_config(make_config(module_type="dual"))
        assert "format: ['cjs', 'esm']," in content
        assert "format === 'esm' ? '.mjs' : '.js'" in content
        assert "attw --pack" in content


class TestEslint:
    def test_filename(self, builder, make_config):
        assert builder.eslint_config_filename(make_config()) == "eslint.config.js"
        assert builder.eslint_config_filename(
            make_config(language="javascript", module_type="commonjs")
        ) == "eslint.config.mjs"

    def test_typescript(self, builder, make_config):
        content = builder.eslint_config(make_config())
        assert "import tsparser from '@typescript-eslint/parser';" in content
        assert "files: ['**/*.ts']," in content
        assert content.rstrip().endswith("];")

    def test_javascript_commonjs_source(self, builder, make_config):
        content = builder.eslint_config(make_config(language="javascript", module_type="commonjs"))
        assert "@typescript-eslint" not in content
        assert "sourceType: 'commonjs'," in content

    def test_javascript_esm_source(self, builder, make_config):
        content = builder.eslint_config(make_config(language="javascript"))
        assert "sourceType: 'module'," in content


# ---------------------------------------------------------------------------
# Test runners
# ---------------------------------------------------------------------------


class TestTestConfig:
    def test_vitest(self, builder, make_config):
        config = make_config(test_runner="vitest")
        assert builder.test_config_filename(config) == "vitest.config.ts"
        assert "provider: 'v8'" in builder.test_config(config)

    def test_no_runner(self, builder, make_config):
        config = make_config(test_runner="none")
        assert builder.test_config_filename(config) is None
        assert builder.test_config(config) is None

    def test_jest_typescript_esm(self, builder, make_config):
        config = make_config(test_runner="jest", module_type="esm")
        content = builder.test_config(config)
        assert builder.test_config_filename(config) == "jest.config.ts"
        assert "preset: 'ts-jest/presets/default-esm'," in content
        assert "extensionsToTreatAsEsm" in content

    def test_jest_typescript_commonjs(self, builder, make_config):
        content = builder.test_config(make_config(test_runner="jest", module_type="commonjs"))
        assert "preset: 'ts-jest'," in content
        assert "extensionsToTreatAsEsm" not in content

    def test_jest_javascript_commonjs(self, builder, make_config):
        config = make_config(language="javascript", test_runner="jest", module_type="commonjs")
        content = builder.test_config(config)
        assert builder.test_config_filename(config) == "jest.config.js"
        assert content.startswith("module.exports = {")

    def test_jest_javascript_esm(self, builder, make_config):
        content = builder.test_config(make_config(language="javascript", test_runner="jest"))
        assert content.startswith("export default {")
        assert "transform: {}," in content


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class TestSources:
    def test_typescript_index(self, builder, make_config):
        content = builder.index_source(make_config())
        assert "export function greet(name: string): string {" in content
        assert content.startswith("/**")

    def test_javascript_commonjs_index(self, builder, make_config):
        content = builder.index_source(make_config(language="javascript", module_type="commonjs"))
        assert "export " not in content
        assert content.rstrip().endswith("module.exports = { greet, add };")

    def test_javascript_esm_index(self, builder, make_config):
        content = builder.index_source(make_config(language="javascript"))
        assert "export function add(a, b) {" in content
        assert "module.exports" not in content

    def test_no_test_without_runner(self, builder, make_config):
        assert builder.index_test(make_config(test_runner="none")) is None

    def test_vitest_import(self, builder, make_config):
        content = builder.index_test(make_config())
        assert "import { describe, it, expect } from 'vitest';" in content
        assert "import { greet, add } from './index.js';" in content

    def test_jest_commonjs_require(self, builder, make_config):
        content = builder.index_test(
            make_config(language="javascript", module_type="commonjs", test_runner="jest")
        )
        assert "require('@jest/globals')" in content
        assert "require('./index.js')" in content

    def test_vitest_commonjs_create_require(self, builder, make_config):
        content = builder.index_test(make_config(language="javascript", module_type="commonjs"))
        assert "createRequire(import.meta.url)" in content

    def test_ts_jest_commonjs_extensionless(self, builder, make_config):
        content = builder.index_test(make_config(test_runner="jest", module_type="commonjs"))
        assert "from './index';" in content


# ---------------------------------------------------------------------------
# README and dotfiles
# ---------------------------------------------------------------------------


class TestReadme:
    def test_default_description(self, builder, make_config):
        content = builder.readme(make_config())
        assert content.startswith("# my-lib\n")
        assert DEFAULT_README_DESCRIPTION in content
        assert "badge" not in content

    def test_badges(self, builder, make_config):
        config = make_config(
            package_name="@acme/widgets", github_username="acme", use_codecov=True
        )
        content = builder.readme(config)
        assert "https://github.com/acme/widgets/actions/workflows/ci.yml/badge.svg" in content
        assert "codecov.io/gh/acme/widgets" in content

    def test_commonjs_usage(self, builder, make_config):
        content = builder.readme(make_config(language="javascript", module_type="commonjs"))
        assert "const { greet } = require('my-lib');" in content
        assert "npm run build" not in content


class TestDotfiles:
    def test_gitignore(self, builder):
        content = builder.gitignore()
        assert "node_modules" in content
        assert "dist" in content

    def test_editorconfig(self, builder):
        assert "root = true" in builder.editorconfig()

    def test_prettierignore(self, builder):
        assert "dist" in builder.prettierignore()
