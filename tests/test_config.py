"""Tests for configuration models (forge_npm_pkg.config).

Covers:
- ProjectConfiguration defaults, enum coercion and name validation
- Derived properties (repo_name, source_ext, has_tests)
- Immutability
- ForgeSettings defaults and environment overrides
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from forge_npm_pkg.config import (
    ForgeSettings,
    Language,
    ModuleType,
    ProjectConfiguration,
    TestRunner,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# ProjectConfiguration
# ---------------------------------------------------------------------------


class TestProjectConfiguration:
    def test_defaults(self):
        config = ProjectConfiguration(package_name="my-lib")
        assert config.language is Language.TYPESCRIPT
        assert config.module_type is ModuleType.ESM
        assert config.test_runner is TestRunner.VITEST
        assert config.use_linting is True
        assert config.use_changesets is False
        assert config.init_git is True
        assert config.setup_ci is True
        assert config.setup_cd is False
        assert config.use_codecov is False
        assert config.use_dependabot is False
        assert config.description is None

    def test_string_values_coerced_to_enums(self):
        config = ProjectConfiguration(
            package_name="my-lib", language="javascript", module_type="dual", test_runner="jest"
        )
        assert config.language is Language.JAVASCRIPT
        assert config.module_type is ModuleType.DUAL
        assert config.test_runner is TestRunner.JEST

    @pytest.mark.parametrize("name", ["my-lib", "my_lib2", "@scope/my-lib", "a"])
    def test_valid_names(self, name: str):
        assert ProjectConfiguration(package_name=name).package_name == name

    @pytest.mark.parametrize("name", ["", "My-Lib", "my lib", "my.lib", "lib!"])
    def test_invalid_names(self, name: str):
        with pytest.raises(ValidationError):
            ProjectConfiguration(package_name=name)

    @pytest.mark.parametrize("name", ["foo/", "@scope/", "/"])
    def test_empty_final_segment_rejected(self, name: str):
        with pytest.raises(ValidationError, match="must not end with '/'"):
            ProjectConfiguration(package_name=name)

    def test_invalid_enum(self):
        with pytest.raises(ValidationError):
            ProjectConfiguration(package_name="my-lib", module_type="umd")

    def test_frozen(self):
        config = ProjectConfiguration(package_name="my-lib")
        with pytest.raises(ValidationError):
            config.use_linting = False

    def test_repo_name_drops_scope(self):
        assert ProjectConfiguration(package_name="@acme/widgets").repo_name == "widgets"
        assert ProjectConfiguration(package_name="widgets").repo_name == "widgets"

    def test_source_ext(self):
        assert ProjectConfiguration(package_name="a").source_ext == "ts"
        assert ProjectConfiguration(package_name="a", language="javascript").source_ext == "js"

    def test_has_tests(self):
        assert ProjectConfiguration(package_name="a").has_tests
        assert not ProjectConfiguration(package_name="a", test_runner="none").has_tests


# ---------------------------------------------------------------------------
# ForgeSettings
# ---------------------------------------------------------------------------


class TestForgeSettings:
    def test_defaults(self):
        settings = ForgeSettings()
        assert settings.registry_url == "https://registry.npmjs.org"
        assert settings.github_api_url == "https://api.github.com"
        assert settings.node_dist_url == "https://nodejs.org/dist/index.json"
        assert settings.fetch_timeout == 5.0
        assert settings.github_token is None

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ForgeSettings(fetch_timeout=0)

    def test_token_hidden_from_repr(self):
        assert "secret-token" not in repr(ForgeSettings(github_token="secret-token"))

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FORGE_REGISTRY_URL", "https://npm.internal.test/")
        monkeypatch.setenv("FORGE_GITHUB_API_URL", "https://ghe.internal.test/api/v3/")
        monkeypatch.setenv("FORGE_NODE_DIST_URL", "https://mirror.test/index.json")
        monkeypatch.setenv("FORGE_FETCH_TIMEOUT", "2.5")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_abc")

        settings = ForgeSettings.from_env()
        assert settings.registry_url == "https://npm.internal.test"
        assert settings.github_api_url == "https://ghe.internal.test/api/v3"
        assert settings.node_dist_url == "https://mirror.test/index.json"
        assert settings.fetch_timeout == 2.5
        assert settings.github_token == "ghp_abc"

    def test_from_env_empty(self, monkeypatch):
        for name in ("FORGE_REGISTRY_URL", "FORGE_GITHUB_API_URL", "FORGE_NODE_DIST_URL",
                     "FORGE_FETCH_TIMEOUT", "GITHUB_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        assert ForgeSettings.from_env() == ForgeSettings()
