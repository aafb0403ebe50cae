"""forge-npm-pkg scaffolder -- generates complete npm package directories.

This module takes a ``ProjectConfiguration`` and renders a ready-to-publish
package: manifest with correct entry points, build/lint/test tooling and
GitHub workflows pinned to freshly resolved versions.

Quick usage::

    from forge_npm_pkg.config import ProjectConfiguration
    from forge_npm_pkg.scaffolder import ProjectGenerator

    config = ProjectConfiguration(package_name="my-lib", module_type="dual")
    result = await ProjectGenerator(config).generate("/tmp/output")
"""

from forge_npm_pkg.scaffolder.entry_points import EntryPoints, build_entry_points
from forge_npm_pkg.scaffolder.generator import (
    ProjectExistsError,
    ProjectGenerator,
    ScaffoldError,
    ScaffoldResult,
)
from forge_npm_pkg.scaffolder.package_json import (
    build_dev_dependencies,
    build_scripts,
    generate_package_json,
    required_packages,
)
from forge_npm_pkg.scaffolder.templates import TemplateRenderer
from forge_npm_pkg.scaffolder.workflows import WorkflowBuilder

__all__ = [
    "EntryPoints",
    "ProjectExistsError",
    "ProjectGenerator",
    "ScaffoldError",
    "ScaffoldResult",
    "TemplateRenderer",
    "WorkflowBuilder",
    "build_dev_dependencies",
    "build_entry_points",
    "build_scripts",
    "generate_package_json",
    "required_packages",
]
