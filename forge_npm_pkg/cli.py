"""forge-npm-pkg command line interface.

Scaffolds a production-ready npm package from command-line flags.

Usage::

    forge-npm-pkg my-lib
    forge-npm-pkg my-lib --module-type dual --test-runner jest --codecov
    python -m forge_npm_pkg @scope/my-lib --language javascript --no-lint -o ./out
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from forge_npm_pkg.config import (
    ForgeSettings,
    Language,
    ModuleType,
    ProjectConfiguration,
    TestRunner,
)
from forge_npm_pkg.scaffolder import (
    ProjectExistsError,
    ProjectGenerator,
    ScaffoldError,
    ScaffoldResult,
)
from forge_npm_pkg.utils import (
    console,
    create_progress,
    format_duration,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forge-npm-pkg",
        description="Scaffold a production-ready npm package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  forge-npm-pkg my-lib\n"
            "  forge-npm-pkg my-lib --module-type dual --codecov --dependabot\n"
            "  forge-npm-pkg my-lib --language javascript --test-runner none -o ./out\n"
        ),
    )

    parser.add_argument("package_name", help="Name of the package to create")
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Parent directory for the new project (default: current directory)",
    )
    parser.add_argument(
        "--language",
        choices=[m.value for m in Language],
        default=Language.TYPESCRIPT.value,
    )
    parser.add_argument(
        "--module-type",
        choices=[m.value for m in ModuleType],
        default=ModuleType.ESM.value,
        help="esm (recommended), commonjs (legacy) or dual (ESM + CJS)",
    )
    parser.add_argument(
        "--test-runner",
        choices=[m.value for m in TestRunner],
        default=TestRunner.VITEST.value,
    )
    parser.add_argument(
        "--lint", action=argparse.BooleanOptionalAction, default=True,
        help="ESLint + Prettier (default: on)",
    )
    parser.add_argument(
        "--changesets", action=argparse.BooleanOptionalAction, default=False,
        help="Automated releases with Changesets",
    )
    parser.add_argument(
        "--git", action=argparse.BooleanOptionalAction, default=True,
        help="Record that the project should be put under git (default: on)",
    )
    parser.add_argument(
        "--ci", action=argparse.BooleanOptionalAction, default=True,
        help="GitHub Actions CI workflow (default: on)",
    )
    parser.add_argument(
        "--cd", action=argparse.BooleanOptionalAction, default=False,
        help="GitHub Actions publish workflow",
    )
    parser.add_argument(
        "--codecov", action=argparse.BooleanOptionalAction, default=False,
        help="Upload coverage to Codecov from CI",
    )
    parser.add_argument(
        "--dependabot", action=argparse.BooleanOptionalAction, default=False,
        help="Dependabot config plus auto-merge workflow",
    )
    parser.add_argument("--description", default=None)
    parser.add_argument("--author", default=None)
    parser.add_argument("--author-email", default=None)
    parser.add_argument("--github-username", default=None)
    return parser


def config_from_args(args: argparse.Namespace) -> ProjectConfiguration:
    """Build the configuration from parsed flags.

    Raises:
        pydantic.ValidationError: If a value is invalid (e.g. the package name).
    """
    return ProjectConfiguration(
        package_name=args.package_name,
        language=args.language,
        module_type=args.module_type,
        test_runner=args.test_runner,
        use_linting=args.lint,
        use_changesets=args.changesets,
        init_git=args.git,
        setup_ci=args.ci,
        setup_cd=args.cd,
        use_codecov=args.codecov,
        use_dependabot=args.dependabot,
        description=args.description,
        author=args.author,
        author_email=args.author_email,
        github_username=args.github_username,
    )


async def _scaffold(generator: ProjectGenerator, output: str) -> ScaffoldResult:
    with create_progress() as progress:
        task = progress.add_task("Resolving package versions...", total=None)
        versions = await generator.resolve_versions()
        progress.update(task, description="Writing project files...")
        return await generator.generate(output, versions=versions)


def report(result: ScaffoldResult, config: ProjectConfiguration, elapsed: float) -> None:
    """Print resolution warnings, a summary table and next steps."""
    for level, message in result.warnings:
        if level == "info":
            print_info(message)
        else:
            print_warning(message)

    print_summary_table(
        {
            "Location": str(result.project_root),
            "Language": config.language.value,
            "Module format": config.module_type.value,
            "Test runner": config.test_runner.value,
            "Node engines": result.versions.node.engines,
            "Files": str(len(result.files)),
            "Duration": format_duration(elapsed),
        },
        title=config.package_name,
    )
    print_success("All done! Your package is ready.")

    console.print("\nNext steps:\n")
    console.print(f"  cd {result.project_root}")
    console.print("  npm install")
    if config.init_git:
        console.print('  git init && git add . && git commit -m "chore: initial commit"')
    if config.is_typescript:
        console.print("  npm run build          # Build your package")
        console.print("  npm run check:exports  # Validate package exports")
    if config.has_tests:
        console.print("  npm test               # Run tests")
    if config.use_linting:
        console.print("  npm run lint           # Lint your code")
    if config.use_changesets:
        console.print("  npx changeset init     # Set up Changesets")
    console.print()


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``forge-npm-pkg`` and ``python -m forge_npm_pkg``."""
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            print_error(f"Error: {field}: {error['msg']}")
        return 1

    generator = ProjectGenerator(config, ForgeSettings.from_env())
    project_root = Path(args.output) / config.repo_name
    if project_root.exists():
        print_error(f"Error: {ProjectExistsError(project_root)}")
        return 1

    started = time.monotonic()
    try:
        result = asyncio.run(_scaffold(generator, args.output))
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        return 1

    report(result, config, time.monotonic() - started)
    return 0


if __name__ == "__main__":
    sys.exit(main())
