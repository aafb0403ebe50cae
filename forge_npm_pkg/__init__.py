"""forge-npm-pkg: scaffold production-ready npm packages.

Resolves current versions of the JavaScript toolchain, Node.js LTS lines and
GitHub Actions, then writes a package directory with correct entry points,
build/lint/test tooling and CI workflows.
"""

__version__ = "0.1.0"
