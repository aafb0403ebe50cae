import sys

from forge_npm_pkg.cli import main

sys.exit(main())
