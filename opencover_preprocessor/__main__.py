"""Package entry point for ``python -m opencover_preprocessor``."""

from opencover_preprocessor.cli import main

if __name__ == "__main__":
    main()
