"""Allow ``python -m canvelete``."""

from canvelete.entrypoints.cli.main import main

if __name__ == "__main__":
    main()
