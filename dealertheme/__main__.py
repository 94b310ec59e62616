"""Entry point for `python -m dealertheme`."""

import sys


def main():
    from dealertheme.cli import main as cli_main
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
