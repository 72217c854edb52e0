"""Allow ``python -m datamon``."""

from datamon.cli import main

if __name__ == "__main__":
    main()
