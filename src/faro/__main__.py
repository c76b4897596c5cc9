"""Allow ``python -m faro``."""

from faro.cli import main

if __name__ == "__main__":
    main()
