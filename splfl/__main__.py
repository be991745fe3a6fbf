"""Module entrypoint: ``python -m splfl``."""

from splfl.cli import main

if __name__ == "__main__":
    main()
