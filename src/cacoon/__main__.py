"""Entrypoint for ``python -m cacoon``."""

from .cli import main

if __name__ == "__main__":
    main()
