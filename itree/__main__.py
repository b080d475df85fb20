"""Module entrypoint for ``python -m itree``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and session setup happen in ``itree.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
