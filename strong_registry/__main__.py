"""Module entrypoint to run strong-registry via ``python -m strong_registry``."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
