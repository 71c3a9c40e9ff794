"""Module entrypoint for `python -m focuswrite`."""

from focuswrite.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
