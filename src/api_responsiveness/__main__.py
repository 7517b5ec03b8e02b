from __future__ import annotations

from .cli import app


def main() -> None:
    """
    Console entrypoint for `python -m api_responsiveness`.

    All CLI definitions live in `api_responsiveness.cli`.
    """
    app(prog_name="api-responsiveness")


if __name__ == "__main__":
    main()
