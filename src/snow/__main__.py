"""Entry point: python -m snow"""

from __future__ import annotations

from snow.cli import main
from snow.logger import install_exception_hooks


def run() -> None:
    install_exception_hooks()
    try:
        main()
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
