"""
routed_server/__main__.py
CLI entry point: ``python -m routed_server``
"""

import sys

from .core.container import build_container
from .core.exceptions import ConstructionException
from .core.logging import get_logger


def main() -> int:
    try:
        container = build_container()
    except ConstructionException as e:
        get_logger("main").error("startup_aborted", **e.to_dict())
        return 1
    return container.app.run()


if __name__ == "__main__":
    sys.exit(main())
