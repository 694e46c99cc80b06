"""Allow ``python -m graph_grouper``."""

from graph_grouper.main import main

if __name__ == "__main__":
    raise SystemExit(main())
