"""Package entry point for ``python -m xclog_regroup``.

Delegates to the CLI's main() function.
"""

from xclog_regroup.cli import main

if __name__ == "__main__":
    main()
