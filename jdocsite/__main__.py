"""Entry point for running jdocsite as a module: python -m jdocsite.

This enables:
    python -m jdocsite build src/main/java --out-dir site
"""

from jdocsite.api.cli.main import main

if __name__ == "__main__":
    main()
