"""Allow ``python -m src.release_check``."""

from .main import main

main()
