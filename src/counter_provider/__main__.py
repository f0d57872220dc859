"""Allow ``python -m counter_provider``."""
from counter_provider.cli import main

main()
