# AKCM Output Module
# Rich console output

from akcm.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
