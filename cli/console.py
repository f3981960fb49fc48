"""
Shared Rich consoles.

``console`` carries tables and panels; ``err_console`` goes to stderr so
``--json`` output on stdout stays machine-readable.
"""

from rich.console import Console
from rich.theme import Theme

THEME = Theme({
    # status
    "success":  "bold green",
    "warning":  "bold yellow",
    "error":    "bold red",
    "muted":    "dim white",
    # content
    "query":    "italic yellow",
    "source":   "bold cyan",
    "historic": "bold yellow",
    "year":     "bold green",
    "period":   "bold magenta",
    # summary panel
    "stat_key": "bold white",
    "stat_val": "cyan",
})

console = Console(theme=THEME)
err_console = Console(theme=THEME, stderr=True)
