__version__ = "0.1.0"

from .collector import ResultGroup, ResultRow, collect_rows, discover_groups
from .config import BenchTableConfig
from .errors import BenchTableError
from .renderer import render_rows

__all__ = [
    "__version__",
    "BenchTableConfig",
    "BenchTableError",
    "ResultGroup",
    "ResultRow",
    "collect_rows",
    "discover_groups",
    "render_rows",
]
