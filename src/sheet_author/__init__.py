"""Author styled Excel workbooks from Python."""

import importlib.metadata

from sheet_author.cell import *  # noqa: F403
from sheet_author.constants import *  # noqa: F403
from sheet_author.document import *  # noqa: F403
from sheet_author.exceptions import *  # noqa: F403
from sheet_author.utils import estimate_row_height  # noqa: F401

__version__ = importlib.metadata.version("sheet-author")


def _get_version() -> str:
    return __version__
