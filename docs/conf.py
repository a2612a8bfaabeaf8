import os
import sys

from sheet_author import _get_version

sys.path.insert(0, os.path.abspath("../"))  # noqa: PTH100

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.viewcode",
    "sphinx.ext.napoleon",
    "enum_tools.autoenum",
]
# Standard Sphinx configuration
templates_path = ["_templates"]
exclude_patterns = ["build", "Thumbs.db", ".DS_Store"]
language = "en"
master_doc = "index"
project = "sheet-author"
version = _get_version()
release = version

# sphinx.ext.napoleon configuration
napoleon_google_docstring = False
napoleon_numpy_docstring = True
napoleon_include_special_with_doc = False
napoleon_use_admonition_for_notes = True

autodoc_member_order = "bysource"
