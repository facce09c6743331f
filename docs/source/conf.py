import importlib.util
import os
import sys

# Put project root on sys.path so autodoc can import the package if needed
sys.path.insert(0, os.path.abspath("../.."))

project = "negbinom"
author = "negbinom developers"

extensions = [
    "autoapi.extension",
    "sphinx.ext.doctest",
    "sphinx.ext.napoleon",
    "sphinx_copybutton",
]
templates_path = []
exclude_patterns = []

# Book-style theme when installed, bundled alabaster otherwise.
if importlib.util.find_spec("sphinx_book_theme") is not None:
    html_theme = "sphinx_book_theme"
    html_theme_options = {"path_to_docs": "docs/source"}
else:
    html_theme = "alabaster"
    html_theme_options = {}

master_doc = "index"

# ---------------------------------------------------------------------------
# sphinx-autoapi: generate API reference for the `negbinom` package
# ---------------------------------------------------------------------------
autoapi_type = "python"
autoapi_dirs = ["../../negbinom"]

autoapi_ignore = [
    "**/docs/**",
    "**/tests/**",
    "**/.venv/**",
    "**/__pycache__/**",
]

autodoc_typehints = "description"

autoapi_options = [
    "members",
    "undoc-members",
    "show-inheritance",
    "show-module-summary",
]

autoapi_python_class_content = "both"

# Doctests in the reference pages run against float64 results.
doctest_global_setup = """
from negbinom import reset_default_policy
reset_default_policy()
"""
