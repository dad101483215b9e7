# Sphinx configuration for the aws-codepipeline-execute API reference.

import os
import sys

sys.path.insert(0, os.path.abspath("../src"))

from codepipeline_execute import __version__  # noqa: E402

project = "aws-codepipeline-execute"
author = "aws-codepipeline-execute contributors"
copyright = f"2024, {author}"
version = release = __version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
    "sphinx_autodoc_typehints",
]

exclude_patterns = ["_build"]
html_theme = "sphinx_rtd_theme"

# Modules use Google-style "Args:/Returns:/Raises:" sections.
napoleon_google_docstring = True
napoleon_numpy_docstring = False

autodoc_member_order = "bysource"
autodoc_default_options = {"members": True, "show-inheritance": True}
typehints_fully_qualified = False

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "boto3": ("https://boto3.amazonaws.com/v1/documentation/api/latest/", None),
    "requests": ("https://requests.readthedocs.io/en/latest/", None),
    "pydantic": ("https://docs.pydantic.dev/latest/", None),
}
