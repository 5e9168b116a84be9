import os
import re

# -- Project information -----------------------------------------------------

project = "conjoin"
copyright = "2026, conjoin developers"
author = "conjoin developers"

# Single source of truth for the version is the package itself
init_path = os.path.join(os.path.dirname(__file__), '..', '..', 'conjoin', '__init__.py')
with open(init_path, 'r') as f:
    version_match = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE)
release = version_match.group(1) if version_match else "0.1.0"
version = ".".join(release.split(".")[:2])

# General configuration
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx_rtd_theme'
]

autodoc_member_order = 'bysource'
templates_path = ['_templates']
exclude_patterns = []

# HTML output options
html_theme = 'sphinx_rtd_theme'
html_title = 'conjoin Documentation'
