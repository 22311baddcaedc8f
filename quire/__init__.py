"""Quire: content and configuration model for Hugo-style static sites.

This package loads a site's configuration document and its markdown content
files, validates their front matter, and builds the listing model a site
generator consumes: chronological ordering, tag taxonomy and pagination.
Rendering is left to the generator.

The main entry point is the CLI module, which provides commands for checking
a site, printing listings and tags, and creating new content files.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
