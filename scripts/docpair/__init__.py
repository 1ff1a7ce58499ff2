"""Docpair - pair prose comments with the code they describe.

This package provides tools for:
- Tokenizing C#-style sources (literals and comments kept whole)
- Classifying each physical line as comment or code
- Splitting files into alternating comment and code sections
- Registering declared types by (name, file) for cross-file hyperlinks

The sections and types are written as JSON for an HTML renderer.

Usage:
    python -m scripts.docpair build src/          # Parse a tree, write indexes
    python -m scripts.docpair parse src/Foo.cs    # Print one file's sections
    python -m scripts.docpair types --name Foo    # Query the types index
"""

__version__ = "1.0.0"
