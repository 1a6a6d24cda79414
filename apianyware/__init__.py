"""IR data model, Swift ABI extraction and merging for macOS API descriptions."""

__version__ = "0.1.0"