"""Top-level package for novelshelf.

novelshelf is a terminal reader for a remote light-novel content API. It lists
novels, shows chapter lists, renders chapter HTML as clean paragraphs, and keeps
a local favorites library.
"""

from .text.normalizer import join, normalize

__all__ = ["normalize", "join", "__version__"]

__version__ = "0.1.0"
