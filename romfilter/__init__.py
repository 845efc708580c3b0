"""Select and fetch canonical ROM sets from directory-style file indexes."""

from romfilter.__version__ import __version__

__all__ = ["__version__"]
