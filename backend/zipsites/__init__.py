"""ZipSites — host static websites uploaded as ZIP archives."""

__version__ = "0.1.0"
