"""PDF objects, TrueType subsets, image data, outlines and RC4 protection."""

__version__ = "0.1.0"