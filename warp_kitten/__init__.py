"""Warp Kitten: a kitten that chases the treats you toss at it."""

__version__ = "0.1.0"
