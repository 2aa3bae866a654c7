"""command line ordering app for a pizza store chain"""

__version__ = "1.0.0"
