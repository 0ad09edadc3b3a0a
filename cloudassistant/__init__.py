"""Google sign-in, Drive and chat proxy backend for the Cloud Assistant page."""

__version__ = "0.1.0"
