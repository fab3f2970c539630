"""
codeconv: convert scripts between programming languages through a remote service.

The command line is built on commandeer (see codeconv.cli); handlers live in
codeconv.handlers and talk to the service through codeconv.client.
"""
__title__ = 'codeconv'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
)
