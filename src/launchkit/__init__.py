"""
launchkit - utility support for process launchers

Byte-stream copying, recursive filesystem operations, subprocess spawning
with stream redirection, and ``${name}`` placeholder substitution.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
