"""An interactive shell with pipelines, redirections, heredocs, variable expansion and wildcards."""

__version__ = "0.1.0"

__all__ = ["__version__"]