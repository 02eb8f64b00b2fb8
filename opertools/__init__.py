"""Building blocks for Kubernetes operators: override types, ordering, volumes, logging and waits."""

__version__ = "0.1.0"