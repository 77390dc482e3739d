"""Federated search over a pool of unreliable SearXNG-style instances."""

__version__ = "0.1.0"
