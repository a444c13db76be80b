"""
Kubernetes object state exported as Prometheus metrics.
"""

__version__ = "0.1.0"
