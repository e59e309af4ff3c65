"""
promc - typed Prometheus metric accessors generated from configuration.
"""

__version__ = "0.1.0"
