"""
Manufacturing Dashboard Service

Aggregates sales, inventory, procurement, production and quality data into
the metrics shown on the manufacturing operations dashboard.
"""

__version__ = "1.0.0"
