"""
Serving layer for the manufacturing dashboard
"""
