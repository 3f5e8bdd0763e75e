"""
                Order Desk

Restaurant order-management backend: gateway-verified order intake,
live kitchen broadcasts, sales reporting and menu publishing.
"""

__version__ = "1.0.0"
