"""
SignalDesk: data access layer and API of the trading-signals demo app.
"""

__version__ = "0.1.0"
