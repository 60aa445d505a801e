"""
Fixed-Point Arbitrage Cycle Scanner.

Searches a directed graph of scaled exchange rates for the most profitable
closed trade loop starting and ending at each priced asset.
"""

__version__ = "1.0.0"
__author__ = "Tim"
