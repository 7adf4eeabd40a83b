"""
L0 Data — static tables consumed by every other layer.
"""
