"""
Ledgerbook - small-business accounting backend
"""
__version__ = "1.0.0"
