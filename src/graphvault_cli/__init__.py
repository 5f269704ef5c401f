"""
GraphVault command line interface.
"""
