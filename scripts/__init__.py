"""
Command line scripts for the SoulyCore backend.
"""
