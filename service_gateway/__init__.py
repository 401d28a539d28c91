"""
Steam API gateway service package.
"""
