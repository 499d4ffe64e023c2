"""
hookfile: global and project hookfiles for a package manager's resolution pipeline.
"""

__version__ = "0.1.0"
