"""trimlin

Trim and linearisation of nonlinear flight dynamics models.
"""
from trimlin.version import __version__
