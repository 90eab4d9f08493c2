"""Trim

Cost function (:mod:`~trimlin.trim.trimmer`) and the simplex optimiser (:mod:`~trimlin.trim.neldermead`) used to find
steady flight conditions.
"""
