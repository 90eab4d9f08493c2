"""Linearisation

Named plant quantities (:mod:`~trimlin.linear.src.components`), the finite difference engine
(:mod:`~trimlin.linear.src.statespace`) and the resulting linear model (:mod:`~trimlin.linear.src.libss`).
"""
