"""Núcleo de derivación: clasificación, evaluación y agregación.

English:
    Derivation core: classification, evaluation and aggregation.
"""
