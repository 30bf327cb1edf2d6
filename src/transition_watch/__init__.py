"""Monitor de señales de transición de validadores.

English:
    Validator transition-signal monitor.
"""

__version__ = "0.1.0"
