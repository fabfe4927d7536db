"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Los servicios dependen de `CommandRunner`, no de `subprocess`.
"""
