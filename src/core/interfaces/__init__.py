"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que cumplen los colaboradores externos.
- Permite invertir dependencias: el motor depende de abstracciones.
"""
