"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: los data sources dependen de abstracciones
  y los tests pueden sustituir el fetcher HTTP por uno en memoria.
"""
