"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos y la coerción de tipos (Pydantic v2).
- El dominio no conoce HTTP: solo cómo interpretar los payloads de la API.
"""
