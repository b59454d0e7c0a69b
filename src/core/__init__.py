"""Core del cliente: configuración, errores, dominio y contratos.

El Core no hace I/O; la red vive en `adapters`.
"""
