"""Registro de recursos por `(kind, owner_key, id)`.

Por qué un arena:
- Las back-references (member -> circle, request -> member) se guardan como
  claves, no como punteros. Así un recurso nunca es dueño de su padre y no
  se forman ciclos entre objetos.
- La clave incluye la del dueño: el mismo id puede aparecer bajo varios
  padres (el usuario es miembro de cada uno de sus círculos) y cada
  aparición se resuelve a su propio objeto.
- Cada llamada a la API crea su propio arena: no hay caché ni de-duplicación
  entre llamadas.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from core.domain.base import Resource

# (kind, owner_key | None, id)
ResourceKey = tuple[str, Any, Any]


class ResourceArena:
    def __init__(self) -> None:
        self._resources: dict[ResourceKey, Resource] = {}

    def register(self, resource: Resource) -> bool:
        """Registra el recurso bajo su clave. Ids ausentes o no hashables se ignoran."""

        rid = resource.id
        if rid is None or not isinstance(rid, Hashable):
            return False
        try:
            self._resources[resource.key] = resource
        except TypeError:
            return False
        return True

    def resolve(self, key: ResourceKey | None) -> Resource | None:
        if key is None:
            return None
        try:
            return self._resources.get(key)
        except TypeError:
            return None

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._resources
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._resources.values()))
