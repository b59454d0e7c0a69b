"""Base del modelo de recursos (Pydantic v2).

Por qué Pydantic aquí:
- Cada tipo de recurso declara un esquema explícito de campos opcionales con
  su tipo semántico (int/float/bool/timestamp), y las keys que no están en el
  esquema se conservan en `model_extra` en lugar de perderse.
- Los validadores `Loose*` aplican la coerción best-effort también al asignar
  (`validate_assignment`), así que un `populate` posterior re-aplica las reglas.

Reglas:
- `populate` copia todas las keys del payload; nunca borra campos ausentes
  (updates parciales permitidos).
- Las relaciones hijo -> padre son claves `(kind, owner_key, id)` resueltas vía
  `ResourceArena`, nunca punteros directos.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from functools import lru_cache
from typing import Annotated, Any, Callable, ClassVar, Generic, Self, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, PrivateAttr

from core.domain.arena import ResourceArena, ResourceKey
from core.domain.coercion import as_bool, as_float, as_int, as_timestamp

LooseInt = Annotated[Any, BeforeValidator(as_int)]
LooseFloat = Annotated[Any, BeforeValidator(as_float)]
LooseBool = Annotated[Any, BeforeValidator(as_bool)]
LooseTimestamp = Annotated[Any, BeforeValidator(as_timestamp)]


class Fragment(BaseModel):
    """Objeto de valor anidado (settings, features, issues). Sin identidad propia."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


F = TypeVar("F", bound=Fragment)


def as_fragment(model: type[F]) -> Callable[[Any], Any]:
    """Validador: construye el Fragment si llega un mapping, si no pass-through."""

    def _coerce(value: Any) -> Any:
        if isinstance(value, Mapping):
            return model.model_validate(value)
        return value

    return _coerce


@lru_cache(maxsize=None)
def _field_keys(model: type[BaseModel]) -> dict[str, str]:
    # key upstream (alias si existe) -> nombre del atributo Python
    return {(info.alias or name): name for name, info in model.model_fields.items()}


R = TypeVar("R", bound="Resource")


class ResourceList(Generic[R]):
    """Secuencia ordenada de recursos, append-only hasta `clear_children`.

    Las subclases fijan `item_type` y los campos usados por `find_by_name`.
    """

    item_type: ClassVar[type[Resource]]
    name_fields: ClassVar[tuple[str, ...]] = ("name",)

    def __init__(
        self,
        *,
        owner_key: ResourceKey | None = None,
        arena: ResourceArena | None = None,
    ) -> None:
        self._items: list[R] = []
        self.owner_key = owner_key
        self.arena = arena if arena is not None else ResourceArena()

    @property
    def owner(self) -> Resource | None:
        return self.arena.resolve(self.owner_key)

    def populate(self, items: Sequence[Mapping[str, Any]] | None) -> Self:
        """Crea un hijo tipado por cada objeto crudo y lo agrega al final."""

        if items is None:
            return self
        if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
            raise TypeError(
                f"{type(self).__name__}.populate expects a sequence, got {type(items).__name__}"
            )
        for raw in items:
            child = self.item_type.from_raw(raw, arena=self.arena, owner_key=self.owner_key)
            self.add_child(child)
        return self

    def add_child(self, child: R) -> R:
        self._items.append(child)
        return child

    def clear_children(self) -> None:
        self._items.clear()

    def find_by_id(self, resource_id: Any) -> R | None:
        for item in self:
            if type(item.id) is type(resource_id) and item.id == resource_id:
                return item
        return None

    def find_by_name(self, pattern: str) -> R | None:
        """Primer recurso cuyo nombre matchea `pattern` (regex, sin mayúsculas).

        Un patrón que no compila como regex se busca como substring literal.
        """

        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error:
            regex = re.compile(re.escape(pattern), re.IGNORECASE)
        for item in self:
            for name in self.names_of(item):
                if isinstance(name, str) and regex.search(name):
                    return item
        return None

    def names_of(self, item: R) -> Iterable[Any]:
        for key in self.name_fields:
            yield item.get(key)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[R]:
        # Cada pasada es independiente: se itera sobre una copia.
        return iter(tuple(self._items))

    def __getitem__(self, index: int) -> R:
        return self._items[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(length={len(self)}, owner={self.owner_key!r})"


class Resource(BaseModel):
    """Objeto de la API poblado desde un payload JSON crudo."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    kind: ClassVar[str] = "resource"
    child_resources: ClassVar[dict[str, type[Resource]]] = {}
    child_lists: ClassVar[dict[str, type[ResourceList[Any]]]] = {}

    id: Any = None

    _arena: ResourceArena = PrivateAttr(default_factory=ResourceArena)
    _owner_key: ResourceKey | None = PrivateAttr(default=None)

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, Any],
        *,
        arena: ResourceArena | None = None,
        owner_key: ResourceKey | None = None,
    ) -> Self:
        resource = cls()
        if arena is not None:
            resource._arena = arena
        resource._owner_key = owner_key
        return resource.populate(raw)

    @property
    def key(self) -> ResourceKey:
        return (self.kind, self._owner_key, self.id)

    @property
    def arena(self) -> ResourceArena:
        return self._arena

    @property
    def owner_key(self) -> ResourceKey | None:
        return self._owner_key

    @property
    def owner(self) -> Resource | None:
        return self._arena.resolve(self._owner_key)

    def populate(self, raw: Mapping[str, Any]) -> Self:
        """Copia el payload sobre el recurso aplicando la coerción del esquema.

        Los hijos (listas y recursos anidados) se construyen al final, cuando
        el id propio ya está asignado y puede usarse como back-reference.
        """

        if not isinstance(raw, Mapping):
            raise TypeError(
                f"{type(self).__name__}.populate expects a mapping, got {type(raw).__name__}"
            )

        deferred: list[tuple[str, Any]] = []
        for key, value in raw.items():
            if key in self.child_lists or key in self.child_resources:
                deferred.append((key, value))
                continue
            self._assign(key, value)

        for key, value in deferred:
            self._assign(key, self._build_child(key, value))

        self._arena.register(self)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        """Lee un campo por su key upstream (alias), esté o no en el esquema."""

        name = _field_keys(type(self)).get(key)
        if name is not None:
            return getattr(self, name)
        return (self.__pydantic_extra__ or {}).get(key, default)

    def _assign(self, key: str, value: Any) -> None:
        name = _field_keys(type(self)).get(key)
        if name is None:
            self.__pydantic_extra__[key] = value
        else:
            setattr(self, name, value)

    def _build_child(self, key: str, value: Any) -> Any:
        if key in self.child_lists:
            children = self.child_lists[key](owner_key=self.key, arena=self._arena)
            return children.populate(value)
        if isinstance(value, Mapping):
            return self.child_resources[key].from_raw(
                value, arena=self._arena, owner_key=self.key
            )
        return value
