"""Recursos concretos de la API de Life360.

Por qué un esquema por recurso:
- La API es inconsistente con los tipos (números como strings, booleanos
  como "yes"/"1", fechas en s o ms). Cada recurso declara qué campos se
  coercionan y a qué tipo; el resto del payload queda en `model_extra`.

Nota:
- Estos modelos describen *qué* devuelve la API, no *cómo* se pide. Los
  paths de cada endpoint los arma el código de integración.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from core.domain.base import (
    Fragment,
    LooseBool,
    LooseFloat,
    LooseInt,
    LooseTimestamp,
    Resource,
    ResourceList,
    as_fragment,
)


# ─── Fragments (objetos anidados sin identidad) ─────────────────


class CircleFeatures(Fragment):
    premium: LooseInt = None
    price_month: LooseInt = Field(default=None, alias="priceMonth")
    price_year: LooseInt = Field(default=None, alias="priceYear")


class AlertSettings(Fragment):
    crime: LooseBool = None
    sound: LooseBool = None


class MapSettings(Fragment):
    advisor: LooseBool = None
    crime: LooseBool = None
    crime_duration: LooseBool = Field(default=None, alias="crimeDuration")
    family: LooseBool = None
    fire: LooseBool = None
    hospital: LooseBool = None
    member_radius: LooseBool = Field(default=None, alias="memberRadius")
    place_radius: LooseBool = Field(default=None, alias="placeRadius")
    police: LooseBool = None
    sex_offenders: LooseBool = Field(default=None, alias="sexOffenders")


class MemberSettings(Fragment):
    alerts: Annotated[Any, BeforeValidator(as_fragment(AlertSettings))] = None
    map: Annotated[Any, BeforeValidator(as_fragment(MapSettings))] = None
    date_format: Any = Field(default=None, alias="dateFormat")
    locale: Any = None
    time_zone: Any = Field(default=None, alias="timeZone")
    unit_of_measure: Any = Field(default=None, alias="unitOfMeasure")


class MemberIssues(Fragment):
    disconnected: LooseBool = None
    troubleshooting: LooseBool = None


class MemberFeatures(Fragment):
    device: LooseBool = None
    disconnected: LooseBool = None
    geofencing: LooseBool = None
    map_display: LooseBool = Field(default=None, alias="mapDisplay")
    non_smartphone_locating: LooseBool = Field(default=None, alias="nonSmartphoneLocating")
    pending_invite: LooseBool = Field(default=None, alias="pendingInvite")
    share_location: LooseBool = Field(default=None, alias="shareLocation")
    smartphone: LooseBool = None
    share_off_timestamp: LooseTimestamp = Field(default=None, alias="shareOffTimestamp")


# ─── Recursos ───────────────────────────────────────────────────


class Location(Resource):
    """Ubicación de un miembro (actual o de historial).

    Campos de texto frecuentes (quedan en `model_extra`): address1, address2,
    shortAddress, source, sourceId, tripId, userActivity, placeType.
    """

    kind = "location"

    name: Any = None
    latitude: LooseFloat = None
    longitude: LooseFloat = None
    start_timestamp: LooseTimestamp = Field(default=None, alias="startTimestamp")
    end_timestamp: LooseTimestamp = Field(default=None, alias="endTimestamp")
    since: LooseTimestamp = None
    timestamp: LooseTimestamp = None
    accuracy: LooseInt = None
    battery: LooseInt = None
    charge: LooseInt = None
    speed: LooseInt = None
    in_transit: LooseBool = Field(default=None, alias="inTransit")
    is_driving: LooseBool = Field(default=None, alias="isDriving")
    wifi_state: LooseBool = Field(default=None, alias="wifiState")


class Member(Resource):
    """Miembro de un círculo (o el usuario autenticado).

    `circle` resuelve la back-reference al círculo que lo listó; es None
    para el usuario devuelto por `/users/me`.
    """

    kind = "member"
    child_resources = {"location": Location}

    first_name: Any = Field(default=None, alias="firstName")
    last_name: Any = Field(default=None, alias="lastName")
    created: LooseTimestamp = None
    created_at: LooseTimestamp = Field(default=None, alias="createdAt")
    is_admin: LooseBool = Field(default=None, alias="isAdmin")
    location: Any = None
    settings: Annotated[Any, BeforeValidator(as_fragment(MemberSettings))] = None
    issues: Annotated[Any, BeforeValidator(as_fragment(MemberIssues))] = None
    features: Annotated[Any, BeforeValidator(as_fragment(MemberFeatures))] = None

    @property
    def circle(self) -> Circle | None:
        owner = self.owner
        return owner if isinstance(owner, Circle) else None

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if isinstance(p, str) and p]
        return " ".join(parts)


class MemberList(ResourceList[Member]):
    item_type = Member
    name_fields = ("firstName", "lastName")

    def names_of(self, item: Member) -> Iterable[Any]:
        yield from super().names_of(item)
        yield item.full_name


class Circle(Resource):
    """Círculo de Life360. Siempre tiene `members` tras `populate`."""

    kind = "circle"
    child_lists = {"members": MemberList}

    name: Any = None
    created_at: LooseTimestamp = Field(default=None, alias="createdAt")
    member_count: LooseInt = Field(default=None, alias="memberCount")
    unread_messages: LooseInt = Field(default=None, alias="unreadMessages")
    unread_notifications: LooseInt = Field(default=None, alias="unreadNotifications")
    features: Annotated[Any, BeforeValidator(as_fragment(CircleFeatures))] = None
    members: MemberList | None = None

    def populate(self, raw: Mapping[str, Any]) -> Circle:
        super().populate(raw)
        if self.members is None:
            self.members = MemberList(owner_key=self.key, arena=self.arena)
        return self


class CircleList(ResourceList[Circle]):
    item_type = Circle


class _Incident(Resource):
    id: LooseInt = None
    incident_date: LooseTimestamp = Field(default=None, alias="incidentDate")
    # La API manda a veces la variante snake_case de la misma fecha.
    incident_date_legacy: LooseTimestamp = Field(default=None, alias="incident_date")
    latitude: LooseFloat = None
    longitude: LooseFloat = None


class Crime(_Incident):
    kind = "crime"


class CrimeList(ResourceList[Crime]):
    item_type = Crime
    name_fields = ("type", "description", "address")


class SafetyPoint(_Incident):
    kind = "safety_point"

    name: Any = None
    location_type: Any = Field(default="safetyPoint", alias="locationType")


class SafetyPointList(ResourceList[SafetyPoint]):
    item_type = SafetyPoint
    name_fields = ("name", "type", "address")


class Offender(Resource):
    kind = "offender"

    name: Any = None
    age: LooseInt = None
    weight: LooseInt = None
    latitude: LooseFloat = None
    longitude: LooseFloat = None


class OffenderList(ResourceList[Offender]):
    item_type = Offender


class Place(Resource):
    kind = "place"

    name: Any = None
    latitude: LooseFloat = None
    longitude: LooseFloat = None
    radius: LooseFloat = None


class PlaceList(ResourceList[Place]):
    item_type = Place


class LocationList(ResourceList[Location]):
    item_type = Location
    name_fields = ("name", "address1", "shortAddress")


class LocationRequest(Resource):
    """Pedido de ubicación a un miembro; se consulta hasta que el status es "A"."""

    kind = "location_request"
    child_resources = {"location": Location}

    request_id: Any = Field(default=None, alias="requestId")
    is_pollable: LooseBool = Field(default=None, alias="isPollable")
    status: Any = None
    location: Any = None

    @property
    def member(self) -> Member | None:
        owner = self.owner
        return owner if isinstance(owner, Member) else None

    @property
    def circle(self) -> Circle | None:
        member = self.member
        return member.circle if member is not None else None

    @property
    def fulfilled(self) -> bool:
        return self.status == "A"

    def apply_status(self, payload: dict[str, Any]) -> bool:
        """Aplica la respuesta de consulta del pedido. True si ya fue atendido."""

        self.populate(payload)
        return self.fulfilled


class CheckinRequest(LocationRequest):
    kind = "checkin_request"


class Session(Resource):
    """Credencial de sesión devuelta por el intercambio de token."""

    kind = "session"

    token_type: Any = None
    access_token: Any = None
