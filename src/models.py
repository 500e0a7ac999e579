"""Data classes for genogram entities and layout geometry."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Protocol, TypeVar

E = TypeVar("E")


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"


class Orientation(Enum):
    TOP_TO_BOTTOM = "top-to-bottom"
    LEFT_TO_RIGHT = "left-to-right"


class MarriageStatus(Enum):
    MARRIED = "married"
    DIVORCED = "divorced"
    SEPARATED = "separated"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def translate(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Axis:
    """
    Maps primary/secondary layout coordinates onto x/y.

    The primary axis is the one siblings and spouses are spread along:
    horizontal for top-to-bottom layouts, vertical for left-to-right ones.
    Generations advance along the secondary axis.
    """

    orientation: Orientation

    @property
    def horizontal(self) -> bool:
        return self.orientation == Orientation.TOP_TO_BOTTOM

    def primary(self, point: Point) -> float:
        return point.x if self.horizontal else point.y

    def secondary(self, point: Point) -> float:
        return point.y if self.horizontal else point.x

    def point(self, primary: float, secondary: float) -> Point:
        if self.horizontal:
            return Point(primary, secondary)
        return Point(secondary, primary)

    def translate(self, point: Point, primary: float = 0.0, secondary: float = 0.0) -> Point:
        return point.translate(*self._delta(primary, secondary))

    def primary_extent(self, size: Size) -> float:
        return size.width if self.horizontal else size.height

    def secondary_extent(self, size: Size) -> float:
        return size.height if self.horizontal else size.width

    def _delta(self, primary: float, secondary: float) -> tuple[float, float]:
        return (primary, secondary) if self.horizontal else (secondary, primary)


class PersonSchema(Protocol[E]):
    """Read-only access to an opaque person record."""

    def id(self, person: E) -> str: ...

    def father_ids(self, person: E) -> list[str] | None: ...

    def mother_ids(self, person: E) -> list[str] | None: ...

    def spouse_ids(self, person: E) -> list[str] | None: ...

    def gender(self, person: E) -> Gender: ...


@dataclass(eq=False)
class Node(Generic[E]):
    """A person record placed on the diagram."""

    id: str
    data: E
    position: Point = ORIGIN

    def __repr__(self) -> str:
        return f"Node({self.id!r}, x={self.position.x}, y={self.position.y})"


@dataclass
class Person:
    id: str
    name: str
    gender: Gender
    father_ids: list[str] = field(default_factory=list)
    mother_ids: list[str] = field(default_factory=list)
    spouse_ids: list[str] = field(default_factory=list)
    # spouse id -> status, for marriages that are not plain MARRIED
    marriage_statuses: dict[str, MarriageStatus] = field(default_factory=dict)


class PersonRecordSchema:
    """PersonSchema over the Person records produced by the input parsers."""

    def id(self, person: Person) -> str:
        return person.id

    def father_ids(self, person: Person) -> list[str] | None:
        return person.father_ids

    def mother_ids(self, person: Person) -> list[str] | None:
        return person.mother_ids

    def spouse_ids(self, person: Person) -> list[str] | None:
        return person.spouse_ids

    def gender(self, person: Person) -> Gender:
        return person.gender

    def marriage_status(self, person: Person, spouse: Person) -> MarriageStatus:
        status = person.marriage_statuses.get(spouse.id)
        if status is None:
            status = spouse.marriage_statuses.get(person.id, MarriageStatus.MARRIED)
        return status
