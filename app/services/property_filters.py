"""
Property Filters - Closed set of typed listing filters

Every filter compiles to one SQL predicate; a listing query ANDs all of them
together. Within a filter the combination rule is fixed:
LocationFilter matches address OR city OR state, AmenityFilter requires
every listed amenity.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, List, Tuple, Union, Iterable
from sqlalchemy import or_, and_
from app.models.property import Property


AMENITY_COLUMNS = {
    "parking": Property.parking,
    "pool": Property.pool,
    "gym": Property.gym,
    "petFriendly": Property.pet_friendly,
    "pet_friendly": Property.pet_friendly,
    "furnished": Property.furnished,
}


class UnknownAmenityError(ValueError):
    pass


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass(frozen=True)
class AvailabilityFilter:
    available: bool = True

    def clause(self):
        return Property.available == self.available


@dataclass(frozen=True)
class LocationFilter:
    text: str

    def clause(self):
        pattern = _like_pattern(self.text)
        return or_(
            Property.location.ilike(pattern, escape="\\"),
            Property.city.ilike(pattern, escape="\\"),
            Property.state.ilike(pattern, escape="\\"),
        )


@dataclass(frozen=True)
class PropertyTypeFilter:
    property_type: str

    def clause(self):
        return Property.property_type == self.property_type


@dataclass(frozen=True)
class PriceRangeFilter:
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    def clause(self):
        bounds = []
        if self.min_price is not None:
            bounds.append(Property.price >= self.min_price)
        if self.max_price is not None:
            bounds.append(Property.price <= self.max_price)
        return and_(*bounds)


@dataclass(frozen=True)
class MinBedroomsFilter:
    count: int

    def clause(self):
        return Property.bedrooms >= self.count


@dataclass(frozen=True)
class MinBathroomsFilter:
    count: int

    def clause(self):
        return Property.bathrooms >= self.count


@dataclass(frozen=True)
class AmenityFilter:
    amenities: Tuple[str, ...]

    def clause(self):
        return and_(*(AMENITY_COLUMNS[name].is_(True) for name in self.amenities))


@dataclass(frozen=True)
class OwnerFilter:
    owner_id: str

    def clause(self):
        return Property.owner_id == self.owner_id


@dataclass(frozen=True)
class PropertyIdsFilter:
    property_ids: Tuple[int, ...]

    def clause(self):
        return Property.id.in_(self.property_ids)


PropertyFilter = Union[
    AvailabilityFilter,
    LocationFilter,
    PropertyTypeFilter,
    PriceRangeFilter,
    MinBedroomsFilter,
    MinBathroomsFilter,
    AmenityFilter,
    OwnerFilter,
    PropertyIdsFilter,
]


def parse_amenities(amenities: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """Normalise amenity names, rejecting anything outside the known set"""
    if not amenities:
        return ()
    names = []
    for raw in amenities:
        name = raw.strip()
        if not name:
            continue
        if name not in AMENITY_COLUMNS:
            raise UnknownAmenityError(f"Unknown amenity: {name}")
        if name not in names:
            names.append(name)
    return tuple(names)


def build_listing_filters(
    location: Optional[str] = None,
    property_type: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    bedrooms: Optional[int] = None,
    bathrooms: Optional[int] = None,
    amenities: Optional[Iterable[str]] = None,
) -> List[PropertyFilter]:
    """Public listing filters; only available properties are ever eligible"""
    filters: List[PropertyFilter] = [AvailabilityFilter(True)]

    if location and location.strip():
        filters.append(LocationFilter(location.strip()))

    if property_type:
        filters.append(PropertyTypeFilter(property_type))

    if min_price is not None or max_price is not None:
        filters.append(PriceRangeFilter(min_price, max_price))

    if bedrooms is not None:
        filters.append(MinBedroomsFilter(bedrooms))

    if bathrooms is not None:
        filters.append(MinBathroomsFilter(bathrooms))

    amenity_names = parse_amenities(amenities)
    if amenity_names:
        filters.append(AmenityFilter(amenity_names))

    return filters


def compile_filters(filters: Iterable[PropertyFilter]):
    return and_(*(f.clause() for f in filters))
