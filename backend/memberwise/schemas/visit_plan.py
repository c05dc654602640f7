"""Visit plan - the immutable input to every calculation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from memberwise.data.catalog import Constraints, DiscountType, Venue


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


class SpecialProgramFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    welcome_eligible: bool = False
    discount_type: DiscountType = DiscountType.NONE


class VisitPlan(BaseModel):
    """How many people visit, their ages, and planned visits per venue.

    Negative numbers become 0 on construction instead of being rejected.
    Upper bounds belong to the pricing catalog in use, so they are applied
    by ``clamped`` once the catalog is known.
    """

    model_config = ConfigDict(frozen=True)

    adult_count: int = 0
    child_ages: tuple[int, ...] = ()
    visits_by_venue: dict[Venue, int] = Field(default_factory=dict)
    is_resident_discount_eligible: bool = False
    include_parking: bool = True
    special_program_flags: SpecialProgramFlags = Field(default_factory=SpecialProgramFlags)

    @field_validator("adult_count")
    @classmethod
    def _floor_adults(cls, v: int) -> int:
        return max(v, 0)

    @field_validator("child_ages")
    @classmethod
    def _floor_ages(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        return tuple(max(age, 0) for age in v)

    @field_validator("visits_by_venue")
    @classmethod
    def _floor_visits(cls, v: dict[Venue, int]) -> dict[Venue, int]:
        return {venue: max(count, 0) for venue, count in v.items()}

    def visits(self, venue: Venue) -> int:
        return self.visits_by_venue.get(venue, 0)

    @property
    def children_count(self) -> int:
        return len(self.child_ages)

    @property
    def discount_type(self) -> DiscountType:
        return self.special_program_flags.discount_type

    @property
    def welcome_eligible(self) -> bool:
        return self.special_program_flags.welcome_eligible

    def clamped(self, constraints: Constraints) -> "VisitPlan":
        """Apply the upper bounds from ``constraints`` (a catalog's limits)."""
        return self.model_copy(update={
            "adult_count": _clamp(self.adult_count, 0, constraints.MAX_ADULTS),
            "child_ages": tuple(
                _clamp(age, 0, constraints.MAX_CHILD_AGE)
                for age in self.child_ages[: constraints.MAX_CHILDREN]
            ),
            "visits_by_venue": {
                venue: _clamp(count, 0, constraints.MAX_VISITS_PER_LOCATION)
                for venue, count in self.visits_by_venue.items()
            },
        })
