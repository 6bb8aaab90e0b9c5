"""User Schemas — the User record definition and the store result summaries.

Invariants:
    - UserCreate requires name (str), age (int), email (str); nothing else is checked
    - UserUpdate fields are all optional; only fields present in the body are written
    - UserRecord serializes its id under "_id", as the store names it
    - UserRecord is a read model: it accepts whatever shape is already stored
      (missing fields come back null, a non-integer age is passed through), so one
      legacy document cannot fail a whole listing
    - Summary models mirror the store's acknowledgement fields (camelCase)
"""

from pydantic import BaseModel, ConfigDict, Field

USER_EXAMPLE = {"name": "Paula Builes", "age": 20, "email": "pbuiles@gmail.com"}


class UserCreate(BaseModel):
    """User creation body."""
    model_config = ConfigDict(json_schema_extra={"example": USER_EXAMPLE})

    name: str = Field(description="El nombre del usuario")
    age: int = Field(description="La edad del usuario")
    email: str = Field(description="El email del usuario")


class UserUpdate(BaseModel):
    """User update body: omitted fields are left untouched."""
    model_config = ConfigDict(json_schema_extra={"example": {"age": 21}})

    name: str | None = None
    age: int | None = None
    email: str | None = None

    def to_set_fields(self) -> dict:
        """Fields to $set: the ones the client sent, minus explicit nulls."""
        return {
            k: v for k, v in self.model_dump(exclude_unset=True).items()
            if v is not None
        }


class UserRecord(BaseModel):
    """A stored User, including its generated id."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"_id": "6553f1c2a4e5b7c8d9e0f123", **USER_EXAMPLE}},
    )

    id: str = Field(alias="_id", description="Id generado por la base de datos")
    name: str | None = Field(default=None, description="El nombre del usuario")
    age: int | float | str | None = Field(default=None, description="La edad del usuario")
    email: str | None = Field(default=None, description="El email del usuario")


class DeleteSummary(BaseModel):
    """Result of delete-by-id."""
    acknowledged: bool = True
    deletedCount: int


class UpdateSummary(BaseModel):
    """Result of update-by-id."""
    acknowledged: bool = True
    matchedCount: int
    modifiedCount: int
    upsertedId: str | None = None
    upsertedCount: int = 0
