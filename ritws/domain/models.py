"""
domain/models.py
──────────────────────────────────────────────────────────────────────────────
Pure domain objects — Pydantic models with no imports from adapters or ports.

Two families live here:
  • metadata records decoded from MetadataOfRIT (Category, Attribute,
    Dictionary, MetadataSnapshot); all frozen, so a snapshot can be shared
    between resolver calls without anyone mutating it
  • request fragments the caller builds before sending a tourist object
    (ObjectIdentifier, Attachment); each knows how to render itself into
    the camelCase dict the SOAP schema expects

Field aliases mirror the remote schema names, so a serialised zeep response
validates directly into these models.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ritws.domain.exceptions import DecodingError


# ── Enums ──────────────────────────────────────────────────────────────────────

class ValidatorType(str, Enum):
    """Value validator declared for an attribute in RIT metadata."""
    SHORT_TEXT    = "SHORT_TEXT"
    LONG_TEXT     = "LONG_TEXT"
    MULTIPLY_LIST = "MULTIPLY_LIST"
    SINGLE_LIST   = "SINGLE_LIST"
    NUMBER        = "NUMBER"
    BOOLEAN       = "BOOLEAN"
    DATE          = "DATE"
    COMPLEX       = "COMPLEX"


class IdentifierType(str, Enum):
    """How an external (source system) object identifier is built."""
    TABLE_ID        = "I1"   # row id, single source table
    TABLE_AND_NAME  = "I2"   # row id + source table name
    CONCATENATION   = "I3"   # caller-built unique string


class AttachmentSource(str, Enum):
    URL    = "URL"
    FTP    = "ftp"
    BASE64 = "base64"


def _as_list(value: Any) -> list:
    """Normalise a repeated SOAP element: None → [], scalar → [scalar]."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


# ── Metadata records ───────────────────────────────────────────────────────────

class Category(BaseModel):
    """A single RIT category (e.g. C040 'guest rooms')."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    code:            str
    name:            Optional[str] = None
    parent_code:     Optional[str] = Field(None, alias="parentCode")
    attribute_codes: tuple[str, ...] = Field((), alias="attributeCodes")

    @field_validator("parent_code", mode="before")
    @classmethod
    def blank_parent_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("attribute_codes", mode="before")
    @classmethod
    def flatten_attribute_codes(cls, v: Any) -> Any:
        # The wire shape is {"attributeCode": [...]}; plain lists are accepted too.
        if isinstance(v, dict):
            v = v.get("attributeCode")
        return tuple(_as_list(v))

    def with_attribute_codes(self, codes: Sequence[str]) -> "Category":
        """Return a copy carrying a different attribute-code sequence."""
        return self.model_copy(update={"attribute_codes": tuple(codes)})


class Attribute(BaseModel):
    """Definition of a RIT attribute (e.g. A001 'name')."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    code:            str
    name:            Optional[str] = None
    type_validator:  Optional[str] = Field(None, alias="typeValidator")
    dictionary_code: Optional[str] = Field(None, alias="dictionaryCode")

    @property
    def validator(self) -> Optional[ValidatorType]:
        """The declared validator as an enum, or None if unrecognised."""
        try:
            return ValidatorType(self.type_validator)
        except ValueError:
            return None


class Dictionary(BaseModel):
    """A RIT dictionary (e.g. L001, the list of language codes)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    code:   str
    name:   Optional[str] = None
    values: tuple[str, ...] = Field((), alias="value")

    @field_validator("values", mode="before")
    @classmethod
    def listify_values(cls, v: Any) -> Any:
        return tuple(_as_list(v))


CategorySnapshot = Sequence[Category]
AttributeSnapshot = Sequence[Attribute]


class MetadataSnapshot(BaseModel):
    """Decoded getMetadataOfRIT response for one language."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    language:               str
    last_modification_date: Union[datetime, date, str, None] = Field(
                                None, alias="lastModificationDate"
                            )
    categories:   tuple[Category, ...]   = Field((), alias="ritCategory")
    attributes:   tuple[Attribute, ...]  = Field((), alias="ritAttribute")
    dictionaries: tuple[Dictionary, ...] = Field((), alias="ritDictionary")

    @field_validator("categories", "attributes", "dictionaries", mode="before")
    @classmethod
    def listify(cls, v: Any) -> Any:
        return tuple(_as_list(v))

    @classmethod
    def from_response(cls, response: Any, language: str) -> "MetadataSnapshot":
        """Validate a serialised metadata response into a snapshot.

        Raises:
            DecodingError: If the response is not a mapping or a record
                           is missing its code.
        """
        if not isinstance(response, dict):
            raise DecodingError(
                f"Metadata response must be a mapping, got {type(response).__name__}"
            )
        try:
            return cls.model_validate({**response, "language": language})
        except ValidationError as exc:
            raise DecodingError(f"Malformed metadata response: {exc}") from exc


# ── Request fragments ──────────────────────────────────────────────────────────

class ObjectIdentifier(BaseModel):
    """External ('SZ') identifier of a tourist object in the source system.

    A plain int/str id denotes an object by its RIT id instead; see
    services/payloads.py for how both are rendered.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    identifier_type:       IdentifierType = Field(..., alias="identifierType")
    artificial_identifier: Optional[Union[int, str]] = Field(None, alias="artificialIdentifier")
    database_table:        Optional[str] = Field(None, alias="databaseTable")
    concatenation_of_field: Optional[str] = Field(None, alias="concatenationOfField")

    def to_request(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Attachment(BaseModel):
    """A binary document attached to a tourist object."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    file_type: str = Field(..., alias="fileType")
    url:       Optional[str] = Field(None, alias="URL")
    relative_path_to_directory: Optional[str] = Field(None, alias="relativePathToDirectory")
    encoded:   Optional[str] = None

    @property
    def source(self) -> AttachmentSource:
        if self.relative_path_to_directory is not None:
            return AttachmentSource.FTP
        if self.encoded is not None:
            return AttachmentSource.BASE64
        return AttachmentSource.URL

    def to_request(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
