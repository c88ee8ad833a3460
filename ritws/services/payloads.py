"""
services/payloads.py
──────────────────────────────────────────────────────────────────────────────
Request-object construction for the RIT webservices.

Pure functions: they take plain values (plus the login, which RIT uses as the
distribution channel) and return the nested dicts zeep serialises into the
SOAP body.  Nothing here performs I/O; RITClient wires them to the port.

Object identifiers come in two flavours throughout the API:
  • int / str            → the object's RIT id            (identifierRIT)
  • ObjectIdentifier     → the id in the caller's system  (identifierSZ)
    built with encode_object_id() or create_object_id()
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ritws.domain.models import (
    Attachment,
    AttachmentSource,
    AttributeSnapshot,
    IdentifierType,
    ObjectIdentifier,
)
from ritws.services.categories import is_translatable

ObjectId = Union[int, str, ObjectIdentifier]
DateLike = Union[datetime, date, str]

# Language tag for values that are the same in every language.
ALL_LANGUAGES = "all"


# ── Dates & metric ─────────────────────────────────────────────────────────

def format_rit_date(value: Optional[DateLike] = None) -> str:
    """Render a date as RIT expects it: ``YYYY-MM-DD±HH:MM``.

    None means today; naive datetimes and plain dates take the local UTC
    offset; strings are passed through unchanged.
    """
    if isinstance(value, str):
        return value
    if value is None:
        moment = datetime.now().astimezone()
    elif isinstance(value, datetime):
        moment = value if value.tzinfo is not None else value.astimezone()
    else:
        moment = datetime(value.year, value.month, value.day).astimezone()
    offset = moment.strftime("%z")
    return f"{moment:%Y-%m-%d}{offset[:3]}:{offset[3:]}"


def build_metric(user: str, now: Optional[datetime] = None) -> dict:
    """The metric block every RIT request starts with."""
    moment = now or datetime.now().astimezone()
    return {
        "distributionChannel": user,
        "username": user,
        "requestUniqueIdentifier": int(moment.timestamp()),
        "requestDate": format_rit_date(moment),
    }


# ── Identifiers ────────────────────────────────────────────────────────────

def encode_object_id(
    table_id: Union[int, str],
    table_name: Optional[str] = None,
) -> ObjectIdentifier:
    """Identify an object by its row id in the source database.

    Pass ``table_name`` when tourist objects are spread over several tables.
    """
    if table_name:
        return ObjectIdentifier(
            identifier_type=IdentifierType.TABLE_AND_NAME,
            artificial_identifier=table_id,
            database_table=table_name,
        )
    return ObjectIdentifier(
        identifier_type=IdentifierType.TABLE_ID,
        artificial_identifier=table_id,
    )


def create_object_id(unique_string_id: str) -> ObjectIdentifier:
    """Identify an object by a caller-built unique string.

    Useful when objects have no database id: concatenate a few fields,
    hash them or generate a GUID.
    """
    return ObjectIdentifier(
        identifier_type=IdentifierType.CONCATENATION,
        concatenation_of_field=unique_string_id,
    )


def sz_identifier(
    object_id: ObjectIdentifier,
    user: str,
    last_modified: Optional[DateLike] = None,
) -> dict:
    """Render an external identifier with the caller's distribution channel."""
    payload = object_id.to_request()
    payload["distributionChannel"] = {"name": user, "code": user}
    if last_modified is not None:
        payload["lastModified"] = format_rit_date(last_modified)
    return payload


def object_identifier(object_id: ObjectId, user: str) -> dict:
    """``objectIdentifier`` element used by search and language lookups."""
    if isinstance(object_id, ObjectIdentifier):
        return {"identifierSZ": sz_identifier(object_id, user)}
    return {"identifierRIT": object_id}


# ── Attachments ────────────────────────────────────────────────────────────

def create_attachment(
    name: str,
    file_type: str,
    source: str,
    source_type: Union[AttachmentSource, str] = AttachmentSource.URL,
) -> Attachment:
    """Describe a binary document; unknown source types are treated as URLs."""
    try:
        kind = AttachmentSource(source_type)
    except ValueError:
        kind = AttachmentSource.URL

    if kind is AttachmentSource.FTP:
        return Attachment(file_name=name, file_type=file_type, relative_path_to_directory=source)
    if kind is AttachmentSource.BASE64:
        return Attachment(file_name=name, file_type=file_type, encoded=source)
    return Attachment(file_name=name, file_type=file_type, url=source)


def binary_documents(attachments: Iterable[Attachment]) -> dict:
    """Group attachments into the documentURL / documentFile / documentBase64 lists."""
    keys = {
        AttachmentSource.URL: "documentURL",
        AttachmentSource.FTP: "documentFile",
        AttachmentSource.BASE64: "documentBase64",
    }
    grouped: dict[str, list[dict]] = {}
    for attachment in attachments:
        grouped.setdefault(keys[attachment.source], []).append(attachment.to_request())
    return grouped


# ── Tourist objects ────────────────────────────────────────────────────────

def attribute_values(
    code: str,
    values_by_language: Mapping[str, Any],
    attributes: AttributeSnapshot,
) -> list[dict]:
    """``attrVals`` for one attribute.

    Translatable attributes get one entry per language.  The rest get a
    single entry tagged ``all`` carrying the first value given.
    """
    if not values_by_language:
        return []
    if is_translatable(attributes, code):
        return [
            {"value": value, "language": language}
            for language, value in values_by_language.items()
        ]
    first = next(iter(values_by_language.values()))
    return [{"value": first, "language": ALL_LANGUAGES}]


def create_tourist_object(
    object_id: ObjectId,
    last_modified: DateLike,
    categories: Sequence[str],
    attributes: Mapping[str, Mapping[str, Any]],
    attribute_snapshot: AttributeSnapshot,
    user: str,
    attachments: Sequence[Attachment] = (),
) -> dict:
    """Build the ``touristObject`` part of an addModifyObject request.

    Args:
        object_id:          RIT id or an ObjectIdentifier.
        last_modified:      Last modification of the object in the source.
        categories:         Category codes, e.g. ``["C040"]``.
        attributes:         ``{attribute_code: {language: value_or_values}}``.
        attribute_snapshot: Attribute definitions used to decide which
                            attributes are sent per language.
        user:               Login / distribution channel.
        attachments:        Built with create_attachment().
    """
    obj: dict[str, Any] = {}
    if isinstance(object_id, ObjectIdentifier):
        obj["touristObjectIdentifierSZ"] = sz_identifier(object_id, user, last_modified)
    else:
        obj["touristObjectIdentifierRIT"] = {"identifierRIT": object_id}

    obj["categories"] = {"category": [{"code": code} for code in categories]}
    obj["attributes"] = {
        "attribute": [
            {"attrVals": attribute_values(code, values, attribute_snapshot), "code": code}
            for code, values in attributes.items()
        ]
    }
    if attachments:
        obj["binaryDocuments"] = binary_documents(attachments)
    return obj


# ── Search conditions ──────────────────────────────────────────────────────

def all_objects_condition(language: str) -> dict:
    return {"language": language, "allForDistributionChannel": True}


def attributes_condition(attributes: Mapping[str, Any], language: str) -> dict:
    return {
        "language": language,
        "allForDistributionChannel": False,
        "searchAttributeAnd": [
            {"attributeCode": code, "valueToSearch": value}
            for code, value in attributes.items()
        ],
    }


def categories_condition(categories: Union[str, Sequence[str]], language: str) -> dict:
    if not isinstance(categories, str):
        categories = list(categories)
    return {
        "language": language,
        "allForDistributionChannel": False,
        "searchCategoryAnd": {"categoryCode": categories},
    }


def object_id_condition(object_id: ObjectId, user: str, language: str) -> dict:
    return {
        "language": language,
        "allForDistributionChannel": False,
        "objectIdentifier": object_identifier(object_id, user),
    }


def modification_date_condition(
    date_from: DateLike,
    date_to: Optional[DateLike],
    language: str,
) -> dict:
    """Objects modified in ``[date_from, date_to]``; ``date_to`` defaults to today."""
    return {
        "language": language,
        "allForDistributionChannel": False,
        "lastModifiedRange": {
            "dateFrom": format_rit_date(date_from),
            "dateTo": format_rit_date(date_to),
        },
    }
