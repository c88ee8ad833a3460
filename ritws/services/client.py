"""
services/client.py
──────────────────────────────────────────────────────────────────────────────
RITClient: one method per remote RIT operation.

Each method builds its request with services/payloads.py, prepends the
metric block and hands it to the injected WebservicePort.  Responses are
returned as the plain dicts the port produces; only getMetadataOfRIT is
decoded further, into a MetadataSnapshot.

Webservices and operations used:

  CollectTouristObjects       searchTouristObjects
  CollectTouristObjectsCache  searchTouristObjectsInCache
  GiveTouristObjects          addModifyObject, addModifyObjects,
                              delObject, getReport
  MetadataOfRIT               getMetadataOfRIT
  GetTouristObjectEvents      getEvents
  GetTouristObjectLanguages   getLanguages

Every method that returns language-scoped data takes ``language``
explicitly (e.g. "pl-PL", "en-GB"); see MetadataCatalog.get_languages().
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from ritws.config.settings import Settings
from ritws.domain.models import (
    Attachment,
    AttributeSnapshot,
    MetadataSnapshot,
    ObjectIdentifier,
)
from ritws.ports.file_port import FileFetcherPort
from ritws.ports.webservice_port import WebservicePort
from ritws.services import payloads
from ritws.services.payloads import DateLike, ObjectId

logger = logging.getLogger(__name__)

COLLECT_SERVICE = "CollectTouristObjects"
COLLECT_CACHE_SERVICE = "CollectTouristObjectsCache"
GIVE_SERVICE = "GiveTouristObjects"
METADATA_SERVICE = "MetadataOfRIT"
EVENTS_SERVICE = "GetTouristObjectEvents"
LANGUAGES_SERVICE = "GetTouristObjectLanguages"


class RITClient:
    """Request shaping + invocation for the RIT webservices.

    Inject via services/container.py — do not instantiate directly in
    application code.

    Args:
        webservice: Any object satisfying WebservicePort.
        files:      Any object satisfying FileFetcherPort.
        settings:   Shared application settings (login is read from here).
        clock:      Returns "now"; injectable for deterministic tests.
    """

    def __init__(
        self,
        webservice: WebservicePort,
        files: FileFetcherPort,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._ws = webservice
        self._files = files
        self._user = settings.user
        self._clock = clock or (lambda: datetime.now().astimezone())

    @property
    def user(self) -> str:
        return self._user

    @property
    def last_request(self) -> Optional[str]:
        return self._ws.last_request

    @property
    def last_response(self) -> Optional[str]:
        return self._ws.last_response

    # ── Searching ──────────────────────────────────────────────────────────

    def get_objects(self, where: Mapping[str, Any], remote_cache: bool = False) -> Any:
        """Search tourist objects with an arbitrary ``searchCondition``.

        Args:
            where:        Search condition, e.g. built by payloads.*_condition.
            remote_cache: Query the server-side cache instead of live data
                          (much faster, possibly stale).
        """
        request = {"metric": self._metric(), "searchCondition": dict(where)}
        if remote_cache:
            return self._ws.invoke(COLLECT_CACHE_SERVICE, "searchTouristObjectsInCache", request)
        return self._ws.invoke(COLLECT_SERVICE, "searchTouristObjects", request)

    def get_all_objects(self, language: str, remote_cache: bool = False) -> Any:
        """Every object of this distribution channel, in ``language``."""
        return self.get_objects(payloads.all_objects_condition(language), remote_cache)

    def get_objects_by_attributes(self, attributes: Mapping[str, Any], language: str) -> Any:
        """Objects matching all ``{attribute_code: value}`` pairs."""
        return self.get_objects(payloads.attributes_condition(attributes, language))

    def get_objects_by_categories(
        self,
        categories: Union[str, Sequence[str]],
        language: str,
        remote_cache: bool = False,
    ) -> Any:
        """Objects associated with one category code or several."""
        return self.get_objects(payloads.categories_condition(categories, language), remote_cache)

    def get_object_by_id(self, object_id: ObjectId, language: str) -> Any:
        """A single object, by RIT id or by external identifier."""
        return self.get_objects(payloads.object_id_condition(object_id, self._user, language))

    def get_objects_by_modification_date(
        self,
        date_from: DateLike,
        language: str,
        date_to: Optional[DateLike] = None,
        remote_cache: bool = False,
    ) -> Any:
        """Objects modified between ``date_from`` and ``date_to`` (default: today)."""
        if date_to is None:
            date_to = self._clock()
        condition = payloads.modification_date_condition(date_from, date_to, language)
        return self.get_objects(condition, remote_cache)

    # ── Publishing ─────────────────────────────────────────────────────────

    def create_tourist_object(
        self,
        object_id: ObjectId,
        last_modified: DateLike,
        categories: Sequence[str],
        attributes: Mapping[str, Mapping[str, Any]],
        attribute_snapshot: AttributeSnapshot,
        attachments: Sequence[Attachment] = (),
    ) -> dict:
        """Build a ``touristObject`` for add_object() / add_objects().

        ``attribute_snapshot`` is usually ``get_metadata(lang).attributes``;
        it decides which attribute values are sent per language.
        """
        return payloads.create_tourist_object(
            object_id,
            last_modified,
            categories,
            attributes,
            attribute_snapshot,
            self._user,
            attachments,
        )

    def add_object(self, tourist_object: Mapping[str, Any]) -> Any:
        """Send a single new or modified object.

        Raises:
            ValueError: If given a list; use add_objects() for batches.
        """
        if isinstance(tourist_object, (list, tuple)):
            raise ValueError(
                "expected a single object, got a sequence; "
                "use add_objects() to add multiple objects at once"
            )
        request = {"metric": self._metric(), "touristObject": tourist_object}
        return self._ws.invoke(GIVE_SERVICE, "addModifyObject", request)

    def add_objects(self, tourist_objects: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> Any:
        """Send a batch of objects; the response carries a transaction id for get_report()."""
        if isinstance(tourist_objects, Mapping):
            tourist_objects = [tourist_objects]
        request = {"metric": self._metric(), "touristObject": list(tourist_objects)}
        return self._ws.invoke(GIVE_SERVICE, "addModifyObjects", request)

    def delete_object(self, object_id: ObjectId) -> Any:
        request: dict[str, Any] = {"metric": self._metric()}
        if isinstance(object_id, ObjectIdentifier):
            request["identifierSZ"] = payloads.sz_identifier(
                object_id, self._user, last_modified=self._clock()
            )
        else:
            request["identifierRIT"] = {"identifierRIT": object_id}
        return self._ws.invoke(GIVE_SERVICE, "delObject", request)

    def get_report(self, transaction_id: Union[int, str]) -> Any:
        """Import reports for a transaction started by add_objects()."""
        request = {"metric": self._metric(), "transactionIdentifier": transaction_id}
        return self._ws.invoke(GIVE_SERVICE, "getReport", request)

    # ── Metadata ───────────────────────────────────────────────────────────

    def get_metadata(self, language: str) -> MetadataSnapshot:
        """Fetch and decode all metadata published by MetadataOfRIT.

        The service leaves out some large datasets (e.g. the list of
        localities); those live in public registers such as TERYT.

        Raises:
            WebserviceError: On SOAP failure.
            DecodingError:   If the response cannot be decoded.
        """
        request = {"metric": self._metric(), "language": language}
        raw = self._ws.invoke(METADATA_SERVICE, "getMetadataOfRIT", request)
        snapshot = MetadataSnapshot.from_response(raw, language)
        logger.info(
            "Metadata decoded | language=%s categories=%d attributes=%d dictionaries=%d",
            language,
            len(snapshot.categories),
            len(snapshot.attributes),
            len(snapshot.dictionaries),
        )
        return snapshot

    def get_metadata_last_modification_date(self, language: str) -> Any:
        return self.get_metadata(language).last_modification_date

    # ── Events, languages, files ───────────────────────────────────────────

    def get_events(self, date_from: DateLike, date_to: DateLike) -> Any:
        request = {
            "metric": self._metric(),
            "criteria": {
                "dateFrom": payloads.format_rit_date(date_from),
                "dateTo": payloads.format_rit_date(date_to),
            },
        }
        return self._ws.invoke(EVENTS_SERVICE, "getEvents", request)

    def get_object_languages(self, object_id: ObjectId) -> Any:
        """Languages in which an object's data is available."""
        identifier: dict[str, Any]
        if isinstance(object_id, ObjectIdentifier):
            identifier = {
                "identifierSZ": payloads.sz_identifier(
                    object_id, self._user, last_modified=self._clock()
                )
            }
        else:
            identifier = {"identifierRIT": object_id}
        request = {"metric": self._metric(), "objectIdentifier": identifier}
        return self._ws.invoke(LANGUAGES_SERVICE, "getLanguages", request)

    def get_file(self, url: str) -> bytes:
        """Download a file referenced by a response (e.g. an attachment URL)."""
        return self._files.fetch(url)

    # ── Private helpers ────────────────────────────────────────────────────

    def _metric(self) -> dict:
        return payloads.build_metric(self._user, now=self._clock())
