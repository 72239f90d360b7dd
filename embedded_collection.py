"""Ordered, identity-keyed arrays embedded in a parent document.

Profiles own ``experience`` and ``education`` arrays and posts own ``likes``
and ``comments``.  All four follow the same rules:

* new entries are prepended, so the array reads most-recent-first;
* entries are found by their identity (a generated ``_id`` token, or the
  liking user's id for likes);
* removing an unknown identity is an error and never touches the array;
* the whole parent is written back in one ``replace_one`` guarded by its
  ``version`` counter, so a concurrent writer cannot be silently overwritten.

The functions here are pure over plain dicts except ``persist`` and
``mutate`` which talk to MongoDB.
"""

import logging
import os
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

from dotenv import load_dotenv
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from errors import (
    AlreadyLikedError,
    ConcurrentUpdateError,
    DevConnectorError,
    NotFoundError,
    NotLikedError,
    PersistenceError,
)
from utils import new_identity

logger = logging.getLogger(__name__)

Document = dict[str, Any]


@dataclass(frozen=True)
class EmbeddedCollection:
    field: str
    missing_error: Callable[[], DevConnectorError]
    key: str = "_id"
    # Set for set-like collections: inserting an identity twice raises it.
    duplicate_error: Callable[[], DevConnectorError] | None = None

    @property
    def generates_identity(self) -> bool:
        return self.key == "_id"

    def entries(self, parent: Document) -> list[Document]:
        return list(parent.get(self.field) or [])

    def _index_of(self, parent: Document, entry_id: Any) -> int:
        wanted = str(entry_id)
        for index, entry in enumerate(self.entries(parent)):
            if str(entry.get(self.key)) == wanted:
                return index
        return -1

    def find(self, parent: Document, entry_id: Any) -> Document | None:
        index = self._index_of(parent, entry_id)
        if index < 0:
            return None
        return self.entries(parent)[index]

    def insert(self, parent: Document, payload: Document) -> Document:
        entry = dict(payload)
        if self.generates_identity:
            entry["_id"] = new_identity()
        elif self.duplicate_error is not None and self.find(parent, entry.get(self.key)) is not None:
            raise self.duplicate_error()
        return {**parent, self.field: [entry, *self.entries(parent)]}

    def remove(self, parent: Document, entry_id: Any) -> Document:
        index = self._index_of(parent, entry_id)
        if index < 0:
            raise self.missing_error()
        entries = self.entries(parent)
        del entries[index]
        return {**parent, self.field: entries}


LIKES = EmbeddedCollection(
    field="likes",
    key="user",
    missing_error=NotLikedError,
    duplicate_error=AlreadyLikedError,
)
COMMENTS = EmbeddedCollection(
    field="comments",
    missing_error=partial(NotFoundError, "That comment does not exist", field="nocomment"),
)
EXPERIENCE = EmbeddedCollection(
    field="experience",
    missing_error=partial(NotFoundError, "Experience not found", field="experience"),
)
EDUCATION = EmbeddedCollection(
    field="education",
    missing_error=partial(NotFoundError, "Education not found", field="education"),
)


def _conflict_retries() -> int:
    load_dotenv()
    return max(1, int(os.getenv("CONFLICT_RETRIES", "3")))


def persist(collection: Collection, parent: Document) -> Document:
    version = parent.get("version")
    if version is None:
        query = {"_id": parent["_id"], "version": {"$exists": False}}
    else:
        query = {"_id": parent["_id"], "version": version}
    updated = {**parent, "version": (version or 0) + 1}

    try:
        result = collection.replace_one(query, updated)
    except PyMongoError as exc:
        logger.exception("Saving %s document %s failed", collection.name, parent["_id"])
        raise PersistenceError() from exc

    if result.matched_count == 0:
        raise ConcurrentUpdateError()
    return updated


def load(collection: Collection, query: dict[str, Any]) -> Document | None:
    try:
        return collection.find_one(query)
    except PyMongoError as exc:
        logger.exception("Loading from %s failed query=%s", collection.name, query)
        raise PersistenceError() from exc


def mutate(
    collection: Collection,
    query: dict[str, Any],
    change: Callable[[Document], Document],
    not_found: Callable[[], DevConnectorError],
) -> Document:
    """Load the parent matching ``query``, apply ``change`` and save it.

    ``change`` must be pure: it receives the stored document and returns the
    new one, raising a domain error to abort without writing anything.  When
    another request saved the same document in between, the whole cycle is
    repeated up to ``CONFLICT_RETRIES`` times before ``ConcurrentUpdateError``
    is raised.
    """
    attempts = _conflict_retries()
    for attempt in range(1, attempts + 1):
        parent = load(collection, query)
        if parent is None:
            raise not_found()
        try:
            return persist(collection, change(parent))
        except ConcurrentUpdateError:
            logger.warning(
                "Version conflict on %s document %s (attempt %d/%d)",
                collection.name,
                parent["_id"],
                attempt,
                attempts,
            )
            if attempt == attempts:
                raise
    raise ConcurrentUpdateError()
