"""List and describe the models available to the configured API key.

``Model.retrieve`` / ``Model.list`` map to ``GET models/{id}`` and
``GET models``. Model identifiers are plain strings: the set of valid ids is
whatever the API reports at runtime, which :class:`ModelCatalog` fetches and
caches. Unknown ids are never rejected client-side; the API decides.
"""

from __future__ import annotations

import threading
from typing import Iterable, List, Optional, Tuple

from pydantic import Field

from .base.credentials import Credentials
from .base.dto import ApiModel, DeletedObject, ListPage
from .base.http import ApiClient, decode_response

ModelID = str


class ModelPermission(ApiModel):
    """Legacy per-model permission entry (absent from current API responses)."""

    id: str = ""
    object: str = "model_permission"
    created: int = 0
    allow_create_engine: bool = False
    allow_sampling: bool = False
    allow_logprobs: bool = False
    allow_search_indices: bool = False
    allow_view: bool = False
    allow_fine_tuning: bool = False
    organization: str = ""
    group: Optional[str] = None
    is_blocking: bool = False


class Model(ApiModel):
    """A model the API can serve."""

    id: ModelID
    object: str = "model"
    created: int = 0
    owned_by: str = ""
    permission: List[ModelPermission] = Field(default_factory=list)
    root: Optional[str] = None
    parent: Optional[str] = None

    @classmethod
    def retrieve(cls, model_id: ModelID, credentials: Optional[Credentials] = None) -> "Model":
        payload = ApiClient(credentials, resource="models").get(f"models/{model_id}")
        return decode_response(cls, payload)

    @classmethod
    async def aretrieve(cls, model_id: ModelID, credentials: Optional[Credentials] = None) -> "Model":
        payload = await ApiClient(credentials, resource="models").aget(f"models/{model_id}")
        return decode_response(cls, payload)

    @classmethod
    def list(cls, credentials: Optional[Credentials] = None) -> List["Model"]:
        payload = ApiClient(credentials, resource="models").get("models")
        return decode_response(ListPage[Model], payload).data

    @classmethod
    async def alist(cls, credentials: Optional[Credentials] = None) -> List["Model"]:
        payload = await ApiClient(credentials, resource="models").aget("models")
        return decode_response(ListPage[Model], payload).data

    @classmethod
    def delete(cls, model_id: ModelID, credentials: Optional[Credentials] = None) -> DeletedObject:
        """Delete a fine-tuned model owned by the caller's organization."""
        payload = ApiClient(credentials, resource="models").delete(f"models/{model_id}")
        return decode_response(DeletedObject, payload)

    @classmethod
    async def adelete(cls, model_id: ModelID, credentials: Optional[Credentials] = None) -> DeletedObject:
        payload = await ApiClient(credentials, resource="models").adelete(f"models/{model_id}")
        return decode_response(DeletedObject, payload)


def is_catalog_id(model_id: str) -> bool:
    """Return True for ids kept in the catalog (no fine-tune ``:`` suffix, not deprecated)."""
    return ":" not in model_id and "deprecated" not in model_id


class ModelCatalog:
    """Runtime set of known model ids.

    The catalog is filled from ``GET models`` on first use (or explicitly via
    :meth:`refresh`) and cached afterwards. Fine-tuned ids (containing ``:``)
    and deprecated ids are left out. Thread-safe.
    """

    def __init__(self, credentials: Optional[Credentials] = None) -> None:
        self._credentials = credentials
        self._ids: Optional[Tuple[str, ...]] = None
        self._lock = threading.RLock()

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> "ModelCatalog":
        """Build an offline catalog from a known list of ids."""
        catalog = cls()
        catalog._ids = tuple(sorted({i for i in ids if is_catalog_id(i)}))
        return catalog

    def refresh(self) -> Tuple[str, ...]:
        models = Model.list(self._credentials)
        ids = tuple(sorted({m.id for m in models if is_catalog_id(m.id)}))
        with self._lock:
            self._ids = ids
        return ids

    async def arefresh(self) -> Tuple[str, ...]:
        models = await Model.alist(self._credentials)
        ids = tuple(sorted({m.id for m in models if is_catalog_id(m.id)}))
        with self._lock:
            self._ids = ids
        return ids

    def ids(self) -> Tuple[str, ...]:
        with self._lock:
            if self._ids is None:
                return self.refresh()
            return self._ids

    def contains(self, model_id: str) -> bool:
        return model_id in self.ids()

    __contains__ = contains

    def resolve(self, model_id: str) -> ModelID:
        """Return ``model_id`` if the catalog knows it.

        Raises:
            KeyError: Listing the known ids when ``model_id`` is unknown.
        """
        known = self.ids()
        if model_id not in known:
            raise KeyError(f"unknown model {model_id!r}; known models: {', '.join(known)}")
        return model_id

    def __len__(self) -> int:
        return len(self.ids())

    def __iter__(self):
        return iter(self.ids())


__all__ = ["ModelID", "Model", "ModelPermission", "ModelCatalog", "is_catalog_id"]
