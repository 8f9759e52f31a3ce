from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path

from ..config import DEFAULT_APP_CONFIG
from ..errors import ProfileNotFound, StoreUnavailable
from .models import VendorProfile

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    Vendor profile documents keyed by ``vendor_id``.

    Reads hand out deep copies. Writes for one vendor are serialised by a
    per-vendor lock so a read-modify-write through :meth:`update` is atomic,
    and each write is persisted (when a path is configured) before it
    becomes visible; a failed persist leaves the previous document in place.
    """

    def __init__(self, path: Path | None = None):
        self._path = path
        self._docs: dict[str, VendorProfile] = {}
        self._vendor_locks: dict[str, threading.Lock] = {}
        self._revision = 0
        self._guard = threading.Lock()
        if path is not None and path.exists():
            self._load()

    # ── Queries ──────────────────────────────────────────────────────────

    def find_one(self, vendor_id: str) -> VendorProfile | None:
        with self._guard:
            doc = self._docs.get(vendor_id)
        return doc.model_copy(deep=True) if doc is not None else None

    def find_many(
        self, predicate: Callable[[VendorProfile], bool] | None = None,
    ) -> list[VendorProfile]:
        """Return matching profiles in insertion order."""
        with self._guard:
            docs = list(self._docs.values())
        if predicate is not None:
            docs = [d for d in docs if predicate(d)]
        return [d.model_copy(deep=True) for d in docs]

    @property
    def revision(self) -> int:
        """Counter bumped on every successful write."""
        with self._guard:
            return self._revision

    def __len__(self) -> int:
        with self._guard:
            return len(self._docs)

    # ── Writes ───────────────────────────────────────────────────────────

    def save(self, profile: VendorProfile) -> VendorProfile:
        with self._lock_for(profile.vendor_id):
            return self._write(profile)

    def upsert(self, vendor_id: str, profile: VendorProfile) -> VendorProfile:
        with self._lock_for(vendor_id):
            return self._write(profile.model_copy(update={"vendor_id": vendor_id}))

    def get_or_insert(
        self, vendor_id: str, factory: Callable[[], VendorProfile],
    ) -> VendorProfile:
        """Return the stored profile, creating it from ``factory`` if absent."""
        with self._lock_for(vendor_id):
            existing = self.find_one(vendor_id)
            if existing is not None:
                return existing
            logger.info("Creating profile for vendor %s", vendor_id)
            return self._write(factory())

    def update(
        self, vendor_id: str, mutate: Callable[[VendorProfile], object],
    ) -> VendorProfile:
        """Apply ``mutate`` to a copy of the profile and persist it as one unit."""
        with self._lock_for(vendor_id):
            working = self.find_one(vendor_id)
            if working is None:
                raise ProfileNotFound(f"No profile for vendor {vendor_id}")
            mutate(working)
            return self._write(working)

    def clear(self) -> None:
        with self._guard:
            self._docs.clear()
            self._revision += 1

    # ── Internals ────────────────────────────────────────────────────────

    def _lock_for(self, vendor_id: str) -> threading.Lock:
        with self._guard:
            return self._vendor_locks.setdefault(vendor_id, threading.Lock())

    def _write(self, profile: VendorProfile) -> VendorProfile:
        doc = profile.model_copy(deep=True)
        doc.touch()
        with self._guard:
            previous = self._docs.get(doc.vendor_id)
            self._docs[doc.vendor_id] = doc
            try:
                self._persist()
            except OSError as exc:
                if previous is None:
                    del self._docs[doc.vendor_id]
                else:
                    self._docs[doc.vendor_id] = previous
                logger.warning(
                    "Persisting profile for vendor %s failed, write rolled back",
                    doc.vendor_id,
                    exc_info=True,
                )
                raise StoreUnavailable("Profile store write failed") from exc
            self._revision += 1
        return doc.model_copy(deep=True)

    def _persist(self) -> None:
        if self._path is None:
            return
        payload = {"profiles": [d.model_dump(mode="json") for d in self._docs.values()]}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh)
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self) -> None:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            # ValidationError is a ValueError
            profiles = [VendorProfile.model_validate(item) for item in raw.get("profiles", [])]
        except (OSError, ValueError, AttributeError) as exc:
            raise StoreUnavailable(f"Cannot read profile store at {self._path}") from exc
        for profile in profiles:
            self._docs[profile.vendor_id] = profile
        logger.info("Loaded %d vendor profiles from %s", len(self._docs), self._path)


_store: ProfileStore | None = None


def get_store() -> ProfileStore:
    """Return the process-wide profile store, opening it on first call."""
    global _store
    if _store is None:
        _store = ProfileStore(DEFAULT_APP_CONFIG.store_path)
    return _store
