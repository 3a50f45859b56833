"""
Family member access that prefers the remote API and falls back to local storage.

Every backend call is wrapped in a ``Result``. A call walks the backend chain
once, in order, and stops at the first success: the remote API gets one
attempt, local storage gets one attempt, nothing is retried and a remote
write that failed halfway is not rolled back. Only a failure of the last
backend in the chain reaches the caller.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from health_score import health_status

from .config import DEFAULT_USER_ID, MEMBERS_KEY

logger = logging.getLogger(__name__)


@dataclass
class Result:
    source: str
    ok: bool
    value: Any = None
    error: Optional[BaseException] = None

    def unwrap(self):
        if not self.ok:
            raise self.error
        return self.value


def attempt(backend, method: str, *args) -> Result:
    try:
        return Result(backend.source, True, getattr(backend, method)(*args))
    except Exception as e:
        return Result(backend.source, False, error=e)


class FallbackService:
    def __init__(self, remote, local, kv, key: str = MEMBERS_KEY, user_id: str = DEFAULT_USER_ID):
        self.remote = remote
        self.local = local
        self.kv = kv
        self.key = key
        self.user_id = user_id
        self.use_remote = False
        self.members = self._load_mirror()
        self.last_attempts: List[Result] = []

    @property
    def data_source(self) -> str:
        return "api" if self.use_remote else "local"

    # ---------------------------
    # Mirror
    # ---------------------------
    def _load_mirror(self):
        saved = self.kv.get(self.key)
        try:
            parsed = json.loads(saved) if saved else []
        except ValueError:
            parsed = []
        return parsed if isinstance(parsed, list) else []

    def _persist(self):
        self.kv.set(self.key, json.dumps(self.members))

    # ---------------------------
    # Chain
    # ---------------------------
    def _chain(self, include_remote: bool):
        return [self.remote, self.local] if include_remote else [self.local]

    def _cascade(self, include_remote: bool, method: str, *args) -> Result:
        self.last_attempts = []
        result = None
        for backend in self._chain(include_remote):
            result = attempt(backend, method, *args)
            self.last_attempts.append(result)
            if result.ok:
                return result
            logger.warning("%s %s failed: %s", backend.source, method, result.error)
        return result

    def probe(self) -> bool:
        result = attempt(self.remote, "ping")
        if not result.ok:
            logger.info("Remote API not available, using local storage")
        return result.ok

    # ---------------------------
    # Family members
    # ---------------------------
    def get_all(self, user_id=None):
        self.use_remote = self.probe()
        result = self._cascade(self.use_remote, "list_family_members", user_id or self.user_id)
        members = list(result.unwrap())
        self.members = members
        self._persist()
        logger.info("Loaded %d family members from %s", len(members), result.source)
        return members

    def create(self, data, user_id=None):
        result = self._cascade(self.use_remote, "create_family_member", data, user_id or self.user_id)
        member = result.unwrap()
        if isinstance(member, dict):
            self.members.insert(0, member)
            self._persist()
        logger.info("Created family member via %s", result.source)
        return member

    def update(self, member_id, fields):
        result = self._cascade(self.use_remote, "update_family_member", member_id, fields)
        updated = result.unwrap()
        if updated is None:
            logger.warning("No family member %s to update in %s", member_id, result.source)
        for i, member in enumerate(self.members):
            if member.get("id") != member_id:
                continue
            changes = dict(fields)
            if isinstance(updated, dict):
                changes.update(updated)
            merged = {**member, **changes}
            if fields.get("healthScore") is not None:
                merged["status"] = health_status(fields["healthScore"])
            self.members[i] = merged
            self._persist()
            break
        return updated

    def delete(self, member_id):
        result = self._cascade(self.use_remote, "delete_family_member", member_id)
        result.unwrap()
        self.members = [m for m in self.members if m.get("id") != member_id]
        self._persist()
