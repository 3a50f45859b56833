import json
import logging
import random
import string
import time
from datetime import datetime, timezone

from health_score import health_status

from .config import MEMBERS_KEY

logger = logging.getLogger(__name__)

DEFAULT_HEALTH_SCORE = 80

DEMO_MEMBERS = [
    {
        "id": "divya-001",
        "name": "Divya",
        "age": 25,
        "relationship": "Self",
        "healthScore": 85,
        "lastCheckup": "2024-08-15",
        "nextAppointment": "2024-12-15",
        "medications": 2,
        "conditions": ["Hypertension"],
        "status": "good",
    },
    {
        "id": "tushar-002",
        "name": "Tushar",
        "age": 28,
        "relationship": "Brother",
        "healthScore": 92,
        "lastCheckup": "2024-09-10",
        "nextAppointment": "2025-03-10",
        "medications": 0,
        "conditions": [],
        "status": "excellent",
    },
]


class DuplicateMemberError(ValueError):
    pass


def _identity(member) -> tuple:
    return (str(member.get("name", "")).lower(), str(member.get("relationship", "")).lower())


def new_member_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"local-{int(time.time() * 1000)}-{suffix}"


class LocalStore:
    """
    Family members kept in memory and mirrored to a key/value slot.

    The slot holds the whole list as a JSON array. (name, relationship) pairs are
    unique, compared case-insensitively.
    """

    source = "local"

    def __init__(self, kv, key: str = MEMBERS_KEY):
        self.kv = kv
        self.key = key
        self._members = []
        self._initialized = False

    # ---------------------------
    # Persistence
    # ---------------------------
    def _load(self):
        saved = self.kv.get(self.key)
        if not saved:
            return None
        try:
            parsed = json.loads(saved)
        except ValueError as e:
            logger.warning("Stored family members are not valid JSON, reseeding: %s", e)
            return None
        if isinstance(parsed, list) and parsed and all(isinstance(m, dict) for m in parsed):
            return parsed
        return None

    def _save(self):
        self.kv.set(self.key, json.dumps(self._members))

    def _ensure_initialized(self):
        if self._initialized:
            return
        loaded = self._load()
        if loaded is None:
            self._members = [dict(m, conditions=list(m["conditions"])) for m in DEMO_MEMBERS]
            self._save()
        else:
            self._members = loaded
            logger.info("Loaded %d family members from local storage", len(loaded))
        self._remove_duplicates()
        self._initialized = True

    def _remove_duplicates(self):
        seen = set()
        unique = []
        for member in self._members:
            key = _identity(member)
            if key in seen:
                logger.info("Removed duplicate member: %s (%s)", member.get("name"), member.get("relationship"))
                continue
            seen.add(key)
            unique.append(member)
        if len(unique) != len(self._members):
            self._members = unique
            self._save()

    # ---------------------------
    # CRUD
    # ---------------------------
    def list_family_members(self, user_id=None):
        self._ensure_initialized()
        return [dict(m) for m in self._members]

    def create_family_member(self, data, user_id=None):
        self._ensure_initialized()
        if not data.get("name") or not data.get("relationship"):
            raise ValueError("name and relationship are required")

        key = _identity(data)
        if any(_identity(m) == key for m in self._members):
            raise DuplicateMemberError(
                f'A family member with name "{data["name"]}" and relationship '
                f'"{data["relationship"]}" already exists.'
            )

        score = data.get("healthScore")
        if score is None:
            score = DEFAULT_HEALTH_SCORE
        member = dict(data)
        member.update(
            id=new_member_id(),
            age=data.get("age") or 0,
            healthScore=score,
            lastCheckup=data.get("lastCheckup") or "",
            nextAppointment=data.get("nextAppointment") or "",
            medications=data.get("medications") or 0,
            conditions=list(data.get("conditions") or []),
            status=health_status(score),
            createdAt=datetime.now(timezone.utc).isoformat(),
        )
        self._members.insert(0, member)
        self._save()
        logger.info("Created family member %s (%s) locally", member["name"], member["id"])
        return dict(member)

    def update_family_member(self, member_id, fields):
        """Merge ``fields`` into the member; returns None when the id is unknown."""
        self._ensure_initialized()
        for i, member in enumerate(self._members):
            if member.get("id") != member_id:
                continue
            updated = {**member, **{k: v for k, v in fields.items() if k != "id"}}
            if fields.get("healthScore") is not None:
                updated["status"] = health_status(fields["healthScore"])
            self._members[i] = updated
            self._save()
            return dict(updated)
        logger.info("Update skipped, no local family member %s", member_id)
        return None

    def delete_family_member(self, member_id):
        self._ensure_initialized()
        self._members = [m for m in self._members if m.get("id") != member_id]
        self._save()

    def info(self):
        return {
            "type": "local",
            "membersCount": len(self._members),
            "isInitialized": self._initialized,
        }
