"""
Persistence Service - CRUD over the single Database record.

The whole Database (users + drives) lives in one key-value slot.
Every operation is one read-modify-write:
1. Read the record
2. Mutate an in-memory copy
3. Write it back in one store call

If the read or write fails, StoreUnavailableError propagates and the
durable record is left exactly as it was.

NOTE: there is no await between the read and the write, so coroutines
on one event loop cannot interleave inside an operation. Separate
processes writing the same store may still lose updates.
"""

import logging
import re
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.errors import (
    DuplicateEmailError, DuplicateRoadmapError, InvalidCredentialsError, StoreUnavailableError
)
from app.db.base import DB_KEY, KeyValueStore
from app.schemas.schemas import (
    Database, Drive, DriveCreate, Identity, MockTestCreate, MockTestResult,
    Roadmap, StudentProfile, UserAuth, UserRecord, UserRole
)

logger = logging.getLogger(__name__)

ADMIN_UID = "admin_user"

SEED_DRIVES = [
    Drive(id="1", company_name="Google", role="Software Engineer Intern",
          description="Join our team...", date="2024-09-15",
          logo_url="https://upload.wikimedia.org/wikipedia/commons/2/2f/Google_2015_logo.svg", apply_url="#"),
    Drive(id="2", company_name="Microsoft", role="Data Analyst",
          description="Analyze large datasets...", date="2024-09-20",
          logo_url="https://upload.wikimedia.org/wikipedia/commons/4/44/Microsoft_logo.svg", apply_url="#"),
    Drive(id="3", company_name="Amazon", role="Cloud Support Associate",
          description="Provide technical support...", date="2024-09-22",
          logo_url="https://upload.wikimedia.org/wikipedia/commons/a/a9/Amazon_logo.svg", apply_url="#"),
]


def normalize_email(email: str) -> str:
    return email.strip().lower()


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def company_logo_url(company_name: str, template: Optional[str] = None) -> str:
    """'Acme Corp' -> https://logo.clearbit.com/acmecorp.com"""
    template = template or get_settings().logo_url_template
    domain = re.sub(r"\s", "", company_name.lower())
    return template.format(domain=domain)


def _drive_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def filter_drives(drives: List[Drive], search: str = "", role: str = "", company: str = "",
                  from_date: Optional[date] = None) -> List[Drive]:
    """
    Narrow a drive list the way the drives page does.

    search matches company, role or description; role and company match
    their own field. All text matching is case-insensitive substring.
    Drives whose date cannot be parsed never pass a from_date filter.
    """
    search, role, company = search.lower(), role.lower(), company.lower()
    matches = []
    for drive in drives:
        if search and not any(search in field.lower() for field in
                              (drive.company_name, drive.role, drive.description)):
            continue
        if role and role not in drive.role.lower():
            continue
        if company and company not in drive.company_name.lower():
            continue
        if from_date is not None:
            drive_date = _drive_date(drive.date)
            if drive_date is None or drive_date < from_date:
                continue
        matches.append(drive)
    return matches


class PersistenceStore:
    """
    Durable CRUD over users, roadmaps, mock tests and drives.

    Usage:
        store = PersistenceStore(kv_store)
        await store.initialize()
        identity = await store.register_user("a@b.com", "pw")
    """

    def __init__(self, kv: KeyValueStore, seed_drives: Optional[List[Drive]] = None,
                 logo_url_template: Optional[str] = None):
        self.kv = kv
        self.seed_drives = SEED_DRIVES if seed_drives is None else seed_drives
        self.logo_url_template = logo_url_template

    # ============================================================
    # RECORD ACCESS
    # ============================================================

    def _load(self) -> Database:
        raw = self.kv.get(DB_KEY)
        if raw is None:
            return Database(drives=[d.model_copy(deep=True) for d in self.seed_drives])
        try:
            return Database.model_validate(raw)
        except ValidationError as e:
            logger.error("Stored database record is malformed: %s", e)
            raise StoreUnavailableError("Stored database record is corrupt") from e

    def _save(self, db: Database) -> None:
        self.kv.set(DB_KEY, db.model_dump(mode="json"))

    @staticmethod
    def _find_by_email(db: Database, email: str):
        for uid, record in db.users.items():
            if record.auth.email == email:
                return uid, record
        return None, None

    async def initialize(self) -> None:
        """Create the record with seed drives. Never overwrites an existing one."""
        seed = Database(drives=list(self.seed_drives))
        if self.kv.set_if_absent(DB_KEY, seed.model_dump(mode="json")):
            logger.info("Initialized database with %d seed drives", len(self.seed_drives))

    # ============================================================
    # USERS
    # ============================================================

    async def register_user(self, email: str, password_secret: str) -> Identity:
        db = self._load()
        email = normalize_email(email)
        uid, _ = self._find_by_email(db, email)
        if uid is not None:
            raise DuplicateEmailError()

        uid = new_id("user")
        db.users[uid] = UserRecord(
            auth=UserAuth(email=email, password_secret=password_secret, role=UserRole.student)
        )
        self._save(db)
        logger.info("Registered user %s", uid)
        return Identity(uid=uid, email=email, role=UserRole.student)

    async def authenticate(self, email: str, password_secret: str) -> Identity:
        db = self._load()
        email = normalize_email(email)
        uid, record = self._find_by_email(db, email)
        if record is None or record.auth.password_secret != password_secret:
            raise InvalidCredentialsError()
        return Identity(uid=uid, email=email, role=record.auth.role)

    async def load_user_document(self, uid: str) -> Optional[UserRecord]:
        """Full per-user record, or None for the admin and unknown ids."""
        if uid == ADMIN_UID:
            return None
        return self._load().users.get(uid)

    async def count_students(self) -> int:
        db = self._load()
        return sum(1 for r in db.users.values() if r.auth.role == UserRole.student)

    # ============================================================
    # PROFILE / ROADMAPS
    # Unknown uids are silently ignored.
    # ============================================================

    async def save_profile_and_roadmaps(self, uid: str, profile: StudentProfile, roadmaps: List[Roadmap]) -> None:
        db = self._load()
        record = db.users.get(uid)
        if record is None:
            logger.debug("save_profile_and_roadmaps: unknown uid %s", uid)
            return
        record.profile = profile
        record.roadmaps = list(roadmaps)
        self._save(db)

    async def save_roadmaps(self, uid: str, roadmaps: List[Roadmap]) -> None:
        db = self._load()
        record = db.users.get(uid)
        if record is None:
            logger.debug("save_roadmaps: unknown uid %s", uid)
            return
        record.roadmaps = list(roadmaps)
        self._save(db)

    async def add_roadmap(self, uid: str, roadmap: Roadmap) -> None:
        """Prepend a roadmap. Roles are unique per user, compared case-insensitively."""
        db = self._load()
        record = db.users.get(uid)
        if record is None:
            logger.debug("add_roadmap: unknown uid %s", uid)
            return
        wanted = roadmap.role.lower()
        if any(r.role.lower() == wanted for r in record.roadmaps):
            raise DuplicateRoadmapError(roadmap.role)
        record.roadmaps.insert(0, roadmap)
        self._save(db)

    # ============================================================
    # MOCK TESTS
    # ============================================================

    async def append_mock_test_result(self, uid: str, result: MockTestCreate) -> MockTestResult:
        """
        Store a finished mock test, newest first.

        The generated record is returned even when uid is unknown,
        in which case nothing is persisted.
        """
        new_result = MockTestResult(
            id=new_id("test"),
            date=datetime.now(timezone.utc).isoformat(),
            **result.model_dump()
        )
        db = self._load()
        record = db.users.get(uid)
        if record is None:
            logger.debug("append_mock_test_result: unknown uid %s", uid)
            return new_result
        record.mock_tests.insert(0, new_result)
        self._save(db)
        return new_result

    # ============================================================
    # DRIVES
    # ============================================================

    async def list_drives(self) -> List[Drive]:
        return self._load().drives

    async def get_drive(self, drive_id: str) -> Optional[Drive]:
        for drive in self._load().drives:
            if drive.id == drive_id:
                return drive
        return None

    async def add_drive(self, data: DriveCreate) -> Drive:
        db = self._load()
        drive = Drive(
            id=new_id("drive"),
            logo_url=company_logo_url(data.company_name, self.logo_url_template),
            **data.model_dump()
        )
        db.drives.insert(0, drive)
        self._save(db)
        logger.info("Added drive %s (%s)", drive.id, drive.company_name)
        return drive

    async def remove_drive(self, drive_id: str) -> None:
        db = self._load()
        remaining = [d for d in db.drives if d.id != drive_id]
        if len(remaining) == len(db.drives):
            return
        db.drives = remaining
        self._save(db)
        logger.info("Removed drive %s", drive_id)
