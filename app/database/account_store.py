import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.errors import UniquenessConflict
from app.features.auth.models.user_model import AuthProvider, User, fold
from app.features.auth.schemas.auth_schema import UserCreate
from app.features.content.models.content_model import ContentItem
from app.features.content.schemas.content_schema import ContentCreate, ContentPatch

logger = logging.getLogger(__name__)


class AccountStore:
    """
    Users and their saved content.

    One instance is built at startup and handed to every service. `lock`
    serialises check-then-write sequences; the unique indexes on the tables
    catch anything that slips past it.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self.lock = threading.RLock()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        # the in-memory engine shares one connection, so reads take the lock too
        with self.lock:
            db = self._session_factory()
            try:
                yield db
            finally:
                db.close()

    # users

    def get_user(self, user_id: int) -> Optional[User]:
        with self._session() as db:
            return db.get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as db:
            return db.query(User).filter(User.username_key == fold(username)).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._session() as db:
            return db.query(User).filter(User.email_key == fold(email)).first()

    def get_user_by_subdomain(self, subdomain: str) -> Optional[User]:
        with self._session() as db:
            return db.query(User).filter(User.subdomain_key == fold(subdomain)).first()

    def get_user_by_provider(self, provider: AuthProvider, provider_id: str) -> Optional[User]:
        with self._session() as db:
            return (
                db.query(User)
                .filter(User.auth_provider == provider, User.provider_id == provider_id)
                .first()
            )

    def get_all_users(self) -> List[User]:
        with self._session() as db:
            return db.query(User).order_by(User.id).all()

    def subdomain_exists(self, subdomain: str) -> bool:
        return self.get_user_by_subdomain(subdomain) is not None

    def create_user(self, payload: UserCreate) -> User:
        with self._session() as db:
            user = User(
                **payload.model_dump(),
                is_verified=False,
                username_key=fold(payload.username),
                email_key=fold(payload.email),
                subdomain_key=fold(payload.subdomain),
            )
            db.add(user)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                logger.warning("User insert rejected by unique constraint: %s", exc.orig)
                raise UniquenessConflict() from exc
            db.refresh(user)
            return user

    # content

    def get_content_item(self, item_id: int) -> Optional[ContentItem]:
        with self._session() as db:
            return db.get(ContentItem, item_id)

    def get_content_items_by_user_id(self, user_id: int) -> List[ContentItem]:
        with self._session() as db:
            return (
                db.query(ContentItem)
                .filter(ContentItem.user_id == user_id)
                .order_by(ContentItem.created_at.desc(), ContentItem.id.desc())
                .all()
            )

    def create_content_item(self, payload: ContentCreate) -> ContentItem:
        with self._session() as db:
            item = ContentItem(**payload.model_dump())
            db.add(item)
            db.commit()
            db.refresh(item)
            return item

    def update_content_item(self, item_id: int, patch: ContentPatch) -> Optional[ContentItem]:
        with self._session() as db:
            item = db.get(ContentItem, item_id)
            if item is None:
                return None
            for field, value in patch.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(item, field, value)
            db.commit()
            db.refresh(item)
            return item

    def delete_content_item(self, item_id: int) -> bool:
        with self._session() as db:
            item = db.get(ContentItem, item_id)
            if item is None:
                return False
            db.delete(item)
            db.commit()
            return True
