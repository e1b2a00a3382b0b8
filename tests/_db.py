"""In-memory SQLite database shared by service and API tests."""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.roles import UserRole, UserStatus
from app.models import Base, Permission, Purchase, Role, User, UserDevice


def make_engine() -> Engine:
    """Fresh schema on a single shared connection, with foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    *,
    email: str,
    role_id: int = UserRole.USER,
    first_name: str | None = None,
    last_name: str | None = None,
    status: int = UserStatus.INACTIVE,
    last_login_at: datetime | None = None,
    phone: str | None = None,
) -> int:
    user = User(
        email=email,
        role_id=int(role_id),
        first_name=first_name,
        last_name=last_name,
        status=int(status),
        last_login_at=last_login_at,
        phone=phone,
        password="not-a-real-hash",
    )
    db.add(user)
    db.commit()
    return user.id


def add_purchase(db: Session, user_id: int, amount: str, *, method: str | None = "card") -> int:
    purchase = Purchase(
        user_id=user_id,
        amount_total=Decimal(amount),
        currency="USD",
        payment_method=method,
        payment_status=1,
        created_at=datetime.now(UTC),
    )
    db.add(purchase)
    db.commit()
    return purchase.id


def add_device(db: Session, user_id: int, browser: str) -> int:
    device = UserDevice(user_id=user_id, browser=browser, os="linux", location_info="Berlin, DE")
    db.add(device)
    db.commit()
    return device.id


def add_role(db: Session, name: str, description: str | None = None) -> int:
    role = Role(name=name, description=description)
    db.add(role)
    db.commit()
    return role.id


def add_permission(db: Session, name: str, description: str | None = None) -> int:
    permission = Permission(name=name, description=description)
    db.add(permission)
    db.commit()
    return permission.id
