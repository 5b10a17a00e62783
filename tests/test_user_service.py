import pytest

from app.models import UserRole
from app.auth.schemas import UserCreate, UserUpdate
from app.auth.utils import verify_password
from app.services.user_service import UserService
from app.services.exceptions import ConstraintViolationError, NotFoundError


def test_create_user_hashes_password(db):
    user = UserService(db).create_user(
        UserCreate(username="mwangi", password="s3cret-pass", name="J. Mwangi", role=UserRole.LAWYER)
    )

    assert user.password != "s3cret-pass"
    assert verify_password("s3cret-pass", user.password)


def test_duplicate_username_is_rejected(db, make_user):
    make_user(username="taken")

    with pytest.raises(ConstraintViolationError) as excinfo:
        UserService(db).create_user(UserCreate(username="taken", password="another1", name="Other"))
    assert excinfo.value.details == {"username": "taken"}


def test_authenticate(db, make_user):
    make_user(username="achieng", password="correct-horse")
    service = UserService(db)

    assert service.authenticate("achieng", "correct-horse").username == "achieng"
    assert service.authenticate("achieng", "wrong") is None
    assert service.authenticate("nobody", "correct-horse") is None


def test_update_user_rehashes_password(db, make_user):
    user = make_user(password="old-password")

    updated = UserService(db).update_user(user.id, UserUpdate(password="new-password", name="Renamed"))

    assert updated.name == "Renamed"
    assert verify_password("new-password", updated.password)


def test_update_user_rejects_existing_username(db, make_user):
    make_user(username="first")
    second = make_user(username="second")

    with pytest.raises(ConstraintViolationError):
        UserService(db).update_user(second.id, UserUpdate(username="first"))


def test_referenced_user_cannot_be_deleted(db, make_user, make_client, make_case):
    lawyer = make_user()
    make_case(make_client(created_by=lawyer.id), lawyer)

    with pytest.raises(ConstraintViolationError) as excinfo:
        UserService(db).delete_user(lawyer.id)

    assert excinfo.value.details == {"clients": 1, "cases": 1, "case_assignments": 1}
    assert UserService(db).get_user(lawyer.id) is not None


def test_unreferenced_user_is_deleted(db, make_user):
    user = make_user()
    user_id = user.id
    service = UserService(db)

    service.delete_user(user_id)

    assert service.get_user(user_id) is None
    with pytest.raises(NotFoundError):
        service.delete_user(user_id)


def test_ensure_admin_only_on_empty_table(db):
    service = UserService(db)

    admin = service.ensure_admin("admin", "admin-pass", "Administrator")
    assert admin.role == UserRole.ADMIN
    assert service.ensure_admin("admin2", "admin-pass", "Second") is None
    assert len(service.get_all_users()) == 1
