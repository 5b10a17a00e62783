from datetime import date, time

import pytest

from app.models import SessionStatus
from app.sessions.schemas import SessionCreate, SessionUpdate
from app.services.session_service import SessionService
from app.services.exceptions import NotFoundError, ValidationError

HEARING_DAY = date(2025, 3, 10)
TEN = time(10, 0)


@pytest.fixture
def lawyer_with_two_cases(make_user, make_client, make_case):
    lawyer = make_user()
    record = make_client()
    return lawyer, make_case(record, lawyer, title="First"), make_case(record, lawyer, title="Second")


def test_two_scheduled_sessions_in_one_slot_conflict(db, lawyer_with_two_cases, make_session):
    lawyer, first, second = lawyer_with_two_cases
    make_session(first, on=HEARING_DAY, at=TEN)
    make_session(second, on=HEARING_DAY, at=TEN)

    assert SessionService(db).check_session_conflict(HEARING_DAY, TEN, lawyer.id) is True


def test_single_session_is_not_a_conflict_until_another_is_proposed(db, lawyer_with_two_cases, make_session):
    lawyer, first, _ = lawyer_with_two_cases
    make_session(first, on=HEARING_DAY, at=TEN)
    service = SessionService(db)

    assert service.check_session_conflict(HEARING_DAY, TEN, lawyer.id) is False
    assert service.check_session_conflict(HEARING_DAY, TEN, lawyer.id, proposed=True) is True
    assert service.check_session_conflict(HEARING_DAY, time(11, 0), lawyer.id, proposed=True) is False


def test_only_exact_slot_matches(db, lawyer_with_two_cases, make_session):
    lawyer, first, second = lawyer_with_two_cases
    make_session(first, on=HEARING_DAY, at=TEN)
    make_session(second, on=HEARING_DAY, at=time(10, 30))

    assert SessionService(db).check_session_conflict(HEARING_DAY, TEN, lawyer.id) is False


def test_non_scheduled_sessions_do_not_count(db, lawyer_with_two_cases, make_session):
    lawyer, first, second = lawyer_with_two_cases
    make_session(first, on=HEARING_DAY, at=TEN)
    make_session(second, on=HEARING_DAY, at=TEN, status=SessionStatus.POSTPONED)

    assert SessionService(db).check_session_conflict(HEARING_DAY, TEN, lawyer.id) is False


def test_sessions_on_unassigned_cases_are_ignored(db, make_user, make_client, make_case, make_session):
    lawyer = make_user()
    colleague = make_user()
    record = make_client()
    make_session(make_case(record, lawyer), on=HEARING_DAY, at=TEN)
    make_session(make_case(record, colleague), on=HEARING_DAY, at=TEN)

    service = SessionService(db)
    assert service.check_session_conflict(HEARING_DAY, TEN, lawyer.id) is False
    assert service.count_scheduled_in_slot(HEARING_DAY, TEN, colleague.id) == 1


def test_conflict_check_accepts_iso_strings(db, lawyer_with_two_cases, make_session):
    lawyer, first, second = lawyer_with_two_cases
    make_session(first, on=HEARING_DAY, at=TEN)
    make_session(second, on=HEARING_DAY, at=TEN)

    assert SessionService(db).check_session_conflict("2025-03-10", "10:00", lawyer.id) is True


def test_sessions_for_date_in_time_order(db, lawyer_with_two_cases, make_session):
    _, first, second = lawyer_with_two_cases
    late = make_session(first, on=HEARING_DAY, at=time(14, 0))
    early = make_session(second, on=HEARING_DAY, at=time(9, 0))
    make_session(first, on=date(2025, 3, 11), at=time(8, 0))

    sessions = SessionService(db).get_sessions_for_date(HEARING_DAY)

    assert [s.id for s in sessions] == [early.id, late.id]


def test_create_session_requires_existing_case(db, make_user):
    data = SessionCreate(case_id=999, title="Hearing", date=HEARING_DAY, time=TEN)

    with pytest.raises(ValidationError):
        SessionService(db).create_session(data, created_by=make_user().id)


def test_update_and_delete_session(db, lawyer_with_two_cases, make_session):
    _, first, _ = lawyer_with_two_cases
    record = make_session(first)
    service = SessionService(db)

    updated = service.update_session(record.id, SessionUpdate(status=SessionStatus.COMPLETED))
    assert updated.status == SessionStatus.COMPLETED

    session_id = record.id
    service.delete_session(session_id)
    assert service.get_session(session_id) is None
    with pytest.raises(NotFoundError):
        service.delete_session(session_id)


def test_conflict_clears_when_a_session_is_completed(db, lawyer_with_two_cases, make_session):
    lawyer, first, second = lawyer_with_two_cases
    make_session(first, on=HEARING_DAY, at=TEN)
    other = make_session(second, on=HEARING_DAY, at=TEN)
    service = SessionService(db)
    assert service.check_session_conflict(HEARING_DAY, TEN, lawyer.id) is True

    service.update_session(other.id, SessionUpdate(status=SessionStatus.COMPLETED))

    assert service.check_session_conflict(HEARING_DAY, TEN, lawyer.id) is False


def test_update_session_rejects_null_required_fields(db, lawyer_with_two_cases, make_session):
    _, first, _ = lawyer_with_two_cases
    record = make_session(first)
    service = SessionService(db)

    for patch in (SessionUpdate(status=None), SessionUpdate(date=None), SessionUpdate(title=None)):
        with pytest.raises(ValidationError):
            service.update_session(record.id, patch)

    assert service.get_session(record.id).status == SessionStatus.SCHEDULED
