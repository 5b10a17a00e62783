from decimal import Decimal

import pytest

from app.models import Case, CaseSession, CaseUser, Document, Invoice, Task, UserRole
from app.cases.schemas import CaseCreate, CaseUpdate
from app.services.case_service import CaseService
from app.services.exceptions import NotFoundError, ValidationError


def test_create_case_assigns_creator_as_primary(db, make_user, make_client):
    lawyer = make_user()
    record = make_client()

    case = CaseService(db).create_case(
        CaseCreate(title="Succession", type="family", client_id=record.id), created_by=lawyer.id
    )

    assignment = db.query(CaseUser).filter(CaseUser.case_id == case.id).one()
    assert assignment.user_id == lawyer.id
    assert assignment.role == "primary"


def test_create_case_for_missing_client(db, make_user):
    with pytest.raises(ValidationError):
        CaseService(db).create_case(
            CaseCreate(title="Orphan", type="civil", client_id=999), created_by=make_user().id
        )
    assert db.query(Case).count() == 0


def test_admin_sees_every_case(db, make_user, make_client, make_case):
    admin = make_user(role=UserRole.ADMIN)
    lawyer = make_user()
    record = make_client()
    make_case(record, lawyer, title="Mine")
    unassigned = Case(title="Nobody's", type="civil", client_id=record.id)
    db.add(unassigned)
    db.commit()

    cases = CaseService(db).get_cases_for_user(admin.id, admin.role)

    assert {c.title for c in cases} == {"Mine", "Nobody's"}


def test_non_admin_sees_only_assigned_cases(db, make_user, make_client, make_case, assign):
    lawyer = make_user()
    assistant = make_user(role=UserRole.ASSISTANT)
    record = make_client()
    shared = make_case(record, lawyer, title="Shared")
    private = make_case(record, lawyer, title="Private")
    assign(shared, assistant)
    service = CaseService(db)

    assert [c.title for c in service.get_cases_for_user(assistant.id, assistant.role)] == ["Shared"]
    assert service.get_case_for_user(private.id, assistant.id, assistant.role) is None
    assert service.get_case_for_user(shared.id, assistant.id, assistant.role).id == shared.id


def test_unassigned_case_invisible_to_non_admins(db, make_user, make_client):
    lawyer = make_user()
    case = Case(title="Unstaffed", type="civil", client_id=make_client().id)
    db.add(case)
    db.commit()

    service = CaseService(db)
    assert service.get_cases_for_user(lawyer.id, lawyer.role) == []
    assert service.get_case_for_user(case.id, lawyer.id, lawyer.role) is None


def test_duplicate_assignment_rows_do_not_duplicate_cases(db, make_user, make_client, make_case, assign):
    lawyer = make_user()
    case = make_case(make_client(), lawyer)
    assign(case, lawyer, role="secondary")

    cases = CaseService(db).get_cases_for_user(lawyer.id, lawyer.role)

    assert [c.id for c in cases] == [case.id]


def test_delete_case_detaches_invoices(db, make_user, make_client, make_case, make_session,
                                       make_document, make_invoice, make_task):
    lawyer = make_user()
    case = make_case(make_client(), lawyer)
    make_session(case)
    make_document(case)
    make_task(case)
    invoice = make_invoice(case, amount="2500.00")
    case_id = case.id

    CaseService(db).delete_case(case_id)

    assert db.query(Case).filter(Case.id == case_id).first() is None
    assert db.query(CaseSession).count() == 0
    assert db.query(Document).count() == 0
    assert db.query(Task).count() == 0
    assert db.query(CaseUser).count() == 0
    db.refresh(invoice)
    assert invoice.case_id is None
    assert invoice.amount == Decimal("2500.00")


def test_invoice_handling_differs_between_case_and_client_delete(db, make_user, make_client, make_case,
                                                                 make_invoice):
    # Deleting a case keeps its invoices; deleting the client removes them.
    from app.services.client_service import ClientService

    lawyer = make_user()
    kept_client = make_client()
    make_invoice(make_case(kept_client, lawyer, title="Direct"))
    gone_client = make_client()
    make_invoice(make_case(gone_client, lawyer, title="Via client"))

    direct_case = db.query(Case).filter(Case.title == "Direct").one()
    CaseService(db).delete_case(direct_case.id)
    ClientService(db).delete_client(gone_client.id)

    remaining = db.query(Invoice).all()
    assert len(remaining) == 1
    assert remaining[0].case_id is None


def test_delete_missing_case(db):
    with pytest.raises(NotFoundError):
        CaseService(db).delete_case(999)


def test_update_case_rejects_bad_client(db, make_user, make_client, make_case):
    case = make_case(make_client(), make_user())
    service = CaseService(db)

    with pytest.raises(ValidationError):
        service.update_case(case.id, CaseUpdate(client_id=None))
    with pytest.raises(ValidationError):
        service.update_case(case.id, CaseUpdate(client_id=999))

    updated = service.update_case(case.id, CaseUpdate(court="Milimani High Court"))
    assert updated.court == "Milimani High Court"


def test_assign_user_to_case(db, make_user, make_client, make_case):
    lawyer = make_user()
    assistant = make_user(role=UserRole.ASSISTANT)
    case = make_case(make_client(), lawyer)
    service = CaseService(db)

    first = service.assign_user_to_case(case.id, assistant.id, "assistant")
    again = service.assign_user_to_case(case.id, assistant.id, "secondary")

    assert first.id == again.id
    assert again.role == "assistant"
    with pytest.raises(NotFoundError):
        service.assign_user_to_case(case.id, 999)
    with pytest.raises(NotFoundError):
        service.assign_user_to_case(999, assistant.id)


def test_search_cases(db, make_user, make_client, make_case):
    lawyer = make_user()
    record = make_client()
    make_case(record, lawyer, title="Boundary dispute", court="Kiambu ELC")
    make_case(record, lawyer, title="Employment claim", type="labour")
    service = CaseService(db)

    assert [c.title for c in service.search_cases("elc")] == ["Boundary dispute"]
    assert [c.title for c in service.search_cases("LABOUR")] == ["Employment claim"]
    assert service.search_cases("") == []


def test_update_case_rejects_null_required_fields(db, make_user, make_client, make_case):
    case = make_case(make_client(), make_user(), title="Original")
    service = CaseService(db)

    for patch in (CaseUpdate(title=None), CaseUpdate(type=None), CaseUpdate(status=None)):
        with pytest.raises(ValidationError):
            service.update_case(case.id, patch)

    assert service.get_case(case.id).title == "Original"
