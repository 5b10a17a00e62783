import pytest

from app.models import Case, CaseSession, CaseUser, Client, Document, Invoice, Task, User
from app.clients.schemas import ClientCreate, ClientUpdate
from app.services import client_service as client_service_module
from app.services.case_service import CaseService
from app.services.client_service import ClientService
from app.services.exceptions import NotFoundError, ValidationError


def test_client_without_cases_can_be_deleted(db, make_client):
    record = make_client()

    result = ClientService(db).check_client_deletion_constraints(record.id)

    assert result == {
        "can_delete": True,
        "related_cases": 0,
        "related_sessions": 0,
        "related_documents": 0,
        "related_invoices": 0,
        "related_tasks": 0,
        "message": None,
    }


def test_client_with_records_reports_counts(db, make_user, make_client, make_case, make_session,
                                            make_document, make_invoice):
    lawyer = make_user()
    record = make_client()
    case = make_case(record, lawyer)
    make_session(case)
    make_session(case, title="Mention")
    make_document(case)
    make_invoice(case)

    result = ClientService(db).check_client_deletion_constraints(record.id)

    assert result["can_delete"] is False
    assert result["related_cases"] == 1
    assert result["related_sessions"] == 2
    assert result["related_documents"] == 1
    assert result["related_invoices"] == 1
    assert result["related_tasks"] == 0
    assert result["message"] == (
        "Client has related records: 1 case(s), 2 session(s), 1 document(s), 1 invoice(s)"
    )


def test_bare_case_still_blocks_deletion(db, make_user, make_client, make_case):
    record = make_client()
    make_case(record, make_user())

    result = ClientService(db).check_client_deletion_constraints(record.id)

    assert result["can_delete"] is False
    assert result["message"] == "Client has related records: 1 case(s)"


def test_missing_client_is_reported_not_raised(db):
    result = ClientService(db).check_client_deletion_constraints(999)

    assert result["can_delete"] is False
    assert result["message"] == "Client not found"
    assert result["related_cases"] == 0


def test_detached_invoices_are_not_counted(db, make_user, make_client, make_case, make_invoice):
    record = make_client()
    case = make_case(record, make_user())
    invoice = make_invoice(case)

    CaseService(db).delete_case(case.id)

    result = ClientService(db).check_client_deletion_constraints(record.id)
    assert result["can_delete"] is True
    assert result["related_invoices"] == 0
    db.refresh(invoice)
    assert invoice.case_id is None


def test_delete_client_cascades_everything(db, make_user, make_client, make_case, make_session,
                                           make_document, make_invoice, make_task):
    lawyer = make_user()
    record = make_client()
    other = make_client()
    for title in ("First", "Second"):
        case = make_case(record, lawyer, title=title)
        make_session(case)
        make_document(case)
        make_invoice(case)
        make_task(case)
    untouched_case = make_case(other, lawyer, title="Other client")
    make_invoice(untouched_case)

    client_id = record.id

    ClientService(db).delete_client(client_id)

    assert db.query(Client).filter(Client.id == client_id).first() is None
    assert db.query(Case).filter(Case.client_id == client_id).count() == 0
    assert db.query(CaseSession).count() == 0
    assert db.query(Document).count() == 0
    assert db.query(Task).count() == 0
    # Invoices under the deleted client's cases are removed, not detached
    assert db.query(Invoice).count() == 1
    assert db.query(Invoice).first().case_id == untouched_case.id
    assert db.query(CaseUser).count() == 1
    assert db.query(User).filter(User.id == lawyer.id).first() is not None


def test_delete_missing_client_raises(db):
    with pytest.raises(NotFoundError):
        ClientService(db).delete_client(999)


def test_failed_cascade_rolls_back(db, monkeypatch, make_user, make_client, make_case, make_session):
    lawyer = make_user()
    record = make_client()
    first = make_case(record, lawyer, title="First")
    second = make_case(record, lawyer, title="Second")
    make_session(first)
    make_session(second)

    real_remove_case = client_service_module.remove_case
    calls = []

    def failing_remove_case(session, case_id, steps):
        calls.append(case_id)
        if len(calls) == 2:
            raise RuntimeError("disk full")
        return real_remove_case(session, case_id, steps)

    monkeypatch.setattr(client_service_module, "remove_case", failing_remove_case)

    with pytest.raises(RuntimeError):
        ClientService(db).delete_client(record.id)

    assert db.query(Case).filter(Case.client_id == record.id).count() == 2
    assert db.query(CaseSession).count() == 2
    assert db.query(Client).filter(Client.id == record.id).first() is not None


def test_create_and_update_client(db, make_user):
    user = make_user()
    service = ClientService(db)

    record = service.create_client(ClientCreate(name="Amina Odhiambo", phone="0712345678"), created_by=user.id)
    assert record.id is not None
    assert record.created_by == user.id

    updated = service.update_client(record.id, ClientUpdate(email="amina@example.com"))
    assert updated.email == "amina@example.com"
    assert updated.phone == "0712345678"

    with pytest.raises(NotFoundError):
        service.update_client(999, ClientUpdate(name="Nobody"))


def test_get_all_clients_newest_first(db, make_client):
    first = make_client(name="First")
    second = make_client(name="Second")

    assert [c.id for c in ClientService(db).get_all_clients()] == [second.id, first.id]


def test_search_clients(db, make_client):
    make_client(name="Wanjiru Kamau", email="WANJIRU@example.com")
    make_client(name="Otieno Ouma", phone="0722000111")
    service = ClientService(db)

    assert [c.name for c in service.search_clients("wanjiru@")] == ["Wanjiru Kamau"]
    assert [c.name for c in service.search_clients("0722")] == ["Otieno Ouma"]
    assert service.search_clients("   ") == []


def test_one_of_each_dependent_is_counted_once(db, make_user, make_client, make_case, make_session,
                                               make_document, make_invoice, make_task):
    record = make_client()
    case = make_case(record, make_user())
    make_session(case)
    make_document(case)
    make_invoice(case)
    make_task(case)

    result = ClientService(db).check_client_deletion_constraints(record.id)

    assert result == {
        "can_delete": False,
        "related_cases": 1,
        "related_sessions": 1,
        "related_documents": 1,
        "related_invoices": 1,
        "related_tasks": 1,
        "message": "Client has related records: 1 case(s), 1 session(s), 1 document(s), 1 invoice(s), 1 task(s)",
    }


def test_update_client_rejects_null_name(db, make_client):
    record = make_client(name="Keeps Name")

    with pytest.raises(ValidationError):
        ClientService(db).update_client(record.id, ClientUpdate(name=None))

    db.refresh(record)
    assert record.name == "Keeps Name"
