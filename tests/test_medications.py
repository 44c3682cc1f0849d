from medtrack.services.medication_repository import MedicationRepository
from conftest import add_medication


def test_add_and_list_for_date(client, patient):
    med_id = add_medication(client, patient, "2025-06-20", name="Aspirin")
    add_medication(client, patient, "2025-06-21")

    res = client.get("/medications", params={"date": "2025-06-20"}, headers=patient["headers"])
    assert res.status_code == 200
    rows = res.json()
    assert [row["id"] for row in rows] == [med_id]
    assert rows[0]["name"] == "Aspirin"
    assert rows[0]["active"] is True
    assert rows[0]["taken"] is False
    assert rows[0]["user_id"] == patient["id"]


def test_add_requires_every_field(client, patient):
    res = client.post(
        "/medications",
        json={"name": "Aspirin", "dosage": "", "frequency": "daily", "date": "2025-06-20", "time": "08:00"},
        headers=patient["headers"],
    )
    assert res.status_code == 400
    assert res.json()["message"] == "All fields are required"

    res = client.post("/medications", json={"name": "Aspirin"}, headers=patient["headers"])
    assert res.status_code == 400


def test_add_rejects_malformed_date_and_time(client, patient):
    body = {"name": "Aspirin", "dosage": "1 tablet", "frequency": "daily", "date": "20/06/2025", "time": "08:00"}
    res = client.post("/medications", json=body, headers=patient["headers"])
    assert res.status_code == 400

    body.update(date="2025-06-20", time="morning")
    res = client.post("/medications", json=body, headers=patient["headers"])
    assert res.status_code == 400


def test_list_requires_date(client, patient):
    res = client.get("/medications", headers=patient["headers"])
    assert res.status_code == 400


def test_entries_are_never_visible_to_other_users(client, patient, other_patient):
    add_medication(client, patient, "2025-06-20")

    res = client.get("/medications", params={"date": "2025-06-20"}, headers=other_patient["headers"])
    assert res.status_code == 200
    assert res.json() == []


def test_soft_delete_hides_but_keeps_the_row(client, patient, db_session):
    med_id = add_medication(client, patient, "2025-06-20")

    res = client.delete(f"/medications/{med_id}", headers=patient["headers"])
    assert res.status_code == 200
    assert res.json()["message"] == "Medication deleted"

    res = client.get("/medications", params={"date": "2025-06-20"}, headers=patient["headers"])
    assert res.json() == []

    row = MedicationRepository(db_session).get(med_id)
    assert row is not None
    assert row.active is False


def test_other_user_cannot_delete(client, patient, other_patient, db_session):
    med_id = add_medication(client, patient, "2025-06-20")

    res = client.delete(f"/medications/{med_id}", headers=other_patient["headers"])
    # Unowned ids are ignored quietly
    assert res.status_code == 200
    assert MedicationRepository(db_session).get(med_id).active is True


def test_mark_taken_is_idempotent(client, patient):
    med_id = add_medication(client, patient, "2025-06-20")

    for _ in range(2):
        res = client.put(f"/medications/{med_id}/taken", headers=patient["headers"])
        assert res.status_code == 200
        assert res.json()["message"] == "Medication marked as taken"

    rows = client.get("/medications", params={"date": "2025-06-20"}, headers=patient["headers"]).json()
    assert rows[0]["taken"] is True


def test_mark_taken_on_unowned_id_is_a_quiet_no_op(client, patient, other_patient, db_session):
    med_id = add_medication(client, patient, "2025-06-20")

    res = client.put(f"/medications/{med_id}/taken", headers=other_patient["headers"])
    assert res.status_code == 200
    assert MedicationRepository(db_session).get(med_id).taken is False

    res = client.put("/medications/9999/taken", headers=patient["headers"])
    assert res.status_code == 200


def test_batch_mark_taken(client, patient):
    first = add_medication(client, patient, "2025-06-20", time="08:00")
    second = add_medication(client, patient, "2025-06-20", time="20:00")

    res = client.put("/medications/taken", json={"ids": [first, second, first]}, headers=patient["headers"])
    assert res.status_code == 200
    assert res.json()["ids"] == [first, second]

    rows = client.get("/medications", params={"date": "2025-06-20"}, headers=patient["headers"]).json()
    assert all(row["taken"] for row in rows)


def test_batch_mark_taken_is_all_or_nothing(client, patient, other_patient, db_session):
    mine = add_medication(client, patient, "2025-06-20")
    theirs = add_medication(client, other_patient, "2025-06-20")

    res = client.put("/medications/taken", json={"ids": [mine, theirs]}, headers=patient["headers"])
    assert res.status_code == 404
    assert str(theirs) in res.json()["message"]

    repo = MedicationRepository(db_session)
    assert repo.get(mine).taken is False
    assert repo.get(theirs).taken is False


def test_batch_mark_taken_rejects_deleted_and_empty(client, patient):
    med_id = add_medication(client, patient, "2025-06-20")
    client.delete(f"/medications/{med_id}", headers=patient["headers"])

    res = client.put("/medications/taken", json={"ids": [med_id]}, headers=patient["headers"])
    assert res.status_code == 404

    res = client.put("/medications/taken", json={"ids": []}, headers=patient["headers"])
    assert res.status_code == 400


def test_repository_list_window_orders_by_date(patient, db_session):
    from datetime import date

    repo = MedicationRepository(db_session)
    late = repo.add(patient["id"], "B", "1", "daily", "2025-06-30", "09:00")
    early = repo.add(patient["id"], "A", "1", "daily", "2025-06-01", "09:00")
    repo.add(patient["id"], "C", "1", "daily", "2025-07-01", "09:00")

    rows = repo.list_window(patient["id"], date(2025, 6, 1), date(2025, 6, 30))
    assert [row.id for row in rows] == [early, late]


def test_repository_normalizes_dates(patient, db_session):
    repo = MedicationRepository(db_session)
    med_id = repo.add(patient["id"], "A", "1", "daily", "2025-6-5", "09:00")
    assert repo.get(med_id).date == "2025-06-05"
    assert [row.id for row in repo.list_for_date(patient["id"], "2025-06-05")] == [med_id]


def test_repository_normalizes_times(patient, db_session):
    repo = MedicationRepository(db_session)
    med_id = repo.add(patient["id"], "A", "1", "daily", "2025-06-05", "8:30")
    assert repo.get(med_id).time == "08:30"
