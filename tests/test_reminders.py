from datetime import datetime, timedelta

from medconnect.models.reminder import MedicineReminder

def parse(timestamp: str) -> datetime:
    return datetime.fromisoformat(timestamp)

def create(client, headers, name="Panadol", kind="pill", frequency=8):
    return client.post("/api/v1/reminders", json={
        "name": name,
        "type": kind,
        "frequency": frequency
    }, headers=headers)

class TestMedicineReminders:

    def test_create_sets_next_trigger(self, client, make_patient):
        """A reminder every 8 hours is next due 8 hours from now and starts active."""
        _, headers = make_patient()

        before = datetime.utcnow()
        response = create(client, headers, frequency=8)
        after = datetime.utcnow()
        assert response.status_code == 201

        reminders = response.json()["data"]
        assert len(reminders) == 1
        next_reminder = parse(reminders[0]["next_reminder"])
        assert before + timedelta(hours=8) <= next_reminder <= after + timedelta(hours=8)

        listed = client.get("/api/v1/reminders", headers=headers).json()["data"]
        assert listed[0]["name"] == "Panadol"
        assert listed[0]["active"] is True

    def test_create_validates_frequency(self, client, make_patient):
        _, headers = make_patient()

        assert create(client, headers, frequency=0).status_code == 400
        assert client.post("/api/v1/reminders", json={"name": "Panadol"}, headers=headers).status_code == 400

    def test_update_without_frequency_keeps_next_trigger(self, client, make_patient):
        _, headers = make_patient()
        reminder = create(client, headers).json()["data"][0]

        response = client.patch(f"/api/v1/reminders/{reminder['id']}", json={"name": "Brufen"}, headers=headers)
        assert response.status_code == 200

        data = response.json()["data"]
        assert data["name"] == "Brufen"
        assert data["type"] == "pill"
        assert data["frequency"] == 8
        assert data["next_reminder"] == reminder["next_reminder"]

    def test_update_frequency_recomputes_next_trigger(self, client, make_patient):
        _, headers = make_patient()
        reminder = create(client, headers, frequency=8).json()["data"][0]

        before = datetime.utcnow()
        response = client.patch(f"/api/v1/reminders/{reminder['id']}", json={"frequency": 12}, headers=headers)
        assert response.status_code == 200

        data = response.json()["data"]
        assert data["frequency"] == 12
        assert parse(data["next_reminder"]) >= before + timedelta(hours=12)

    def test_update_same_frequency_keeps_next_trigger(self, client, make_patient):
        _, headers = make_patient()
        reminder = create(client, headers, frequency=8).json()["data"][0]

        response = client.patch(f"/api/v1/reminders/{reminder['id']}", json={"frequency": 8}, headers=headers)
        assert response.json()["data"]["next_reminder"] == reminder["next_reminder"]

    def test_deactivate_keeps_reminder(self, client, make_patient):
        """Deactivating flips the flag without removing the reminder."""
        _, headers = make_patient()
        reminder = create(client, headers).json()["data"][0]

        response = client.patch(f"/api/v1/reminders/{reminder['id']}/deactivate", headers=headers)
        assert response.status_code == 200

        reminders = response.json()["data"]
        assert len(reminders) == 1
        assert reminders[0]["active"] is False

        response = client.patch(f"/api/v1/reminders/{reminder['id']}/activate", headers=headers)
        assert response.json()["data"][0]["active"] is True

    def test_delete_removes_reminder(self, client, db, make_patient):
        _, headers = make_patient()
        first = create(client, headers, name="Panadol").json()["data"][0]
        create(client, headers, name="Vitamin D", frequency=24)

        response = client.delete(f"/api/v1/reminders/{first['id']}", headers=headers)
        assert response.status_code == 200
        assert [r["name"] for r in response.json()["data"]] == ["Vitamin D"]
        assert db.query(MedicineReminder).count() == 1

        response = client.delete(f"/api/v1/reminders/{first['id']}", headers=headers)
        assert response.status_code == 404

    def test_other_patients_reminders_are_invisible(self, client, db, make_patient):
        _, owner_headers = make_patient(name="Owner")
        _, other_headers = make_patient(name="Other")
        reminder = create(client, owner_headers).json()["data"][0]

        assert client.get("/api/v1/reminders", headers=other_headers).json()["data"] == []
        assert client.patch(
            f"/api/v1/reminders/{reminder['id']}", json={"name": "Hacked"}, headers=other_headers
        ).status_code == 404
        assert client.patch(
            f"/api/v1/reminders/{reminder['id']}/deactivate", headers=other_headers
        ).status_code == 404
        assert client.delete(f"/api/v1/reminders/{reminder['id']}", headers=other_headers).status_code == 404

        db.expire_all()
        stored = db.query(MedicineReminder).one()
        assert stored.name == "Panadol"
        assert stored.active is True
