import pytest

from conftest import hours_from_now, iso


def create_slot(client, start_hours=24, duration_hours=1, **extra):
    payload = {
        "startTime": iso(hours_from_now(start_hours)),
        "endTime": iso(hours_from_now(start_hours + duration_hours)),
    }
    payload.update(extra)
    response = client.post("/api/interview-slots", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def peers(make_client):
    return (
        make_client("xavier", "advanced", ["System Design"]),
        make_client("yara", "intermediate", ["Python"]),
        make_client("zane", "beginner", ["JS"]),
    )


class TestCreate:
    def test_round_trip_times(self, peers):
        interviewer, _, _ = peers
        start = hours_from_now(72)
        end = hours_from_now(73.5)

        created = interviewer.post(
            "/api/interview-slots",
            json={"startTime": iso(start), "endTime": iso(end), "meetingType": "Google-Meet"},
        ).json()
        fetched = interviewer.get(f"/api/interview-slots/{created['id']}").json()

        assert fetched["startTime"] == iso(start)
        assert fetched["endTime"] == iso(end)
        assert fetched["status"] == "available"
        assert fetched["intervieweeId"] is None
        assert fetched["meetingType"] == "google-meet"
        assert fetched["interviewer"]["username"] == "xavier"

    def test_timezone_aware_input_stored_as_utc(self, peers):
        interviewer, _, _ = peers

        created = interviewer.post(
            "/api/interview-slots",
            json={"startTime": "2030-05-01T12:00:00+02:00", "endTime": "2030-05-01T13:00:00+02:00"},
        ).json()

        assert created["startTime"] == "2030-05-01T10:00:00"
        assert created["endTime"] == "2030-05-01T11:00:00"

    def test_end_must_follow_start(self, peers):
        interviewer, _, _ = peers
        start = hours_from_now(24)

        response = interviewer.post(
            "/api/interview-slots", json={"startTime": iso(start), "endTime": iso(start)}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "End time must be after start time"}

    def test_unknown_meeting_type(self, peers):
        interviewer, _, _ = peers

        response = interviewer.post(
            "/api/interview-slots",
            json={
                "startTime": iso(hours_from_now(24)),
                "endTime": iso(hours_from_now(25)),
                "meetingType": "carrier-pigeon",
            },
        )

        assert response.status_code == 400

    def test_unknown_slot(self, peers):
        interviewer, _, _ = peers

        response = interviewer.get("/api/interview-slots/999")

        assert response.status_code == 404
        assert response.json() == {"message": "Interview slot not found"}


class TestBooking:
    def test_book_then_second_booking_rejected(self, peers):
        x, y, z = peers
        slot = create_slot(x)

        booked = y.put(f"/api/interview-slots/{slot['id']}/book")
        assert booked.status_code == 200
        assert booked.json()["status"] == "booked"
        assert booked.json()["intervieweeId"] == y.user["id"]
        assert booked.json()["partner"]["username"] == "xavier"

        second = z.put(f"/api/interview-slots/{slot['id']}/book")
        assert second.status_code == 400
        assert "not available" in second.json()["message"]

        after = x.get(f"/api/interview-slots/{slot['id']}").json()
        assert after["status"] == "booked"
        assert after["intervieweeId"] == y.user["id"]

    def test_self_booking_rejected(self, peers):
        x, _, _ = peers
        slot = create_slot(x)

        response = x.put(f"/api/interview-slots/{slot['id']}/book")

        assert response.status_code == 400
        assert response.json() == {"message": "You cannot book your own interview slot"}
        assert x.get(f"/api/interview-slots/{slot['id']}").json()["status"] == "available"

    def test_available_lists_future_open_slots_of_others(self, peers):
        x, y, z = peers
        open_slot = create_slot(x, start_hours=24)
        taken = create_slot(x, start_hours=48)
        create_slot(x, start_hours=-3)
        create_slot(y, start_hours=30)
        z.put(f"/api/interview-slots/{taken['id']}/book")

        available = y.get("/api/interview-slots/available").json()

        assert [s["id"] for s in available] == [open_slot["id"]]


class TestCancel:
    def test_interviewer_cancel_is_terminal(self, peers):
        x, y, z = peers
        slot = create_slot(x)
        y.put(f"/api/interview-slots/{slot['id']}/book")

        response = x.put(f"/api/interview-slots/{slot['id']}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert z.put(f"/api/interview-slots/{slot['id']}/book").status_code == 400
        assert x.put(f"/api/interview-slots/{slot['id']}/cancel").status_code == 400

    def test_interviewee_cancel_reopens(self, peers):
        x, y, z = peers
        slot = create_slot(x)
        y.put(f"/api/interview-slots/{slot['id']}/book")

        response = y.put(f"/api/interview-slots/{slot['id']}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "available"
        assert response.json()["intervieweeId"] is None
        assert z.put(f"/api/interview-slots/{slot['id']}/book").status_code == 200

    def test_outsider_cannot_cancel(self, peers):
        x, y, z = peers
        slot = create_slot(x)
        y.put(f"/api/interview-slots/{slot['id']}/book")

        response = z.put(f"/api/interview-slots/{slot['id']}/cancel")

        assert response.status_code == 403
        assert x.get(f"/api/interview-slots/{slot['id']}").json()["status"] == "booked"


class TestMeetingLink:
    def test_interviewer_updates_link(self, peers):
        x, _, _ = peers
        slot = create_slot(x)

        response = x.patch(
            f"/api/interview-slots/{slot['id']}/meeting-link",
            json={"meetingLink": " https://zoom.us/j/123 "},
        )

        assert response.status_code == 200
        assert response.json()["meetingLink"] == "https://zoom.us/j/123"

    def test_others_cannot_update_link(self, peers):
        x, y, _ = peers
        slot = create_slot(x)

        response = y.patch(
            f"/api/interview-slots/{slot['id']}/meeting-link", json={"meetingLink": "https://evil"}
        )

        assert response.status_code == 403

    def test_blank_link_rejected(self, peers):
        x, _, _ = peers
        slot = create_slot(x)

        response = x.patch(f"/api/interview-slots/{slot['id']}/meeting-link", json={"meetingLink": " "})

        assert response.status_code == 400


class TestMyInterviews:
    def test_upcoming_and_past(self, peers):
        x, y, _ = peers
        future = create_slot(x, start_hours=24)
        elapsed = create_slot(x, start_hours=-5)
        create_slot(x, start_hours=48)
        y.put(f"/api/interview-slots/{future['id']}/book")
        y.put(f"/api/interview-slots/{elapsed['id']}/book")

        for client in (x, y):
            body = client.get("/api/interview-slots").json()
            assert [s["id"] for s in body["upcoming"]] == [future["id"]]
            assert [s["id"] for s in body["past"]] == [elapsed["id"]]

        upcoming = y.get("/api/interview-slots/upcoming").json()
        assert upcoming[0]["partner"]["username"] == "xavier"
        past = x.get("/api/interview-slots/past").json()
        assert past[0]["partner"]["username"] == "yara"


class TestCancelEndedInterview:
    def test_interviewee_cannot_reopen_ended_interview(self, peers):
        x, y, _ = peers
        slot = create_slot(x, start_hours=-3)
        y.put(f"/api/interview-slots/{slot['id']}/book")

        response = y.put(f"/api/interview-slots/{slot['id']}/cancel")

        assert response.status_code == 400
        assert response.json() == {"message": "Cannot cancel an interview that has already ended"}
        after = x.get(f"/api/interview-slots/{slot['id']}").json()
        assert after["status"] == "booked"
        assert after["intervieweeId"] == y.user["id"]
        assert x.put(f"/api/interview-slots/{slot['id']}/cancel").status_code == 400

    def test_ended_but_unbooked_slot_can_still_be_withdrawn(self, peers):
        x, _, _ = peers
        slot = create_slot(x, start_hours=-3)

        response = x.put(f"/api/interview-slots/{slot['id']}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
