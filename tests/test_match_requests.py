from conftest import hours_from_now, iso


def create_request(client, **payload):
    response = client.post("/api/match-requests", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:
    def test_always_pending(self, make_client):
        alice = make_client("alice", "beginner")

        request = create_request(
            alice, targetExperienceLevel="Intermediate", targetSkills=["Python"], status="accepted"
        )

        assert request["status"] == "pending"
        assert request["requesterId"] == alice.user["id"]
        assert request["matchedPeerId"] is None
        assert request["targetExperienceLevel"] == "intermediate"
        assert request["requester"]["username"] == "alice"

    def test_defaults_to_any_level(self, make_client):
        alice = make_client("alice")

        request = create_request(alice)

        assert request["targetExperienceLevel"] == "any"
        assert request["targetSkills"] == []

    def test_invalid_level(self, make_client):
        alice = make_client("alice")

        response = alice.post("/api/match-requests", json={"targetExperienceLevel": "expert"})

        assert response.status_code == 400


class TestIncoming:
    def test_wildcard_skills_reach_every_user_at_level(self, make_client):
        alice = make_client("alice", "beginner", ["JS"])
        bob = make_client("bob", "intermediate", ["Go"])
        carol = make_client("carol", "intermediate", [])
        dave = make_client("dave", "advanced", ["JS"])

        request = create_request(alice, targetExperienceLevel="intermediate", targetSkills=[])

        for peer in (bob, carol):
            incoming = peer.get("/api/match-requests/incoming").json()
            assert [r["id"] for r in incoming] == [request["id"]]
        assert dave.get("/api/match-requests/incoming").json() == []
        assert alice.get("/api/match-requests/incoming").json() == []

    def test_skill_filter_needs_overlap(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "advanced", ["python", "SQL"])
        carol = make_client("carol", "advanced", ["Go"])

        create_request(alice, targetExperienceLevel="any", targetSkills=["Python"])

        assert len(bob.get("/api/match-requests/incoming").json()) == 1
        assert carol.get("/api/match-requests/incoming").json() == []

    def test_combined_listing(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")

        mine = create_request(alice)
        theirs = create_request(bob)

        body = alice.get("/api/match-requests").json()

        assert [r["id"] for r in body["outgoing"]] == [mine["id"]]
        assert [r["id"] for r in body["incoming"]] == [theirs["id"]]


class TestStatusUpdates:
    def test_accept_binds_peer(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        request = create_request(alice)

        response = bob.put(f"/api/match-requests/{request['id']}/status", json={"status": "accepted"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "accepted"
        assert body["matchedPeerId"] == bob.user["id"]
        assert body["matchedPeer"]["username"] == "bob"
        assert body["interviewSlotId"] is None
        assert bob.get("/api/match-requests/incoming").json() == []

    def test_accept_with_requested_time_books_slot(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        start = hours_from_now(48)
        request = create_request(alice, requestedTime=iso(start))

        body = bob.put(
            f"/api/match-requests/{request['id']}/status", json={"status": "accepted"}
        ).json()

        slot = alice.get(f"/api/interview-slots/{body['interviewSlotId']}").json()
        assert slot["status"] == "booked"
        assert slot["interviewerId"] == bob.user["id"]
        assert slot["intervieweeId"] == alice.user["id"]
        assert slot["startTime"] == iso(start)
        assert slot["matchRequestId"] == request["id"]
        assert slot["meetingLink"]
        upcoming = alice.get("/api/interview-slots/upcoming").json()
        assert [s["id"] for s in upcoming] == [slot["id"]]

    def test_reject(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        request = create_request(alice)

        response = bob.put(
            f"/api/match-requests/{request['id']}/status", json={"status": "rejected"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "rejected"
        assert body["matchedPeerId"] is None
        assert alice.get(f"/api/match-requests/{request['id']}").json()["status"] == "rejected"
        assert bob.get("/api/match-requests/incoming").json() == []

    def test_requester_cannot_accept_own_request(self, make_client):
        alice = make_client("alice", "beginner")
        request = create_request(alice)

        response = alice.put(f"/api/match-requests/{request['id']}/status", json={"status": "accepted"})

        assert response.status_code == 403

    def test_incompatible_user_cannot_respond(self, make_client):
        alice = make_client("alice", "beginner")
        dave = make_client("dave", "advanced")
        request = create_request(alice, targetExperienceLevel="beginner")

        response = dave.put(f"/api/match-requests/{request['id']}/status", json={"status": "accepted"})

        assert response.status_code == 403
        assert alice.get(f"/api/match-requests/{request['id']}").json()["status"] == "pending"

    def test_only_requester_cancels(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        request = create_request(alice)
        url = f"/api/match-requests/{request['id']}/status"

        assert bob.put(url, json={"status": "cancelled"}).status_code == 403

        response = alice.put(url, json={"status": "canceled"})
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_terminal_requests_do_not_change(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        carol = make_client("carol", "beginner")
        request = create_request(alice)
        url = f"/api/match-requests/{request['id']}/status"

        assert bob.put(url, json={"status": "accepted"}).status_code == 200
        response = carol.put(url, json={"status": "accepted"})

        assert response.status_code == 400
        assert response.json() == {"message": "Match request is no longer pending"}
        assert alice.put(url, json={"status": "cancelled"}).status_code == 400

    def test_invalid_status(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        request = create_request(alice)
        url = f"/api/match-requests/{request['id']}/status"

        for status in ("pending", "done", ""):
            response = bob.put(url, json={"status": status})
            assert response.status_code == 400
            assert response.json() == {"message": "Invalid status"}

    def test_unknown_request(self, make_client):
        bob = make_client("bob")

        response = bob.put("/api/match-requests/999/status", json={"status": "accepted"})

        assert response.status_code == 404


class TestVisibility:
    def test_pending_request_visible_to_compatible_peer_only(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        dave = make_client("dave", "advanced")
        request = create_request(alice, targetExperienceLevel="beginner")
        url = f"/api/match-requests/{request['id']}"

        assert bob.get(url).status_code == 200
        assert dave.get(url).status_code == 403

    def test_accepted_request_visible_to_participants(self, make_client):
        alice = make_client("alice", "beginner")
        bob = make_client("bob", "beginner")
        carol = make_client("carol", "beginner")
        request = create_request(alice)
        url = f"/api/match-requests/{request['id']}"
        bob.put(f"{url}/status", json={"status": "accepted"})

        assert alice.get(url).status_code == 200
        assert bob.get(url).status_code == 200
        assert carol.get(url).status_code == 403
        assert [r["status"] for r in alice.get("/api/match-requests/outgoing").json()] == ["accepted"]
