import pytest
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.errors import NotFound, RelationshipConflict
from app.models import Friend
from app.models.friend import ACCEPTED, PENDING, REJECTED
from app.services import friends as friend_service


def _count_pairs(db_session):
    return db_session.query(Friend).count()


def test_self_request_is_rejected(db_session, make_user):
    alice = make_user()
    with pytest.raises(RelationshipConflict, match="yourself"):
        friend_service.send_friend_request(db_session, alice.id, alice.id)
    assert _count_pairs(db_session) == 0


def test_request_to_unknown_user(db_session, make_user):
    alice = make_user()
    with pytest.raises(NotFound, match="Target user not found"):
        friend_service.send_friend_request(db_session, alice.id, alice.id + 100)


def test_reverse_request_is_already_pending(db_session, make_user):
    alice, bob = make_user(), make_user()
    friend_service.send_friend_request(db_session, alice.id, bob.id)

    with pytest.raises(RelationshipConflict, match=friend_service.ALREADY_PENDING):
        friend_service.send_friend_request(db_session, bob.id, alice.id)
    with pytest.raises(RelationshipConflict, match=friend_service.ALREADY_PENDING):
        friend_service.send_friend_request(db_session, alice.id, bob.id)
    assert _count_pairs(db_session) == 1


def test_concurrent_reverse_request_hits_unique_pair(db_session, make_user, monkeypatch):
    alice, bob = make_user(), make_user()
    friend_service.send_friend_request(db_session, alice.id, bob.id)

    # встречная заявка не увидела первую: проверка прошла, вставка упирается в ограничение
    monkeypatch.setattr(friend_service, "find_relationship", lambda db, user_id, other_id: None)
    with pytest.raises(RelationshipConflict, match=friend_service.ALREADY_PENDING):
        friend_service.send_friend_request(db_session, bob.id, alice.id)

    assert _count_pairs(db_session) == 1


def test_unique_pair_ignores_direction(db_session, make_user):
    alice, bob = make_user(), make_user()
    db_session.add(Friend(requester_id=alice.id, target_id=bob.id, status=PENDING, created_at="2024-01-01T00:00:00"))
    db_session.commit()

    db_session.add(Friend(requester_id=bob.id, target_id=alice.id, status=PENDING, created_at="2024-01-01T00:00:01"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_already_friends(db_session, make_user):
    alice, bob = make_user(), make_user()
    request = friend_service.send_friend_request(db_session, alice.id, bob.id)
    friend_service.accept_friend_request(db_session, bob.id, request.id)

    with pytest.raises(RelationshipConflict, match="Already friends"):
        friend_service.send_friend_request(db_session, bob.id, alice.id)


def test_rerequest_after_reject_allowed(db_session, make_user, monkeypatch):
    monkeypatch.setattr(settings, "FRIEND_REREQUEST_AFTER_REJECT", True)
    alice, bob = make_user(), make_user()
    request = friend_service.send_friend_request(db_session, alice.id, bob.id)
    friend_service.reject_friend_request(db_session, bob.id, request.id)

    new_request = friend_service.send_friend_request(db_session, alice.id, bob.id)

    assert new_request.status == PENDING
    assert _count_pairs(db_session) == 1


def test_rerequest_after_reject_blocked(db_session, make_user, monkeypatch):
    monkeypatch.setattr(settings, "FRIEND_REREQUEST_AFTER_REJECT", False)
    alice, bob = make_user(), make_user()
    request = friend_service.send_friend_request(db_session, alice.id, bob.id)
    friend_service.reject_friend_request(db_session, bob.id, request.id)

    with pytest.raises(RelationshipConflict, match="was rejected"):
        friend_service.send_friend_request(db_session, bob.id, alice.id)

    statuses = [friend.status for friend in db_session.query(Friend).all()]
    assert statuses == [REJECTED]


def test_only_requester_can_cancel(db_session, make_user):
    alice, bob = make_user(), make_user()
    request = friend_service.send_friend_request(db_session, alice.id, bob.id)

    with pytest.raises(NotFound, match=friend_service.NO_PENDING_REQUEST):
        friend_service.cancel_friend_request(db_session, bob.id, request.id)

    friend_service.cancel_friend_request(db_session, alice.id, request.id)
    assert _count_pairs(db_session) == 0


def test_only_target_can_respond(db_session, make_user):
    alice, bob = make_user(), make_user()
    request = friend_service.send_friend_request(db_session, alice.id, bob.id)

    with pytest.raises(NotFound):
        friend_service.accept_friend_request(db_session, alice.id, request.id)
    with pytest.raises(NotFound):
        friend_service.reject_friend_request(db_session, alice.id, request.id)

    accepted = friend_service.accept_friend_request(db_session, bob.id, request.id)
    assert accepted.status == ACCEPTED
    assert accepted.updated_at is not None


def test_processed_request_cannot_be_answered_again(db_session, make_user):
    alice, bob = make_user(), make_user()
    request = friend_service.send_friend_request(db_session, alice.id, bob.id)
    friend_service.reject_friend_request(db_session, bob.id, request.id)

    with pytest.raises(NotFound):
        friend_service.accept_friend_request(db_session, bob.id, request.id)
    with pytest.raises(NotFound):
        friend_service.cancel_friend_request(db_session, alice.id, request.id)


def test_status_direction(db_session, make_user):
    alice, bob, carol = make_user(), make_user(), make_user()
    request = friend_service.send_friend_request(db_session, alice.id, bob.id)

    assert friend_service.get_friendship_status(db_session, alice.id, bob.id)["direction"] == friend_service.SENT
    assert friend_service.get_friendship_status(db_session, bob.id, alice.id)["direction"] == friend_service.RECEIVED
    assert friend_service.get_friendship_status(db_session, alice.id, carol.id)["status"] == friend_service.NONE

    friend_service.accept_friend_request(db_session, bob.id, request.id)
    status = friend_service.get_friendship_status(db_session, alice.id, bob.id)
    assert status["status"] == ACCEPTED
    assert "direction" not in status


def test_pending_requests_newest_first(db_session, make_user):
    alice, bob, carol = make_user(), make_user(), make_user()
    first = friend_service.send_friend_request(db_session, bob.id, alice.id)
    second = friend_service.send_friend_request(db_session, carol.id, alice.id)
    friend_service.send_friend_request(db_session, alice.id, make_user().id)

    pending = friend_service.list_pending_requests(db_session, alice.id)
    assert [request.id for request in pending] == [second.id, first.id]


def test_list_friends_both_directions(db_session, make_user):
    alice, bob, carol = make_user(), make_user(), make_user()
    outgoing = friend_service.send_friend_request(db_session, alice.id, bob.id)
    incoming = friend_service.send_friend_request(db_session, carol.id, alice.id)
    friend_service.accept_friend_request(db_session, bob.id, outgoing.id)
    friend_service.accept_friend_request(db_session, alice.id, incoming.id)

    friends = friend_service.list_friends(db_session, alice.id)
    assert {friend.id for friend in friends} == {bob.id, carol.id}
    assert [friend.id for friend in friend_service.list_friends(db_session, bob.id)] == [alice.id]


def test_friend_request_flow_over_api(client, register):
    alice, bob = register(), register()

    response = client.post("/api/friends/requests", json={"targetUserId": bob["id"]}, headers=alice["headers"])
    assert response.status_code == 201
    request = response.json()
    assert request["status"] == PENDING
    assert request["requesterId"] == alice["id"]

    status = client.get(f"/api/friends/status/{bob['id']}", headers=alice["headers"]).json()
    assert status["status"] == PENDING
    assert status["direction"] == "SENT"
    status = client.get(f"/api/friends/status/{alice['id']}", headers=bob["headers"]).json()
    assert status["direction"] == "RECEIVED"

    pending = client.get("/api/friends/requests/pending", headers=bob["headers"]).json()
    assert [item["id"] for item in pending] == [request["id"]]
    assert pending[0]["requester"]["id"] == alice["id"]

    response = client.post(f"/api/friends/requests/{request['id']}/accept", headers=bob["headers"])
    assert response.status_code == 200
    assert response.json()["status"] == ACCEPTED

    status = client.get(f"/api/friends/status/{bob['id']}", headers=alice["headers"]).json()
    assert status["status"] == ACCEPTED
    assert "direction" not in status

    friends = client.get("/api/friends", headers=alice["headers"]).json()
    assert [friend["id"] for friend in friends] == [bob["id"]]


def test_friend_request_errors_over_api(client, register):
    alice, bob = register(), register()

    response = client.post("/api/friends/requests", json={"targetUserId": alice["id"]}, headers=alice["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot send friend request to yourself"

    response = client.post("/api/friends/requests", json={"targetUserId": 0}, headers=alice["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid input"

    client.post("/api/friends/requests", json={"targetUserId": bob["id"]}, headers=alice["headers"])
    response = client.post("/api/friends/requests", json={"targetUserId": alice["id"]}, headers=bob["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Friend request already pending"

    response = client.delete("/api/friends/requests/9999", headers=alice["headers"])
    assert response.status_code == 404

    status = client.get("/api/friends/status/9999", headers=alice["headers"]).json()
    assert status == {"status": "NONE", "message": "No friend request exists"}
