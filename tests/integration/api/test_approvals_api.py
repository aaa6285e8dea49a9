import pytest
from httpx import AsyncClient


async def _notifications(client: AsyncClient, user: dict) -> list:
    response = await client.get("/api/notifications", headers=user["headers"])
    assert response.status_code == 200
    return response.json()["notifications"]


@pytest.mark.asyncio
async def test_requester_who_approves_gets_only_confirmation(
    client: AsyncClient, signup_user
):
    """
    Given a requester lists themselves among the approvers
    When the approval is created
    Then they get a single confirmation and the other approver a request
    """
    # Arrange
    requester = await signup_user("rita@example.com", "Rita")
    approver = await signup_user("aaron@example.com", "Aaron")

    # Act
    response = await client.post(
        "/api/approvals",
        json={"approver_ids": [requester["id"], approver["id"]]},
        headers=requester["headers"],
    )

    # Assert
    assert response.status_code == 201, response.text
    assert sorted(response.json()["approver_ids"]) == sorted(
        [requester["id"], approver["id"]]
    )

    mine = await _notifications(client, requester)
    assert len(mine) == 1
    assert mine[0]["title"] == "Approval Request Submitted"
    assert mine[0]["message"] == (
        'Your approval request for "General Approval" has been submitted '
        "and is pending review"
    )

    theirs = await _notifications(client, approver)
    assert len(theirs) == 1
    assert theirs[0]["type"] == "approval_requested"
    assert theirs[0]["message"] == "Rita requested approval for: General Approval"
    assert theirs[0]["entity_type"] == "approval"


@pytest.mark.asyncio
async def test_status_change_fans_out(client: AsyncClient, signup_user):
    # Arrange
    requester = await signup_user("rita@example.com", "Rita")
    first = await signup_user("aaron@example.com", "Aaron")
    second = await signup_user("bea@example.com", "Bea")
    created = await client.post(
        "/api/approvals",
        json={"approver_ids": [first["id"], second["id"]]},
        headers=requester["headers"],
    )
    approval_id = created.json()["id"]

    # Act
    changed = await client.post(
        f"/api/approvals/{approval_id}/status",
        json={"status": "approved"},
        headers=first["headers"],
    )
    by_requester = await client.post(
        f"/api/approvals/{approval_id}/status",
        json={"status": "declined"},
        headers=requester["headers"],
    )

    # Assert
    assert changed.status_code == 200, changed.text
    assert changed.json()["status"] == "approved"
    assert by_requester.status_code == 403

    requester_feed = await _notifications(client, requester)
    assert requester_feed[0]["type"] == "approval_status_changed"
    assert requester_feed[0]["message"] == (
        'Your approval request "General Approval" has been approved by Aaron'
    )
    assert requester_feed[0]["priority"] == "high"

    second_feed = await _notifications(client, second)
    assert second_feed[0]["message"] == '"General Approval" has been approved by Aaron'

    first_feed = await _notifications(client, first)
    assert all(n["type"] != "approval_status_changed" for n in first_feed)


@pytest.mark.asyncio
async def test_unknown_approver_is_rejected(client: AsyncClient, signup_user):
    requester = await signup_user("rita@example.com")

    response = await client.post(
        "/api/approvals",
        json={"approver_ids": ["00000000-0000-0000-0000-000000000001"]},
        headers=requester["headers"],
    )

    assert response.status_code in (400, 404)


@pytest.mark.asyncio
async def test_comment_and_response_messages(client: AsyncClient, signup_user):
    """
    Given an approval with two approvers
    When one approver comments and then responds
    Then the others see who commented, on what, and what was said
    """
    # Arrange
    requester = await signup_user("rita@example.com", "Rita")
    aaron = await signup_user("aaron@example.com", "Aaron")
    bea = await signup_user("bea@example.com", "Bea")
    created = await client.post(
        "/api/approvals",
        json={"approver_ids": [aaron["id"], bea["id"]]},
        headers=requester["headers"],
    )
    approval_id = created.json()["id"]

    # Act
    comment = await client.post(
        f"/api/approvals/{approval_id}/comments",
        json={"comment": "Looks good to me"},
        headers=aaron["headers"],
    )
    response = await client.post(
        f"/api/approvals/{approval_id}/responses",
        json={"status": "approved"},
        headers=aaron["headers"],
    )

    # Assert
    assert comment.status_code == 201, comment.text
    assert response.status_code == 201, response.text

    bea_feed = await _notifications(client, bea)
    assert bea_feed[0]["title"] == "New Approval Response"
    assert bea_feed[0]["message"] == 'Aaron responded to "General Approval" with: approved'
    assert bea_feed[1]["title"] == "New Approval Comment"
    assert bea_feed[1]["message"] == (
        'Aaron commented on "General Approval": Looks good to me'
    )

    requester_feed = await _notifications(client, requester)
    assert requester_feed[0]["type"] == "approval_status_changed"
    assert requester_feed[0]["message"] == (
        'Aaron responded to your approval request for "General Approval"'
    )
    assert requester_feed[1]["message"] == (
        'Aaron commented on "General Approval": Looks good to me'
    )

    aaron_feed = await _notifications(client, aaron)
    assert [n["type"] for n in aaron_feed] == ["approval_requested"]
