"""
Test the Kanban board endpoints.
"""
from fastapi import status


def _create(client, headers, **fields):
    payload = {"name": "Acme Corp", "position": "Engineer"}
    payload.update(fields)
    response = client.post("/api/companies/", json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


class TestBoard:

    def test_empty_board_has_six_columns(self, test_client, auth_headers):
        response = test_client.get("/api/board/", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [c["status"] for c in data["columns"]] == [
            "pending", "applied", "aptitude", "interview", "passed", "rejected",
        ]
        assert [c["title"] for c in data["columns"]] == [
            "To Apply", "Applied", "Aptitude Test", "Interviewing", "Offer", "Rejected",
        ]
        assert all(c["count"] == 0 and c["companies"] == [] for c in data["columns"])
        assert data["total"] == 0

    def test_companies_land_in_their_column(self, test_client, auth_headers):
        _create(test_client, auth_headers, name="A", status="applied")
        _create(test_client, auth_headers, name="B", status="applied")
        _create(test_client, auth_headers, name="C", status="rejected")

        columns = {c["status"]: c for c in test_client.get("/api/board/", headers=auth_headers).json()["columns"]}

        assert columns["applied"]["count"] == 2
        assert sorted(c["name"] for c in columns["applied"]["companies"]) == ["A", "B"]
        assert [c["name"] for c in columns["rejected"]["companies"]] == ["C"]
        assert columns["pending"]["count"] == 0


class TestMove:

    def test_move_to_another_column(self, test_client, auth_headers):
        company = _create(test_client, auth_headers)

        response = test_client.post(
            "/api/board/move", json={"companyId": company["id"], "status": "interview"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["moved"] is True
        assert response.json()["company"]["status"] == "interview"

        columns = {c["status"]: c for c in test_client.get("/api/board/", headers=auth_headers).json()["columns"]}
        assert columns["pending"]["count"] == 0
        assert [c["id"] for c in columns["interview"]["companies"]] == [company["id"]]

    def test_move_to_same_column_is_a_no_op(self, test_client, auth_headers):
        company = _create(test_client, auth_headers, status="applied")

        response = test_client.post(
            "/api/board/move", json={"companyId": company["id"], "status": "applied"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["moved"] is False
        assert response.json()["company"]["status"] == "applied"

    def test_move_unknown_company(self, test_client, auth_headers):
        response = test_client.post(
            "/api/board/move", json={"companyId": "missing", "status": "passed"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_move_someone_elses_company(self, test_client, auth_headers, other_auth_headers):
        company = _create(test_client, auth_headers)

        response = test_client.post(
            "/api/board/move", json={"companyId": company["id"], "status": "passed"}, headers=other_auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert test_client.get(f"/api/companies/{company['id']}", headers=auth_headers).json()["status"] == "pending"

    def test_move_to_unknown_status(self, test_client, auth_headers):
        company = _create(test_client, auth_headers)
        response = test_client.post(
            "/api/board/move", json={"companyId": company["id"], "status": "hired"}, headers=auth_headers
        )
        assert response.status_code == 422


class TestColumnTitles:

    def test_rename_is_persisted_per_user(self, test_client, auth_headers, other_auth_headers):
        response = test_client.put(
            "/api/board/columns/interview", json={"title": "Phone Screen"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Phone Screen"

        mine = test_client.get("/api/board/", headers=auth_headers).json()["columns"]
        theirs = test_client.get("/api/board/", headers=other_auth_headers).json()["columns"]
        assert mine[3]["title"] == "Phone Screen"
        assert mine[4]["title"] == "Offer"
        assert theirs[3]["title"] == "Interviewing"

    def test_second_rename_keeps_the_first(self, test_client, auth_headers):
        test_client.put("/api/board/columns/pending", json={"title": "Wishlist"}, headers=auth_headers)
        test_client.put("/api/board/columns/passed", json={"title": "Offers"}, headers=auth_headers)

        titles = [c["title"] for c in test_client.get("/api/board/", headers=auth_headers).json()["columns"]]
        assert titles[0] == "Wishlist"
        assert titles[4] == "Offers"

    def test_invalid_title_is_rejected(self, test_client, auth_headers):
        response = test_client.put("/api/board/columns/applied", json={"title": ""}, headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = test_client.put(
            "/api/board/columns/applied", json={"title": "<script>x</script>Sent"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        titles = [c["title"] for c in test_client.get("/api/board/", headers=auth_headers).json()["columns"]]
        assert titles[1] == "Applied"

    def test_unknown_column(self, test_client, auth_headers):
        response = test_client.put("/api/board/columns/archived", json={"title": "Archive"}, headers=auth_headers)
        assert response.status_code == 422
