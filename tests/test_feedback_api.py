"""Integration tests for moderated comments and reviews."""

import pytest

from conftest import API, bearer, register_active_user


@pytest.fixture
def admin_headers(admin_token):
    return bearer(admin_token)


@pytest.fixture
def user_headers(user_token):
    return bearer(user_token)


@pytest.fixture
def product(client, admin_headers):
    category = client.post(f"{API}/admin/categories/", json={"name": "Shoes"}, headers=admin_headers)
    response = client.post(
        f"{API}/admin/products/",
        json={"name": "Trail Runner", "categoryId": category.json()["category"]["id"], "price": 100},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["product"]


def _comment(client, headers, product_id, content="Great fit"):
    response = client.post(
        f"{API}/user/comments/",
        json={"productId": product_id, "content": content},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["comment"]


def _review(client, headers, product_id, rating):
    response = client.post(
        f"{API}/user/reviews/",
        json={"productId": product_id, "rating": rating, "comment": "Solid", "title": "Review"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["review"]


class TestComments:
    def test_new_comment_is_pending(self, client, user_headers, admin_headers, product):
        comment = _comment(client, user_headers, product["id"])

        assert comment["isApproved"] is False
        public = client.get(f"{API}/user/comments/product/{product['id']}").json()
        assert public["totalItems"] == 0
        pending = client.get(f"{API}/admin/comments/pending", headers=admin_headers).json()
        assert [item["id"] for item in pending["comments"]] == [comment["id"]]

    def test_approve_then_visible_with_replies(self, client, outbox, user_headers, admin_headers, product):
        comment = _comment(client, user_headers, product["id"])

        blocked = client.post(
            f"{API}/user/comments/reply",
            json={"parentId": comment["id"], "content": "Agreed"},
            headers=user_headers,
        )
        assert blocked.status_code == 400

        approved = client.patch(f"{API}/admin/comments/{comment['id']}/approve", headers=admin_headers)
        assert approved.json()["message"] == "Comment approved successfully"
        again = client.patch(f"{API}/admin/comments/{comment['id']}/approve", headers=admin_headers)
        assert again.json()["message"] == "Comment is already approved"

        other = bearer(register_active_user(client, outbox, username="other", email="other@example.com")["accessToken"])
        reply = client.post(
            f"{API}/user/comments/reply",
            json={"parentId": comment["id"], "content": "Agreed"},
            headers=other,
        ).json()["comment"]
        client.patch(f"{API}/admin/comments/{reply['id']}/approve", headers=admin_headers)

        body = client.get(f"{API}/user/comments/product/{product['id']}").json()
        assert body["product"]["slug"] == "trail-runner"
        assert body["totalItems"] == 1
        thread = body["comments"][0]
        assert thread["content"] == "Great fit"
        assert [item["content"] for item in thread["replies"]] == ["Agreed"]
        assert thread["replies"][0]["user"]["username"] == "other"

    def test_replies_cannot_nest(self, client, user_headers, admin_headers, product):
        comment = _comment(client, user_headers, product["id"])
        client.patch(f"{API}/admin/comments/{comment['id']}/approve", headers=admin_headers)
        reply = client.post(
            f"{API}/user/comments/reply",
            json={"parentId": comment["id"], "content": "First"},
            headers=user_headers,
        ).json()["comment"]
        client.patch(f"{API}/admin/comments/{reply['id']}/approve", headers=admin_headers)

        nested = client.post(
            f"{API}/user/comments/reply",
            json={"parentId": reply["id"], "content": "Second"},
            headers=user_headers,
        )
        assert nested.status_code == 400
        assert nested.json()["message"] == "Nested replies are not allowed"

    def test_only_author_or_admin_deletes(self, client, outbox, user_headers, admin_headers, product):
        mine = _comment(client, user_headers, product["id"])
        other = bearer(register_active_user(client, outbox, username="other", email="other@example.com")["accessToken"])

        forbidden = client.delete(f"{API}/user/comments/{mine['id']}", headers=other)
        assert forbidden.status_code == 403
        assert forbidden.json()["message"] == "You can only delete your own comments"

        assert client.delete(f"{API}/user/comments/{mine['id']}", headers=user_headers).status_code == 200
        second = _comment(client, user_headers, product["id"], content="Again")
        assert client.delete(f"{API}/admin/comments/{second['id']}", headers=admin_headers).status_code == 200
        assert client.get(f"{API}/user/comments/me", headers=user_headers).json()["totalItems"] == 0

    def test_reject_deletes(self, client, user_headers, admin_headers, product):
        comment = _comment(client, user_headers, product["id"])

        response = client.delete(f"{API}/admin/comments/{comment['id']}/reject", headers=admin_headers)

        assert response.json()["message"] == "Comment rejected and deleted successfully"
        missing = client.patch(f"{API}/admin/comments/{comment['id']}/approve", headers=admin_headers)
        assert missing.status_code == 404

    def test_unknown_product(self, client, user_headers):
        response = client.post(
            f"{API}/user/comments/",
            json={"productId": "missing", "content": "Hello"},
            headers=user_headers,
        )

        assert response.status_code == 404


class TestReviews:
    def test_one_review_per_product(self, client, user_headers, product):
        _review(client, user_headers, product["id"], 4)
        response = client.post(
            f"{API}/user/reviews/",
            json={"productId": product["id"], "rating": 5, "comment": "Again"},
            headers=user_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "You have already reviewed this product"

    def test_rating_out_of_range(self, client, user_headers, product):
        response = client.post(
            f"{API}/user/reviews/",
            json={"productId": product["id"], "rating": 6, "comment": "Too good"},
            headers=user_headers,
        )

        assert response.status_code == 400

    def test_approval_updates_product_rating(self, client, outbox, user_headers, admin_headers, product):
        first = _review(client, user_headers, product["id"], 4)
        other = bearer(register_active_user(client, outbox, username="other", email="other@example.com")["accessToken"])
        second = _review(client, other, product["id"], 5)

        before = client.get(f"{API}/public/products/{product['id']}").json()["product"]
        assert before["reviewCount"] == 0

        for review in (first, second):
            response = client.patch(f"{API}/admin/reviews/{review['id']}/approve", headers=admin_headers)
            assert response.json()["message"] == "Review approved successfully"

        after = client.get(f"{API}/public/products/{product['id']}").json()["product"]
        assert after["reviewCount"] == 2
        assert after["avgRating"] == 4.5

        listed = client.get(f"{API}/user/reviews/product/{product['id']}").json()
        assert listed["totalItems"] == 2

        client.delete(f"{API}/user/reviews/{second['id']}", headers=other)
        final = client.get(f"{API}/public/products/{product['id']}").json()["product"]
        assert final["reviewCount"] == 1
        assert final["avgRating"] == 4

    def test_pending_and_reject(self, client, user_headers, admin_headers, product):
        review = _review(client, user_headers, product["id"], 2)

        pending = client.get(f"{API}/admin/reviews/pending", headers=admin_headers).json()
        assert [item["id"] for item in pending["reviews"]] == [review["id"]]

        response = client.delete(f"{API}/admin/reviews/{review['id']}/reject", headers=admin_headers)
        assert response.json()["message"] == "Review rejected and deleted successfully"
        assert client.get(f"{API}/user/reviews/me", headers=user_headers).json()["totalItems"] == 0

    def test_cannot_delete_someone_elses_review(self, client, outbox, user_headers, product):
        review = _review(client, user_headers, product["id"], 3)
        other = bearer(register_active_user(client, outbox, username="other", email="other@example.com")["accessToken"])

        response = client.delete(f"{API}/user/reviews/{review['id']}", headers=other)

        assert response.status_code == 403
