"""API tests for /posts: ownership over HTTP, listing parameters, views, likes and comments."""

import unittest

from app.models import Post
from tests.support import ApiTestCase, api, bearer


class PostsApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ada_token = self.register_token("ada")
        self.category_id = self.create_category(self.ada_token, "Travel")["id"]


class TestOwnershipFlow(PostsApiTestCase):
    def test_other_user_cannot_edit_and_post_is_unchanged(self) -> None:
        login = self.client.post(
            api("/auth/login"), json={"identifier": "ada", "password": "secret123"}
        )
        self.assertEqual(login.status_code, 200)
        ada_token = login.json()["token"]

        post = self.create_post(ada_token, self.category_id, content="Original body text.")
        grace_token = self.register_token("grace")

        resp = self.client.put(
            api(f"/posts/{post['id']}"),
            json={"content": "Defaced by someone else."},
            headers=bearer(grace_token),
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(
            resp.json(), {"message": "Access denied. You can only edit your own posts."}
        )

        fetched = self.client.get(api(f"/posts/{post['id']}")).json()
        self.assertEqual(fetched["content"], "Original body text.")

        delete = self.client.delete(api(f"/posts/{post['id']}"), headers=bearer(grace_token))
        self.assertEqual(delete.status_code, 403)
        self.assertEqual(self.db.query(Post).count(), 1)

    def test_owner_updates_and_deletes(self) -> None:
        post = self.create_post(self.ada_token, self.category_id)
        resp = self.client.put(
            api(f"/posts/{post['id']}"),
            json={"title": "A week in the hills", "tags": "walking, hills"},
            headers=bearer(self.ada_token),
        )
        self.assertEqual(resp.status_code, 200)
        updated = resp.json()["post"]
        self.assertEqual(updated["slug"], "a-week-in-the-hills")
        self.assertEqual(updated["tags"], ["walking", "hills"])

        resp = self.client.delete(api(f"/posts/{post['id']}"), headers=bearer(self.ada_token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Post deleted successfully"})
        self.assertEqual(self.client.get(api(f"/posts/{post['id']}")).status_code, 404)

    def test_create_requires_token(self) -> None:
        resp = self.client.post(
            api("/posts"),
            json={"title": "t", "content": "long enough", "category": self.category_id},
        )
        self.assertEqual(resp.status_code, 401)

    def test_update_missing_post(self) -> None:
        resp = self.client.put(
            api("/posts/999"), json={"title": "x"}, headers=bearer(self.ada_token)
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"message": "Post not found"})


class TestCreateValidation(PostsApiTestCase):
    def test_empty_title_and_short_content_reported_together(self) -> None:
        resp = self.client.post(
            api("/posts"),
            json={"title": "   ", "content": "abc", "category": self.category_id},
            headers=bearer(self.ada_token),
        )
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body["message"], "Validation failed")
        self.assertEqual([e["field"] for e in body["errors"]], ["title", "content"])
        self.assertEqual(self.db.query(Post).count(), 0)

    def test_unknown_category(self) -> None:
        resp = self.client.post(
            api("/posts"),
            json={"title": "Fine", "content": "Fine content", "category": 4242},
            headers=bearer(self.ada_token),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["errors"], [{"field": "category", "message": "Category not found"}])

    def test_bad_status_and_category_reference(self) -> None:
        resp = self.client.post(
            api("/posts"),
            json={"title": "Fine", "content": "Fine content", "category": "abc", "status": "live"},
            headers=bearer(self.ada_token),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json()["errors"],
            [
                {"field": "category", "message": "Valid category ID is required"},
                {"field": "status", "message": "Status must be one of draft, published, archived"},
            ],
        )

    def test_malformed_json(self) -> None:
        resp = self.client.post(
            api("/posts"),
            content=b"{not json",
            headers={**bearer(self.ada_token), "Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["errors"][0]["field"], "body")

    def test_created_payload(self) -> None:
        post = self.create_post(self.ada_token, self.category_id, tags=["walking"])
        self.assertEqual(post["author"]["username"], "ada")
        self.assertEqual(post["category"], {"id": self.category_id, "name": "Travel"})
        self.assertEqual(post["status"], "published")
        self.assertEqual(post["readTime"], 1)
        self.assertEqual(post["likes"], 0)
        self.assertEqual(post["comments"], [])


class TestListing(PostsApiTestCase):
    def test_pagination_params(self) -> None:
        for i in range(25):
            self.create_post(self.ada_token, self.category_id, title=f"Trip {i}")
        resp = self.client.get(api("/posts"), params={"page": 3, "limit": 10})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(len(body["posts"]), 5)
        self.assertEqual(
            body["pagination"],
            {
                "currentPage": 3,
                "totalPages": 3,
                "totalPosts": 25,
                "limit": 10,
                "hasNextPage": False,
                "hasPrevPage": True,
            },
        )

    def test_invalid_query_params(self) -> None:
        resp = self.client.get(api("/posts"), params={"page": 0, "limit": 1000})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual([e["field"] for e in resp.json()["errors"]], ["page", "limit"])

    def test_sort_and_search_params(self) -> None:
        for title in ("Bergen", "Alps", "Crete"):
            self.create_post(self.ada_token, self.category_id, title=title, content="Days on foot.")
        resp = self.client.get(
            api("/posts"), params={"sortBy": "title", "sortOrder": "asc", "search": "e"}
        )
        self.assertEqual([p["title"] for p in resp.json()["posts"]], ["Bergen", "Crete"])

    def test_category_filter_by_id_or_name(self) -> None:
        self.create_post(self.ada_token, self.category_id, title="Fjords")
        for value in (str(self.category_id), "Travel", "All"):
            resp = self.client.get(api("/posts"), params={"category": value})
            self.assertEqual([p["title"] for p in resp.json()["posts"]], ["Fjords"], value)

    def test_unusual_digit_category_is_not_an_error(self) -> None:
        self.create_post(self.ada_token, self.category_id)
        resp = self.client.get(api("/posts"), params={"category": "\u00b2"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["posts"], [])

    def test_drafts_need_token(self) -> None:
        self.create_post(self.ada_token, self.category_id, status="draft")
        self.assertEqual(self.client.get(api("/posts"), params={"status": "draft"}).status_code, 401)
        resp = self.client.get(
            api("/posts"), params={"status": "draft"}, headers=bearer(self.ada_token)
        )
        self.assertEqual(resp.json()["pagination"]["totalPosts"], 1)
        self.assertEqual(self.client.get(api("/posts")).json()["posts"], [])

    def test_mine_lists_every_status(self) -> None:
        self.create_post(self.ada_token, self.category_id, title="Draft", status="draft")
        self.create_post(self.ada_token, self.category_id, title="Live")
        other = self.register_token("grace")
        self.create_post(other, self.category_id, title="Not mine")
        resp = self.client.get(api("/posts/mine"), headers=bearer(self.ada_token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(sorted(p["title"] for p in resp.json()["posts"]), ["Draft", "Live"])


class TestReading(PostsApiTestCase):
    def test_views_increment(self) -> None:
        post = self.create_post(self.ada_token, self.category_id)
        self.client.get(api(f"/posts/{post['id']}"))
        resp = self.client.get(api(f"/posts/{post['id']}"))
        self.assertEqual(resp.json()["views"], 2)

    def test_draft_is_404_for_others(self) -> None:
        post = self.create_post(self.ada_token, self.category_id, status="draft")
        self.assertEqual(self.client.get(api(f"/posts/{post['id']}")).status_code, 404)
        owner = self.client.get(api(f"/posts/{post['id']}"), headers=bearer(self.ada_token))
        self.assertEqual(owner.status_code, 200)

    def test_non_integer_id(self) -> None:
        resp = self.client.get(api("/posts/abc"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["errors"][0]["field"], "post_id")


class TestLikesAndComments(PostsApiTestCase):
    def test_like_toggle(self) -> None:
        post = self.create_post(self.ada_token, self.category_id)
        url = api(f"/posts/{post['id']}/like")
        first = self.client.post(url, headers=bearer(self.ada_token)).json()
        second = self.client.post(url, headers=bearer(self.ada_token)).json()
        self.assertEqual(first, {"message": "Post liked", "likes": 1, "userLiked": True})
        self.assertEqual(second, {"message": "Post unliked", "likes": 0, "userLiked": False})

    def test_comment_lifecycle(self) -> None:
        post = self.create_post(self.ada_token, self.category_id)
        grace = self.register_token("grace")
        resp = self.client.post(
            api(f"/posts/{post['id']}/comments"),
            json={"content": "  Lovely trip!  "},
            headers=bearer(grace),
        )
        self.assertEqual(resp.status_code, 201)
        comment = resp.json()["comment"]
        self.assertEqual(comment["content"], "Lovely trip!")
        self.assertEqual(comment["author"]["username"], "grace")

        detail = self.client.get(api(f"/posts/{post['id']}")).json()
        self.assertEqual([c["id"] for c in detail["comments"]], [comment["id"]])

        url = api(f"/posts/{post['id']}/comments/{comment['id']}")
        self.assertEqual(self.client.delete(url, headers=bearer(self.ada_token)).status_code, 403)
        self.assertEqual(self.client.delete(url, headers=bearer(grace)).status_code, 200)
        self.assertEqual(self.client.delete(url, headers=bearer(grace)).status_code, 404)

    def test_empty_comment_rejected(self) -> None:
        post = self.create_post(self.ada_token, self.category_id)
        resp = self.client.post(
            api(f"/posts/{post['id']}/comments"),
            json={"content": "   "},
            headers=bearer(self.ada_token),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["errors"][0]["field"], "content")


if __name__ == "__main__":
    unittest.main()
