from __future__ import annotations

from conftest import auth_headers, create_project, create_testimonial, register


def test_create_applies_defaults(client, token):
    project = create_project(client, token)
    testimonial = create_testimonial(client, token, project["id"])

    assert testimonial["project_id"] == project["id"]
    assert testimonial["type"] == "text"
    assert testimonial["source"] == "form"
    assert testimonial["is_approved"] is False
    assert testimonial["is_featured"] is False
    assert testimonial["tags"] == []
    assert testimonial["rating"] == 5


def test_create_accepts_type_and_source(client, token):
    project = create_project(client, token)
    testimonial = create_testimonial(
        client,
        token,
        project["id"],
        type="video",
        source="import",
        source_platform="twitter",
        video_url="https://videos.test/1.mp4",
    )
    assert testimonial["type"] == "video"
    assert testimonial["source"] == "import"
    assert testimonial["source_platform"] == "twitter"


def test_get_update_delete(client, token):
    headers = auth_headers(token)
    project = create_project(client, token)
    testimonial = create_testimonial(client, token, project["id"])
    url = f"/api/v1/testimonials/{testimonial['id']}"

    res = client.get(url, headers=headers)
    assert res.status_code == 200
    assert res.json()["author_name"] == "Jane Doe"

    res = client.put(url, headers=headers, json={"content": "Even better", "rating": 4})
    assert res.status_code == 200
    body = res.json()
    assert body["content"] == "Even better"
    assert body["rating"] == 4
    assert body["author_name"] == "Jane Doe"

    assert client.delete(url, headers=headers).status_code == 204
    assert client.get(url, headers=headers).status_code == 404


def test_update_cannot_set_moderation_flags(client, token):
    headers = auth_headers(token)
    project = create_project(client, token)
    testimonial = create_testimonial(client, token, project["id"])

    res = client.put(
        f"/api/v1/testimonials/{testimonial['id']}",
        headers=headers,
        json={"is_approved": True, "is_featured": True},
    )
    assert res.status_code == 200
    assert res.json()["is_approved"] is False
    assert res.json()["is_featured"] is False


def test_approve_and_feature_toggle(client, token):
    headers = auth_headers(token)
    project = create_project(client, token)
    testimonial = create_testimonial(client, token, project["id"])
    base = f"/api/v1/testimonials/{testimonial['id']}"

    res = client.post(f"{base}/approve", headers=headers)
    assert res.status_code == 200
    assert res.json()["is_approved"] is True
    assert res.json()["is_featured"] is False

    res = client.post(f"{base}/approve", headers=headers)
    assert res.json()["is_approved"] is False

    res = client.post(f"{base}/feature", headers=headers)
    assert res.json()["is_featured"] is True
    assert res.json()["is_approved"] is False


def test_list_filters(client, token):
    headers = auth_headers(token)
    project = create_project(client, token)
    approved = create_testimonial(client, token, project["id"], author_name="A")
    featured = create_testimonial(client, token, project["id"], author_name="B")
    create_testimonial(client, token, project["id"], author_name="C")
    client.post(f"/api/v1/testimonials/{approved['id']}/approve", headers=headers)
    client.post(f"/api/v1/testimonials/{featured['id']}/feature", headers=headers)

    url = f"/api/v1/projects/{project['id']}/testimonials"
    assert len(client.get(url, headers=headers).json()) == 3

    res = client.get(url, headers=headers, params={"is_approved": "true"})
    assert [t["id"] for t in res.json()] == [approved["id"]]

    res = client.get(url, headers=headers, params={"is_featured": "true"})
    assert [t["id"] for t in res.json()] == [featured["id"]]

    res = client.get(url, headers=headers, params={"is_approved": "false", "is_featured": "false"})
    assert [t["author_name"] for t in res.json()] == ["C"]


def test_strangers_cannot_touch_testimonials(client, token):
    project = create_project(client, token)
    testimonial = create_testimonial(client, token, project["id"])
    stranger = auth_headers(register(client)["token"])
    base = f"/api/v1/testimonials/{testimonial['id']}"

    assert client.get(base, headers=stranger).status_code == 403
    assert client.put(base, headers=stranger, json={"content": "hacked"}).status_code == 403
    assert client.post(f"{base}/approve", headers=stranger).status_code == 403
    assert client.post(f"{base}/feature", headers=stranger).status_code == 403
    assert client.delete(base, headers=stranger).status_code == 403
    assert client.get(f"/api/v1/projects/{project['id']}/testimonials", headers=stranger).status_code == 403
    res = client.post(
        f"/api/v1/projects/{project['id']}/testimonials",
        headers=stranger,
        json={"author_name": "Mallory"},
    )
    assert res.status_code == 403

    res = client.get(base, headers=auth_headers(token))
    assert res.json()["content"] == "Great product!"
    assert res.json()["is_approved"] is False


def test_out_of_range_numbers_are_rejected_before_the_store(client, token):
    headers = auth_headers(token)
    project = create_project(client, token)
    url = f"/api/v1/projects/{project['id']}/testimonials"

    res = client.post(url, headers=headers, json={"author_name": "A", "rating": 40000})
    assert res.status_code == 422
    res = client.post(url, headers=headers, json={"author_name": "A", "video_duration_seconds": 2**31})
    assert res.status_code == 422

    testimonial = create_testimonial(client, token, project["id"])
    res = client.put(f"/api/v1/testimonials/{testimonial['id']}", headers=headers, json={"rating": -40000})
    assert res.status_code == 422
