"""
Tests for the /job-posts endpoints: quota gating on create, free updates,
ownership and the AI description helper.
"""
from sqlalchemy.orm import Query

from app.api.routes import job_posts as job_posts_routes
from app.db.models.job_post import JobPost
from app.db.models.subscription import Subscription
from app.services.job_post_service import SqlJobPostRepository
from app.services.subscription_service import lock_subscription_status


JOB = {
    "title": "Backend Engineer",
    "description": "Build and run our Python APIs.",
    "ai_generated_description": "",
}


def _seed_jobs(db_session, recruiter_id, count):
    for i in range(count):
        db_session.add(JobPost(recruiter_id=recruiter_id, title=f"Job {i}", description="Existing"))
    db_session.commit()


def test_create_job_post(client, make_recruiter):
    user, headers = make_recruiter(plan_id="profesional")

    response = client.post("/job-posts", json=JOB, headers=headers)

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Backend Engineer"
    assert data["description"] == "Build and run our Python APIs."
    assert data["recruiter_id"] == user.id


def test_create_uses_ai_description_when_manual_is_empty(client, make_recruiter):
    _, headers = make_recruiter()
    payload = {"title": "Data Analyst", "description": "", "ai_generated_description": "AI text"}

    response = client.post("/job-posts", json=payload, headers=headers)

    assert response.status_code == 201
    assert response.json()["description"] == "AI text"
    assert response.json()["ai_generated_description"] == "AI text"


def test_create_requires_auth(client):
    response = client.post("/job-posts", json=JOB)
    assert response.status_code == 401


def test_create_without_title_returns_422(client, make_recruiter, db_session):
    _, headers = make_recruiter()

    response = client.post("/job-posts", json={**JOB, "title": ""}, headers=headers)

    assert response.status_code == 422
    assert response.json()["detail"] == "The job title and a description (manual or AI) are required."
    assert db_session.query(JobPost).count() == 0


def test_create_without_any_description_returns_422(client, make_recruiter):
    _, headers = make_recruiter()

    response = client.post("/job-posts", json={"title": "QA"}, headers=headers)

    assert response.status_code == 422


def test_basico_plan_blocks_second_post(client, make_recruiter, db_session):
    user, headers = make_recruiter(plan_id="basico")
    _seed_jobs(db_session, user.id, 1)

    response = client.post("/job-posts", json=JOB, headers=headers)

    assert response.status_code == 402
    detail = response.json()["detail"]
    assert detail["code"] == "PAYWALL"
    assert detail["plan"] == "basico"
    assert detail["limit"] == 1
    assert "1 active position" in detail["detail"]
    assert '"Básico"' in detail["detail"]
    assert db_session.query(JobPost).count() == 1


def test_inactive_subscription_returns_403(client, make_recruiter, db_session):
    _, headers = make_recruiter(plan_id="empresarial", status="canceled")

    response = client.post("/job-posts", json=JOB, headers=headers)

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "SUBSCRIPTION_INACTIVE"
    assert db_session.query(JobPost).count() == 0


def test_missing_subscription_is_treated_as_inactive(client, make_recruiter):
    _, headers = make_recruiter(plan_id=None)

    response = client.post("/job-posts", json=JOB, headers=headers)

    assert response.status_code == 403


def test_trialing_subscription_can_publish(client, make_recruiter):
    _, headers = make_recruiter(plan_id="profesional", status="trialing")

    response = client.post("/job-posts", json=JOB, headers=headers)

    assert response.status_code == 201


def test_enterprise_plan_has_no_limit(client, make_recruiter, db_session):
    user, headers = make_recruiter(plan_id="enterprise")
    _seed_jobs(db_session, user.id, 30)

    response = client.post("/job-posts", json=JOB, headers=headers)

    assert response.status_code == 201


def test_update_at_limit_is_allowed(client, make_recruiter, db_session):
    user, headers = make_recruiter(plan_id="basico")
    _seed_jobs(db_session, user.id, 1)
    job_id = db_session.query(JobPost).first().id

    response = client.put(
        f"/job-posts/{job_id}",
        json={"title": "Senior Backend Engineer", "description": "Updated", "ai_generated_description": ""},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["title"] == "Senior Backend Engineer"
    assert db_session.query(JobPost).count() == 1


def test_update_with_inactive_subscription_is_allowed(client, make_recruiter, db_session):
    user, headers = make_recruiter(status="past_due")
    _seed_jobs(db_session, user.id, 1)
    job_id = db_session.query(JobPost).first().id

    response = client.put(f"/job-posts/{job_id}", json=JOB, headers=headers)

    assert response.status_code == 200


def test_update_validates_draft(client, make_recruiter, db_session):
    user, headers = make_recruiter()
    _seed_jobs(db_session, user.id, 1)
    job_id = db_session.query(JobPost).first().id

    response = client.put(f"/job-posts/{job_id}", json={**JOB, "description": ""}, headers=headers)

    assert response.status_code == 422


def test_cannot_touch_another_recruiters_job(client, make_recruiter, db_session):
    owner, _ = make_recruiter(email="owner@example.com")
    _, other_headers = make_recruiter(email="other@example.com")
    _seed_jobs(db_session, owner.id, 1)
    job_id = db_session.query(JobPost).first().id

    assert client.get(f"/job-posts/{job_id}", headers=other_headers).status_code == 404
    assert client.put(f"/job-posts/{job_id}", json=JOB, headers=other_headers).status_code == 404
    assert client.delete(f"/job-posts/{job_id}", headers=other_headers).status_code == 404


def test_list_job_posts_includes_plan_limit(client, make_recruiter, db_session):
    user, headers = make_recruiter(plan_id="profesional")
    _seed_jobs(db_session, user.id, 2)

    response = client.get("/job-posts", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["job_limit"] == 3
    assert len(data["job_posts"]) == 2


def test_list_job_posts_enterprise_limit_is_null(client, make_recruiter):
    _, headers = make_recruiter(plan_id="enterprise")

    response = client.get("/job-posts", headers=headers)

    assert response.json()["job_limit"] is None


def test_delete_frees_quota(client, make_recruiter, db_session):
    user, headers = make_recruiter(plan_id="basico")
    _seed_jobs(db_session, user.id, 1)
    job_id = db_session.query(JobPost).first().id

    assert client.delete(f"/job-posts/{job_id}", headers=headers).status_code == 204
    assert client.post("/job-posts", json=JOB, headers=headers).status_code == 201


def test_ai_description_falls_back_to_template(client, make_recruiter, monkeypatch):
    monkeypatch.setattr("app.api.routes.job_posts.get_llm_provider", lambda: None)
    _, headers = make_recruiter()

    response = client.post(
        "/job-posts/ai-description",
        json={"title": "Data Engineer", "notes": "- Airflow\n- dbt"},
        headers=headers,
    )

    assert response.status_code == 200
    text = response.json()["ai_generated_description"]
    assert "Data Engineer" in text
    assert "- Airflow" in text
    assert "- dbt" in text


def test_create_locks_subscription_before_counting(client, make_recruiter, monkeypatch):
    order = []
    real_lock = job_posts_routes.lock_subscription_status
    real_count = SqlJobPostRepository.count

    def lock(db, user_id):
        order.append("lock")
        return real_lock(db, user_id)

    def count(self):
        order.append("count")
        return real_count(self)

    monkeypatch.setattr("app.api.routes.job_posts.lock_subscription_status", lock)
    monkeypatch.setattr(SqlJobPostRepository, "count", count)
    _, headers = make_recruiter(plan_id="profesional")

    response = client.post("/job-posts", json=JOB, headers=headers)

    assert response.status_code == 201
    assert order == ["lock", "count"]


def test_lock_subscription_status_selects_for_update(db_session, make_recruiter, monkeypatch):
    locked = []
    real_with_for_update = Query.with_for_update

    def with_for_update(self, *args, **kwargs):
        locked.append(self.column_descriptions[0]["entity"])
        return real_with_for_update(self, *args, **kwargs)

    monkeypatch.setattr(Query, "with_for_update", with_for_update)
    user, _ = make_recruiter(plan_id="profesional", status="trialing")

    subscription = lock_subscription_status(db_session, user.id)

    assert locked == [Subscription]
    assert subscription.plan_id == "profesional"
    assert subscription.is_active
