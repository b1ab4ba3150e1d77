from review_assistant.models import (
    Project,
    ProjectKeyword,
    ReferencePaper,
    ReviewDraft,
    ReviewPlan,
    ReviewTemplate,
    SearchedLiterature,
    StyleAnalysis,
)


def test_create_project_starts_as_draft(client):
    response = client.post("/api/projects", json={"name": "  深度学习综述 ", "description": "desc"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["name"] == "深度学习综述"
    assert data["data"]["status"] == "draft"


def test_create_project_requires_name(client):
    response = client.post("/api/projects", json={"description": "no name"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "项目名称不能为空"}


def test_list_projects_newest_first(client):
    client.post("/api/projects", json={"name": "first"})
    client.post("/api/projects", json={"name": "second"})

    data = client.get("/api/projects").json()["data"]
    assert [p["name"] for p in data] == ["second", "first"]


def test_get_missing_project_returns_404(client):
    response = client.get("/api/projects/9999")
    assert response.status_code == 404
    assert response.json()["error"] == "项目不存在"


def test_update_project_status(client, project):
    response = client.patch(f"/api/projects/{project.id}", json={"status": "completed"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "completed"
    assert response.json()["data"]["name"] == project.name


def test_update_project_rejects_unknown_status(client, project):
    response = client.patch(f"/api/projects/{project.id}", json={"status": "archived"})
    assert response.status_code == 400


def test_delete_project_removes_all_children(client, db, project):
    db.add_all([
        ReferencePaper(project_id=project.id, filename="a.pdf", file_path="/tmp/a.pdf", file_type="pdf"),
        StyleAnalysis(project_id=project.id, analysis_result="r", writing_guide="g"),
        ReviewPlan(project_id=project.id, plan_content="p", version=1),
        SearchedLiterature(project_id=project.id, title="t", source="search"),
        ReviewDraft(project_id=project.id, content="c", language="zh", version=1),
        ProjectKeyword(project_id=project.id, keyword="k", is_primary=True),
    ])
    db.commit()
    project_id = project.id

    response = client.delete(f"/api/projects/{project_id}")
    assert response.status_code == 200
    assert response.json()["success"] is True

    db.expire_all()
    assert db.query(Project).filter(Project.id == project_id).first() is None
    for model in (ReferencePaper, StyleAnalysis, ReviewPlan, SearchedLiterature, ReviewDraft, ProjectKeyword):
        assert db.query(model).filter(model.project_id == project_id).count() == 0

    assert client.get(f"/api/projects/{project_id}").status_code == 404


def test_delete_missing_project_returns_404(client):
    assert client.delete("/api/projects/4242").status_code == 404


def test_latest_analysis_and_plan_are_null_before_generation(client, project):
    assert client.get(f"/api/projects/{project.id}/analysis").json()["data"] is None
    assert client.get(f"/api/projects/{project.id}/plan").json()["data"] is None


def test_draft_is_null_before_first_save(client, project):
    response = client.get(f"/api/projects/{project.id}/draft", params={"language": "zh"})
    assert response.status_code == 200
    assert response.json()["data"] is None


def test_saving_draft_bumps_version_in_place(client, db, project):
    first = client.put(f"/api/projects/{project.id}/draft", json={"content": "v1", "language": "zh"})
    assert first.json()["data"]["version"] == 1

    second = client.put(f"/api/projects/{project.id}/draft", json={"content": "v2", "language": "zh"})
    assert second.json()["data"]["version"] == 2
    assert second.json()["data"]["id"] == first.json()["data"]["id"]

    latest = client.get(f"/api/projects/{project.id}/draft", params={"language": "zh"}).json()["data"]
    assert latest["content"] == "v2"
    assert db.query(ReviewDraft).filter(ReviewDraft.project_id == project.id).count() == 1


def test_drafts_are_kept_per_language(client, project):
    client.put(f"/api/projects/{project.id}/draft", json={"content": "中文", "language": "zh"})
    client.put(f"/api/projects/{project.id}/draft", json={"content": "English", "language": "en"})

    zh = client.get(f"/api/projects/{project.id}/draft", params={"language": "zh"}).json()["data"]
    en = client.get(f"/api/projects/{project.id}/draft", params={"language": "en"}).json()["data"]
    assert zh["content"] == "中文"
    assert en["content"] == "English"


def test_apply_template_creates_then_updates_plan(client, db, project):
    template = db.query(ReviewTemplate).filter(ReviewTemplate.is_default.is_(True)).first()

    response = client.post(f"/api/projects/{project.id}/apply-template", json={"templateId": template.id})
    assert response.status_code == 200
    plan = response.json()["data"]
    assert plan["plan_content"] == template.structure
    assert plan["version"] == 1

    again = client.post(f"/api/projects/{project.id}/apply-template", json={"templateId": template.id})
    assert again.json()["data"]["version"] == 2
    assert again.json()["data"]["id"] == plan["id"]


def test_apply_template_errors(client, project):
    assert client.post(f"/api/projects/{project.id}/apply-template", json={}).status_code == 400
    missing = client.post(f"/api/projects/{project.id}/apply-template", json={"templateId": 9999})
    assert missing.status_code == 404
    assert missing.json()["error"] == "模板不存在"
