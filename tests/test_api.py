def _data(resp):
    body = resp.get_json()
    assert body["success"] is True
    return body["data"]


def test_list_employees_paginates_with_derived_columns(client, directory):
    resp = client.get("/api/v1/employees?orderBy=code&per_page=2")
    assert resp.status_code == 200
    page = _data(resp)
    assert page["sortable"] == ["code", "first_name", "last_name", "email", "base_pay", "created_at"]
    assert (page["current_page"], page["last_page"], page["per_page"], page["total"]) == (1, 2, 2, 4)
    first = page["items"][0]
    assert first["code"] == "E001"
    assert first["full_name"] == "Alice Smith"
    assert first["gross_pay"] == 1100.0


def test_list_employees_search_through_department(client, directory):
    page = _data(client.get("/api/v1/employees?q=Research"))
    assert [e["code"] for e in page["items"]] == ["E003"]
    assert page["items"][0]["full_name"] == "Carol"


def test_list_employees_filters_then_searches(client, directory):
    page = _data(client.get("/api/v1/employees?status=inactive&q=globex"))
    assert [e["code"] for e in page["items"]] == ["E004"]


def test_list_employees_last_page_clamp(client, directory):
    page = _data(client.get("/api/v1/employees?orderBy=code&per_page=3&page=50"))
    assert page["current_page"] == 2
    assert [e["code"] for e in page["items"]] == ["E004"]


def test_list_employees_sort_desc(client, directory):
    page = _data(client.get("/api/v1/employees?orderBy=first_name&orderDirection=desc"))
    assert [e["first_name"] for e in page["items"]] == ["Dave", "Carol", "Bob", "Alice"]


def test_list_employees_bad_filter(client, directory):
    resp = client.get("/api/v1/employees?company_id=abc")
    assert resp.status_code == 422
    assert resp.get_json()["error"]["message"] == "company_id must be integer"


def test_unknown_sort_error_policy_returns_422(app, client, directory):
    app.config["SEARCH_ON_UNKNOWN_SORT"] = "error"
    resp = client.get("/api/v1/employees?orderBy=salary_band")
    assert resp.status_code == 422
    err = resp.get_json()["error"]
    assert err["code"] == "UNKNOWN_SORT"
    assert err["detail"]["orderBy"] == "salary_band"


def test_list_all_employees_has_no_derived_columns(client, directory):
    data = _data(client.get("/api/v1/employees/all?q=acme.test&orderBy=code"))
    assert [e["code"] for e in data["data"]] == ["E001", "E002"]
    assert "full_name" not in data["data"][0]
    assert data["sortable"][0] == "code"


def test_list_departments(client, directory):
    page = _data(client.get("/api/v1/departments?orderBy=companies.name&orderDirection=desc"))
    assert page["items"][0]["name"] == "Research"
    assert page["items"][0]["company_name"] == "Globex"

    page = _data(client.get("/api/v1/departments?q=acme&orderBy=name"))
    assert [(d["name"], d["employee_count"]) for d in page["items"]] == [("Engineering", 1), ("Sales", 1)]


def test_not_found_uses_fail_envelope(client):
    resp = client.get("/api/v1/nowhere")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_list_departments_sorted_by_employee_count(client, session, directory):
    eng = directory["departments"]["eng"]
    acme = directory["companies"]["acme"]
    from search_repo.models.directory import Employee
    for i in (5, 6):
        session.add(Employee(company_id=acme.id, department_id=eng.id, code=f"E00{i}",
                             first_name=f"New{i}", email=f"new{i}@acme.test"))
    session.commit()

    page = _data(client.get("/api/v1/departments?orderBy=employee_count&orderDirection=desc"))
    assert [(d["name"], d["employee_count"]) for d in page["items"]][0] == ("Engineering", 3)
    assert "employee_count" in page["sortable"]
