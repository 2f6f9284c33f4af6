from hrportal.models.document import Document, Payslip


def test_create_personal_document_is_owned_by_caller(client, employee, headers):
    response = client.post(
        "/trpc/createDocument",
        json={"name": "Passport", "fileUrl": "7/1700000000000-passport.pdf", "documentType": "personal"},
        headers=headers(employee),
    )

    assert response.status_code == 200
    document = response.json()["document"]
    assert document["userId"] == employee.id
    assert document["documentType"] == "personal"


def test_company_documents_require_admin(client, employee, admin, headers):
    payload = {"name": "Handbook", "fileUrl": "handbook.pdf", "documentType": "company"}

    refused = client.post("/trpc/createDocument", json=payload, headers=headers(employee))
    created = client.post("/trpc/createDocument", json=payload, headers=headers(admin))

    assert refused.status_code == 403
    assert created.status_code == 200
    assert created.json()["document"]["userId"] is None


def test_get_documents_by_type(client, db, employee, other_employee, headers):
    db.add_all([
        Document(user_id=employee.id, document_type="personal", name="Mine", file_url="a"),
        Document(user_id=other_employee.id, document_type="personal", name="Theirs", file_url="b"),
        Document(user_id=None, document_type="policy", name="Leave Policy", file_url="c"),
    ])
    db.commit()

    personal = client.post("/trpc/getDocuments", json={"documentType": "personal"}, headers=headers(employee))
    policy = client.post("/trpc/getDocuments", json={"documentType": "policy"}, headers=headers(employee))
    untyped = client.post("/trpc/getDocuments", headers=headers(employee))

    assert [d["name"] for d in personal.json()["documents"]] == ["Mine"]
    assert [d["name"] for d in policy.json()["documents"]] == ["Leave Policy"]
    assert [d["name"] for d in untyped.json()["documents"]] == ["Mine"]


def test_get_payslips_latest_first(client, db, employee, other_employee, headers):
    db.add_all([
        Payslip(user_id=employee.id, month=1, year=2025, file_url="jan"),
        Payslip(user_id=employee.id, month=12, year=2024, file_url="dec"),
        Payslip(user_id=employee.id, month=2, year=2025, file_url="feb"),
        Payslip(user_id=other_employee.id, month=3, year=2025, file_url="other"),
    ])
    db.commit()

    everything = client.post("/trpc/getPayslips", headers=headers(employee)).json()["payslips"]
    only_2024 = client.post("/trpc/getPayslips", json={"year": 2024}, headers=headers(employee)).json()["payslips"]

    assert [p["fileUrl"] for p in everything] == ["feb", "jan", "dec"]
    assert [p["fileUrl"] for p in only_2024] == ["dec"]


def test_document_upload_url_uses_user_folder(client, employee, headers):
    response = client.post(
        "/trpc/getDocumentUploadUrl",
        json={"fileName": "passport.pdf", "fileType": "application/pdf"},
        headers=headers(employee),
    )

    body = response.json()
    assert body["objectName"].startswith(f"{employee.id}/")
    assert body["objectName"].endswith("-passport.pdf")
    assert body["uploadUrl"].startswith("http://storage.test/documents/")


def test_download_url_for_known_bucket(client, employee, headers):
    response = client.post(
        "/trpc/getDownloadUrl",
        json={"bucket": "payslips", "objectName": "7/2025-01.pdf"},
        headers=headers(employee),
    )

    assert response.status_code == 200
    assert response.json()["downloadUrl"] == "http://storage.test/payslips/7/2025-01.pdf?X-Amz-Signature=get"


def test_download_url_rejects_unknown_bucket(client, employee, headers):
    response = client.post(
        "/trpc/getDownloadUrl",
        json={"bucket": "secrets", "objectName": "keys.txt"},
        headers=headers(employee),
    )

    assert response.status_code == 400


def test_minio_base_url_is_public(client):
    response = client.post("/trpc/getMinioBaseUrl")

    assert response.status_code == 200
    assert response.json() == {"baseUrl": "http://localhost:9000"}


def test_documents_require_authentication(client):
    assert client.post("/trpc/getDocuments").status_code == 401
