def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "environment": "testing"}


def test_responses_carry_process_time(client):
    response = client.get("/health")

    assert float(response.headers["X-Process-Time"]) >= 0


def test_unknown_procedure_is_404(client):
    assert client.post("/trpc/doesNotExist").status_code == 404


def test_public_base_url_needs_no_token(client):
    response = client.post("/trpc/getMinioBaseUrl")

    assert response.status_code == 200
    assert response.json()["baseUrl"] == "http://localhost:9000"
