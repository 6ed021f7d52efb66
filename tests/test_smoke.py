import pytest

from app.crm import create_app
from app.crm.models import Base


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("APP_NAME", "customer-service-test")
    monkeypatch.setenv("APP_VERSION", "9.9.9")
    for k in ("MANAGEMENT_ENDPOINTS", "UPDATE_MISSING_AS_404", "AUTO_CREATE_SCHEMA"):
        monkeypatch.delenv(k, raising=False)

    app = create_app()

    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"] is True


def test_healthz_ok(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.data == b"ok"


def test_actuator_health_up(client):
    r = client.get("/actuator/health")
    assert r.status_code == 200
    assert r.json == {"status": "UP", "components": {"db": {"status": "UP"}}}


def test_actuator_info(client):
    r = client.get("/actuator/info")
    assert r.status_code == 200
    assert r.json == {"app": {"name": "customer-service-test", "version": "9.9.9", "env": "test"}}


def test_request_id_generated_and_echoed(client):
    r = client.get("/health")
    assert len(r.headers["X-Request-ID"]) == 32

    r = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"


def test_metrics_exposition_counts_requests(app, client):
    client.post("/customers", json={"customerName": "Ada"})
    client.get("/customers")
    client.get("/customers/1")

    r = client.get("/metrics")
    assert r.status_code == 200
    assert r.mimetype == "text/plain"
    assert "http_request_duration_seconds_bucket" in r.get_data(as_text=True)

    registry = app.extensions["metrics"].registry
    for operation in ("create", "list", "get"):
        assert registry.get_sample_value("customer_operations_total", {"operation": operation}) == 1.0
    assert (
        registry.get_sample_value(
            "http_requests_total",
            {"method": "GET", "endpoint": "/customers/<customer_id>", "status": "200"},
        )
        == 1.0
    )


def test_metrics_registry_is_per_app(tmp_path, monkeypatch, app, client):
    client.post("/customers", json={})
    # A second app in the same process starts from zero.
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'other.db'}")
    other = create_app()
    assert other.test_client().get("/metrics").status_code == 200
    assert app.extensions["metrics"].registry.get_sample_value("customer_operations_total", {"operation": "create"}) == 1.0
    assert other.extensions["metrics"].registry.get_sample_value("customer_operations_total", {"operation": "create"}) is None


def test_api_docs_describe_customer_routes(client):
    r = client.get("/v3/api-docs")
    assert r.status_code == 200
    doc = r.json
    assert doc["openapi"].startswith("3.0")
    assert doc["info"] == {"title": "customer-service-test", "version": "9.9.9"}
    assert set(doc["paths"]) == {"/customers", "/customers/{customer_id}"}
    assert set(doc["paths"]["/customers"]) == {"get", "post"}
    assert set(doc["paths"]["/customers/{customer_id}"]) == {"get", "put", "delete"}
    props = doc["components"]["schemas"]["Customer"]["properties"]
    assert list(props) == ["customerId", "customerName", "address", "phone", "email", "purchaseValue", "orderId"]
    param = doc["paths"]["/customers/{customer_id}"]["get"]["parameters"][0]
    assert param["name"] == "customer_id"
    assert param["in"] == "path"


def test_swagger_ui_points_at_api_docs(client):
    r = client.get("/swagger-ui")
    assert r.status_code == 200
    assert b"/v3/api-docs" in r.data
    assert b"SwaggerUIBundle" in r.data


def test_management_endpoints_can_be_disabled(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("MANAGEMENT_ENDPOINTS", "health")

    client = create_app().test_client()
    assert client.get("/actuator/health").status_code == 200
    assert client.get("/actuator/info").status_code == 404
    assert client.get("/metrics").status_code == 404
    assert client.get("/v3/api-docs").status_code == 404
    # Probes are always on.
    assert client.get("/healthz").status_code == 200


def test_store_unreachable_surfaces_as_500_and_health_down(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    # Parent directory does not exist: sqlite cannot open the file.
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'missing'/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("AUTO_CREATE_SCHEMA", "0")
    monkeypatch.delenv("MANAGEMENT_ENDPOINTS", raising=False)

    client = create_app().test_client()

    r = client.get("/customers")
    assert r.status_code == 500
    assert r.json["status"] == 500
    assert r.json["path"] == "/customers"

    r = client.get("/actuator/health")
    assert r.status_code == 503
    assert r.json["status"] == "DOWN"

    # Probes never touch the DB.
    assert client.get("/healthz").status_code == 200
