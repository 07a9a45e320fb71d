"""
docgate test configuration.

Fixtures for:
- Per-module temporary project directories
- Configuration files pointing storage at those directories
- API client with its own storage root
"""

import os

import pytest
from fastapi.testclient import TestClient

from docgate.config.settings import ConfigManager, get_config_manager


@pytest.fixture(scope="session", autouse=True)
def clear_env_vars():
    """
    Remove DOCGATE_* variables for the whole session.

    Keeps a developer's shell or .env from leaking into test configuration.
    """
    original_values = {
        name: value for name, value in os.environ.items()
        if name.startswith("DOCGATE_")
    }
    for name in original_values:
        del os.environ[name]

    yield

    for name, value in original_values.items():
        os.environ[name] = value


@pytest.fixture(scope="module")
def test_project_dir(tmp_path_factory, request):
    """Creates a unique test project directory for each test module."""
    dirname = f"test_project_{request.module.__name__}"
    return tmp_path_factory.mktemp(dirname)


@pytest.fixture(scope="module")
def storage_root(test_project_dir):
    """Storage root for the module; created by the backend on startup."""
    return test_project_dir / "uploads"


@pytest.fixture(scope="module")
def config_path(test_project_dir, storage_root):
    """Writes a config file whose storage root lives in the project dir."""
    config_dir = test_project_dir / "test_config"
    config_dir.mkdir()
    path = config_dir / "test_config.yaml"
    path.write_text(f"""
storage:
    root: "{storage_root}"
    public_url_prefix: "/uploads"
uploads:
    max_size_bytes: 5242880
logging:
    version: 1
    disable_existing_loggers: false
    formatters:
        standard:
            format: "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    handlers:
        console:
            class: "logging.StreamHandler"
            level: "INFO"
            formatter: "standard"
    root:
        level: "DEBUG"
        handlers: ["console"]
""")
    return path


@pytest.fixture(scope="module")
def setup_config(config_path):
    """
    Point DOCGATE_CONFIG_PATH at the module's config file and load it.
    """
    original_config_path = os.environ.get("DOCGATE_CONFIG_PATH")
    os.environ["DOCGATE_CONFIG_PATH"] = str(config_path)

    ConfigManager.reset_instance()
    config_manager = get_config_manager()
    config_manager.load(str(config_path))

    yield config_manager

    ConfigManager.reset_instance()

    if original_config_path:
        os.environ["DOCGATE_CONFIG_PATH"] = original_config_path
    else:
        os.environ.pop("DOCGATE_CONFIG_PATH", None)


@pytest.fixture(scope="module")
def api_client(setup_config):
    """
    API client for the module, backed by the module's storage root.

    The app is imported after configuration is loaded; its lifespan builds
    the file manager and feature policy from that configuration.
    """
    from docgate.main import app

    with TestClient(app, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def owner_headers():
    """Identity headers for two distinct owners."""
    return {
        "u1": {"X-User-Id": "u1"},
        "u2": {"X-User-Id": "u2"},
    }
