"""
Docker fixtures for the container integration tests.
"""

import uuid
from pathlib import Path

import docker
import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


def pytest_collection_modifyitems(config, items):
    """Mark everything in this directory as a Docker integration test."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.docker)


@pytest.fixture(scope="session")
def docker_client():
    try:
        client = docker.from_env()
        client.ping()
    except Exception as e:
        pytest.skip(f"Docker not available: {e}")
    yield client
    client.close()


@pytest.fixture(scope="session")
def service_images(docker_client):
    """Build both service images once per session."""
    tags = {}
    for name in ("service_a", "service_b"):
        tag = f"service-relay/{name.replace('_', '-')}:test"
        docker_client.images.build(path=str(SRC_DIR / name), tag=tag, rm=True)
        tags[name] = tag
    return tags


@pytest.fixture
def network(docker_client):
    net = docker_client.networks.create(f"service-relay-{uuid.uuid4().hex[:8]}")
    try:
        yield net
    finally:
        net.remove()


@pytest.fixture
def run_container(docker_client):
    """Start detached containers and remove them all at teardown."""
    started = []

    def _run(image, **kwargs):
        container = docker_client.containers.run(image, detach=True, **kwargs)
        started.append(container)
        return container

    yield _run

    for container in started:
        container.remove(force=True)
