"""Pytest fixtures for cloudconfig tests."""

import textwrap
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from cloudconfig.container import Container
from cloudconfig.testing import MockConfigServerClient

ENV_VARIABLES = (
    "APPLICATION_JSON",
    "SPRING_CONFIG_ENDPOINT",
    "SPRING_CONFIG_AUTH_USER",
    "SPRING_CONFIG_AUTH_PASS",
    "SPRING_CONFIG_PATH",
    "SPRING_CONFIG_BOOTSTRAP_PATH",
    "SPRING_CONFIG_PROFILES",
    "SPRING_CONFIG_LOG_LEVEL",
)


def write_yaml(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep configuration variables from the host out of every test."""
    for name in ENV_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def no_sleep():
    """Async sleep replacement that returns immediately."""
    return AsyncMock(return_value=None)


@pytest.fixture
def make_loader(no_sleep):
    """Build a SpringCloudConfig wired to the given fake client."""
    def _make(client=None):
        container = Container(client=client or MockConfigServerClient(), sleep=no_sleep)
        return container.config
    return _make


@pytest.fixture
def config_tree(tmp_path):
    """Write a set of bootstrap and application config directories."""
    write_yaml(tmp_path / "cloud_disabled" / "bootstrap.yml", """
        spring:
          cloud:
            config:
              enabled: false
              name: the-application-name
    """)

    write_yaml(tmp_path / "common" / "bootstrap.yml", """
        spring:
          cloud:
            config:
              enabled: true
              name: the-application-name
              endpoint: http://localhost:8888
              label: master
        ---
        profiles: dev1,dev2
        spring:
          cloud:
            config:
              endpoint: http://dev-config-server:8888
    """)

    write_yaml(tmp_path / "fail_fast" / "bootstrap.yml", """
        spring:
          cloud:
            config:
              enabled: true
              fail-fast: true
              name: the-application-name
              endpoint: http://localhost:8888
    """)

    write_yaml(tmp_path / "retry" / "bootstrap.yml", """
        spring:
          cloud:
            config:
              enabled: true
              fail-fast: true
              name: the-application-name
              endpoint: http://localhost:8888
              retry:
                enabled: true
                initial-interval: 100
                max-interval: 150
                max-attempts: 3
    """)

    write_yaml(tmp_path / "bad_bootstrap" / "bootstrap.yml", """
        spring:
          cloud:
            config:
              name: missing-enabled-flag
    """)

    write_yaml(tmp_path / "app" / "application.yml", """
        testUrl: http://www.default.com
        featureFlags:
          feature1: false
          feature2: false
        ---
        profiles: dev1,dev2
        testUrl: http://www.dev.com
        ---
        profiles: "dev2,!dev1"
        servers:
          - alpha
          - beta
    """)
    write_yaml(tmp_path / "app" / "application-dev2.yml", """
        testUrl: http://www.dev2.com
        featureFlags.feature1: true
    """)
    write_yaml(tmp_path / "app" / "application-broken.yml", """
        testUrl: [unclosed
    """)

    write_yaml(tmp_path / "app_named" / "application.yml", """
        spring.cloud.config.name: custom-app-name
        testUrl: http://www.named.com
    """)

    write_yaml(tmp_path / "same" / "bootstrap.yml", """
        spring:
          cloud:
            config:
              enabled: false
              name: same-folder-app
    """)
    write_yaml(tmp_path / "same" / "application.yml", """
        testUrl: http://www.same.com
    """)

    return SimpleNamespace(
        root=tmp_path,
        cloud_disabled=str(tmp_path / "cloud_disabled"),
        common=str(tmp_path / "common"),
        fail_fast=str(tmp_path / "fail_fast"),
        retry=str(tmp_path / "retry"),
        bad_bootstrap=str(tmp_path / "bad_bootstrap"),
        app=str(tmp_path / "app"),
        app_named=str(tmp_path / "app_named"),
        same=str(tmp_path / "same"),
    )
