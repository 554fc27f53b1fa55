from __future__ import annotations

from pathlib import Path

import pytest

from eazy_ci.config.loader import load_spec, parse_spec
from eazy_ci.errors import ConfigError

FULL_SPEC = """\
name: Billing
version: 2
dependencies:
  - github.com/acme/ledger#main
peerDependencies: github.com/acme/redis
integration:
  bootstrap: ./seed.sh
  runTest:
    - make
    - test
deployment:
  health: [curl, -f, localhost:8080/health]
  env:
    LOG_LEVEL: debug
  port: 8080
build:
  image: golang:1.22
  command: go build ./...
extra_key: ignored
"""


def test_parse_full_spec() -> None:
    spec = parse_spec(FULL_SPEC, "/repo/eazy.yml")
    assert spec.name == "billing"
    assert spec.version == "2"
    assert spec.identity == "/repo/eazy.yml"
    assert spec.dependencies == ["github.com/acme/ledger#main"]
    assert spec.peer_dependencies == ["github.com/acme/redis"]
    assert spec.integration.bootstrap == ["/bin/sh", "-c", "./seed.sh"]
    assert spec.integration.run_test == ["make", "test"]
    assert spec.deployment.env == ["LOG_LEVEL=debug"]
    assert spec.deployment.port == ["8080"]
    assert spec.build.command == ["/bin/sh", "-c", "go build ./..."]
    assert spec.root_image == "billing:2"
    assert spec.integration_image == "billing-integration:2"
    assert spec.latest_integration_image == "billing-integration:latest"
    assert spec.has_build_image


def test_minimal_spec_defaults() -> None:
    spec = parse_spec("name: api\n", "api")
    assert spec.version == "latest"
    assert spec.dependencies == []
    assert spec.integration.run_test == []
    assert not spec.has_build_image


@pytest.mark.parametrize(
    "text",
    [
        "name: [unclosed",
        "- just\n- a list\n",
        "version: 1\n",
        "name: two words\n",
        "name: api\ndeployment:\n  env:\n    - NOVALUE\n",
    ],
)
def test_invalid_specs_raise_config_error(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_spec(text, "broken.yml")


def test_load_spec_uses_resolved_path_as_identity(tmp_path: Path) -> None:
    path = tmp_path / "eazy.yml"
    path.write_text("name: api\n", encoding="utf-8")
    spec = load_spec(path)
    assert spec.identity == str(path.resolve())


def test_load_spec_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_spec(tmp_path / "absent.yml")
