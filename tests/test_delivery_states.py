import json
from pathlib import Path

import pytest

from static_web_cdk.builders.delivery_states import (
    TERMINAL_STATES,
    DeliveryState,
    advance,
    performs_deploy,
    validate_buildspec,
)
from static_web_cdk.configs.config_manager import ConfigManager
from static_web_cdk.configs.error_handler import InvalidTransitionError, TopologyError

S = DeliveryState
SHIPPED_BUILDSPEC = Path(ConfigManager.CONFIG_ROOT) / "buildspec" / "static_site.json"


def _buildspec():
    return json.loads(SHIPPED_BUILDSPEC.read_text(encoding="utf-8"))


def test_happy_path():
    state = S.IDLE
    for target in (S.SOURCE_FETCHING, S.BUILDING, S.DEPLOYING, S.SUCCEEDED):
        state = advance(state, target)
    assert state is S.SUCCEEDED


@pytest.mark.parametrize("state", [S.SOURCE_FETCHING, S.BUILDING, S.DEPLOYING])
def test_failure_reachable(state):
    assert advance(state, S.FAILED) is S.FAILED


@pytest.mark.parametrize("current,target", [
    (S.IDLE, S.FAILED),
    (S.IDLE, S.BUILDING),
    (S.SOURCE_FETCHING, S.DEPLOYING),
    (S.FAILED, S.DEPLOYING),
    (S.FAILED, S.SOURCE_FETCHING),
    (S.SUCCEEDED, S.IDLE),
])
def test_illegal_transitions(current, target):
    with pytest.raises(InvalidTransitionError):
        advance(current, target)


def test_terminal_states():
    assert TERMINAL_STATES == {S.SUCCEEDED, S.FAILED}


def test_failed_build_never_deploys():
    visited = [S.IDLE]
    for target in (S.SOURCE_FETCHING, S.BUILDING, S.FAILED):
        visited.append(advance(visited[-1], target))
    assert not any(performs_deploy(s) for s in visited)
    with pytest.raises(InvalidTransitionError):
        advance(S.FAILED, S.DEPLOYING)


def test_only_deploying_performs_deploy():
    assert [s for s in S if performs_deploy(s)] == [S.DEPLOYING]


def test_shipped_buildspec_is_valid():
    validate_buildspec(_buildspec())


@pytest.mark.parametrize("phase", ["install", "build"])
def test_continue_on_failure_rejected(phase):
    buildspec = _buildspec()
    buildspec["phases"][phase]["on-failure"] = "CONTINUE"
    with pytest.raises(TopologyError, match=phase):
        validate_buildspec(buildspec)


def test_missing_on_failure_rejected():
    buildspec = _buildspec()
    del buildspec["phases"]["build"]["on-failure"]
    with pytest.raises(TopologyError):
        validate_buildspec(buildspec)


def test_missing_deploy_phase_rejected():
    buildspec = _buildspec()
    del buildspec["phases"]["post_build"]
    with pytest.raises(TopologyError):
        validate_buildspec(buildspec)


def test_unknown_phase_rejected():
    buildspec = _buildspec()
    buildspec["phases"]["deploy"] = {"commands": ["echo"]}
    with pytest.raises(ValueError):
        validate_buildspec(buildspec)


def test_missing_phases_rejected():
    with pytest.raises(ValueError):
        validate_buildspec({"version": "0.2"})
