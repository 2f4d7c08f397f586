"""
Execution states of the delivery pipeline.

CodePipeline/CodeBuild own the actual execution. This module describes the
states the declared pipeline has to support and checks that a buildspec
maps onto them, i.e. that nothing after a failed phase can reach the
deploy commands (bucket sync + cache invalidation).

    IDLE -> SOURCE_FETCHING -> BUILDING -> DEPLOYING -> SUCCEEDED
                  |               |            |
                  +---------------+------------+--> FAILED
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, FrozenSet, Mapping
from static_web_cdk.configs.error_handler import ErrorHandler, InvalidTransitionError, TopologyError


class DeliveryState(str, Enum):
    IDLE = "IDLE"
    SOURCE_FETCHING = "SOURCE_FETCHING"
    BUILDING = "BUILDING"
    DEPLOYING = "DEPLOYING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


TRANSITIONS: Dict[DeliveryState, FrozenSet[DeliveryState]] = {
    DeliveryState.IDLE: frozenset({DeliveryState.SOURCE_FETCHING}),
    DeliveryState.SOURCE_FETCHING: frozenset({DeliveryState.BUILDING, DeliveryState.FAILED}),
    DeliveryState.BUILDING: frozenset({DeliveryState.DEPLOYING, DeliveryState.FAILED}),
    DeliveryState.DEPLOYING: frozenset({DeliveryState.SUCCEEDED, DeliveryState.FAILED}),
    DeliveryState.SUCCEEDED: frozenset(),
    DeliveryState.FAILED: frozenset(),
}

TERMINAL_STATES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

# Buildspec phase -> state it runs in. Phases run in this order.
PHASE_STATES: Dict[str, DeliveryState] = {
    "install": DeliveryState.BUILDING,
    "pre_build": DeliveryState.BUILDING,
    "build": DeliveryState.BUILDING,
    "post_build": DeliveryState.DEPLOYING,
}
DEPLOY_PHASE = "post_build"


def advance(current: DeliveryState, target: DeliveryState) -> DeliveryState:
    """
    Move the pipeline from one state to the next.

    Args:
        current: State the pipeline is in
        target: Requested next state

    Returns:
        The new state

    Raises:
        InvalidTransitionError: If the move is not allowed
    """
    if target not in TRANSITIONS[current]:
        raise InvalidTransitionError(f"Pipeline cannot move from {current.value} to {target.value}")
    return target


def performs_deploy(state: DeliveryState) -> bool:
    """Only DEPLOYING syncs the bucket and invalidates the distribution."""
    return state is DeliveryState.DEPLOYING


def validate_buildspec(buildspec: Mapping) -> None:
    """
    Check that a buildspec never deploys after a failed phase.

    Every phase that runs before the deploy phase must abort the build on
    failure; with the default CONTINUE, CodeBuild would still run
    post_build after a failed build.

    Args:
        buildspec: Buildspec as loaded from JSON

    Raises:
        ValueError: If the buildspec has no phases or an unknown phase
        TopologyError: If a failure could reach the deploy phase
    """
    ErrorHandler.validate_required_fields(buildspec, ["version", "phases"], "Buildspec")
    phases = buildspec["phases"]
    ErrorHandler.validate_type(phases, dict, "phases", "Buildspec")

    for name in phases:
        ErrorHandler.validate_enum_value(name, list(PHASE_STATES), "phases", "Buildspec")

    if DEPLOY_PHASE not in phases:
        raise TopologyError(f"Buildspec has no '{DEPLOY_PHASE}' phase to deploy from")

    for name in PHASE_STATES:
        if name == DEPLOY_PHASE:
            break
        phase = phases.get(name)
        if phase is not None and phase.get("on-failure") != "ABORT":
            raise TopologyError(
                f"Buildspec phase '{name}' must set on-failure: ABORT so a failed build never reaches '{DEPLOY_PHASE}'"
            )
