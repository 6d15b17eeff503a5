"""Booth API blueprint: session lifecycle from landing to reward."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_wtf.csrf import generate_csrf

from core import get_logger
from core.exceptions import ValidationError
from services.angle_mapper import sector_angle
from services.async_runner import run_coroutine_sync
from services.session_flow import SessionFlow
from services.session_registry import SessionRegistry
from utils.validators import validate_lead
from web.config_middleware import cache, csrf

logger = get_logger(__name__)

booth_bp = Blueprint("booth", __name__, url_prefix="/api")


def _registry() -> SessionRegistry:
    registry = current_app.config.get("SESSION_REGISTRY")
    if registry is None:
        raise RuntimeError("Session registry not configured")
    return registry


def _flow(token: str) -> SessionFlow:
    return _registry().get(token)


@booth_bp.route("/rewards")
@cache.cached()
def list_rewards():
    table = current_app.config["REWARD_TABLE"]
    return jsonify({
        "rewards": table.to_dicts(),
        "sector_angle": sector_angle(len(table)),
    })


@booth_bp.route("/session", methods=["POST"])
@csrf.exempt
def create_session():
    token, flow = _registry().create()
    body = flow.snapshot()
    body.update(token=token, csrf_token=generate_csrf())
    return jsonify(body), 201


@booth_bp.route("/session/<token>")
def session_state(token: str):
    return jsonify(_flow(token).snapshot())


@booth_bp.route("/session/<token>/form", methods=["POST"])
def open_form(token: str):
    flow = _flow(token)
    flow.open_form()
    return jsonify(flow.snapshot())


@booth_bp.route("/session/<token>/lead", methods=["POST"])
def submit_lead(token: str):
    flow = _flow(token)
    lead, errors = validate_lead(request.get_json(silent=True) or {})
    if errors:
        raise ValidationError(errors)

    result = run_coroutine_sync(flow.submit_lead(lead))
    body = flow.snapshot()
    body["is_new_participant"] = result.is_new_participant

    if result.already_played:
        body["message"] = f"You've already played! You won: {result.prior_reward_name}"
        return jsonify(body), 409
    return jsonify(body)


@booth_bp.route("/session/<token>/spin", methods=["POST"])
def start_spin(token: str):
    flow = _flow(token)
    run_coroutine_sync(flow.start_spin())
    return jsonify(flow.snapshot())


@booth_bp.route("/session/<token>/complete", methods=["POST"])
def complete_spin(token: str):
    flow = _flow(token)
    result = run_coroutine_sync(flow.finish_spin())
    if not result.recorded:
        logger.warning(f"Session {token[:8]} finished without a recorded outcome")
    return jsonify(flow.snapshot())
