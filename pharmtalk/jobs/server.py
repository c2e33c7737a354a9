"""HTTP entrypoint for the PharmTalk API (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

from pharmtalk.core import assistant
from pharmtalk.core.config import ConfigError, get_settings
from pharmtalk.core.geo import is_valid_coordinate
from pharmtalk.etl.answer_sections import build_report
from pharmtalk.etl.transform import to_chat_messages, to_health_profile, to_medication_snapshots
from pharmtalk.jobs.pharmacy_search import run_pharmacy_search
from pharmtalk.prompts.pharmacist import MODES
from pharmtalk.vendors.openrouter import OpenRouterError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)
app.json.ensure_ascii = False

MISSING_KEY_MESSAGE = "API 키가 설정되지 않았습니다."
SERVER_ERROR_MESSAGE = "서버 오류가 발생했습니다."
AI_FAILED_MESSAGE = "AI 응답에 실패했습니다."
CONSULT_TYPES = ("medication", "supplement")

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reports which credentials are configured."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "search_configured": settings.has_search_credentials,
                "registry_configured": bool(settings.public_data_api_key),
                "llm_configured": bool(settings.openrouter_api_key),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/pharmacy-search")
def pharmacy_search() -> Any:
    """Nearby pharmacies with live opening status. Query params: lat, lng."""
    coordinate, error = _parse_coordinate(request.args.get("lat"), request.args.get("lng"))
    if error:
        return jsonify({"error": error}), 400

    settings = get_settings()
    if not settings.has_search_credentials:
        return jsonify({"error": MISSING_KEY_MESSAGE}), 500

    lat, lng = coordinate
    try:
        response = run_pharmacy_search(lat=lat, lng=lng, settings=settings)
    except ConfigError:
        return jsonify({"error": MISSING_KEY_MESSAGE}), 500
    except Exception as exc:  # noqa: BLE001
        logger.exception("Pharmacy search failed: %s", exc)
        return jsonify({"error": "약국 검색에 실패했습니다."}), 500

    return jsonify(response.to_dict()), 200


@app.post("/analyze-image")
def analyze_image() -> Any:
    """Extract medications from a photo sent as a data URL. Required JSON field: image"""
    payload = _json_payload()
    if payload is None:
        return jsonify({"error": "JSON 본문이 필요합니다."}), 400

    image = payload.get("image")
    if not image or not isinstance(image, str):
        return jsonify({"error": "이미지 데이터가 필요합니다."}), 400

    settings = get_settings()
    try:
        settings.require_llm_credentials()
    except ConfigError:
        return jsonify({"error": MISSING_KEY_MESSAGE}), 500

    try:
        medications = assistant.analyze_image(image, settings)
    except OpenRouterError:
        return jsonify({"error": "AI 분석에 실패했습니다."}), 502
    except Exception as exc:  # noqa: BLE001
        logger.exception("Analyze image failed: %s", exc)
        return jsonify({"error": SERVER_ERROR_MESSAGE}), 500

    return jsonify({"medications": [medication.to_dict() for medication in medications]}), 200


@app.post("/consult-assist")
def consult_assist() -> Any:
    """
    Organizer chat turn.
    JSON fields: messages, consultType, medications, profile
    """
    payload = _json_payload()
    if payload is None:
        return jsonify({"error": "JSON 본문이 필요합니다."}), 400

    messages = to_chat_messages(payload.get("messages"))
    if not messages:
        return jsonify({"error": "messages가 필요합니다."}), 400

    settings = get_settings()
    try:
        settings.require_llm_credentials()
    except ConfigError:
        return jsonify({"error": MISSING_KEY_MESSAGE}), 500

    try:
        message, suggested = assistant.consult_assist(
            messages,
            _consult_type(payload),
            to_medication_snapshots(payload.get("medications")),
            to_health_profile(payload.get("profile")),
            settings,
        )
    except OpenRouterError:
        return jsonify({"error": AI_FAILED_MESSAGE}), 502
    except Exception as exc:  # noqa: BLE001
        logger.exception("Consult assist failed: %s", exc)
        return jsonify({"error": SERVER_ERROR_MESSAGE}), 500

    return jsonify({"message": message, "suggestedContent": suggested}), 200


@app.post("/pharmacist-assist")
def pharmacist_assist() -> Any:
    """
    Draft, polish or follow up on a pharmacist answer.
    Required JSON fields: mode, question
    Optional: consultType, medications, health, draft, followupQuestion, previousAnswer
    """
    payload = _json_payload()
    if payload is None:
        return jsonify({"error": "JSON 본문이 필요합니다."}), 400

    mode = payload.get("mode")
    if mode not in MODES:
        return jsonify({"error": f"mode must be one of: {', '.join(MODES)}"}), 400
    if mode == "polish" and not payload.get("draft"):
        return jsonify({"error": "draft is required for polish mode"}), 400
    if mode == "followup" and not payload.get("followupQuestion"):
        return jsonify({"error": "followupQuestion is required for followup mode"}), 400

    settings = get_settings()
    try:
        settings.require_llm_credentials()
    except ConfigError:
        return jsonify({"error": MISSING_KEY_MESSAGE}), 500

    try:
        content = assistant.pharmacist_assist(
            mode=mode,
            consult_type=_consult_type(payload),
            question=str(payload.get("question") or ""),
            medications=to_medication_snapshots(payload.get("medications")),
            health=to_health_profile(payload.get("health")),
            settings=settings,
            draft=str(payload.get("draft") or ""),
            followup_question=str(payload.get("followupQuestion") or ""),
            previous_answer=str(payload.get("previousAnswer") or ""),
        )
    except OpenRouterError:
        return jsonify({"error": AI_FAILED_MESSAGE}), 502
    except Exception as exc:  # noqa: BLE001
        logger.exception("Pharmacist assist failed: %s", exc)
        return jsonify({"error": SERVER_ERROR_MESSAGE}), 500

    return jsonify({"content": content}), 200


@app.post("/answer-report")
def answer_report() -> Any:
    """Structure a pharmacist answer into sections. Required JSON field: content"""
    payload = _json_payload()
    if payload is None:
        return jsonify({"error": "JSON 본문이 필요합니다."}), 400

    content = payload.get("content")
    if not isinstance(content, str):
        return jsonify({"error": "content must be a string"}), 400

    return jsonify(build_report(content)), 200


# ---------- Internals ----------


def _json_payload() -> Optional[Dict[str, Any]]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


def _consult_type(payload: Dict[str, Any]) -> str:
    consult_type = payload.get("consultType")
    return consult_type if consult_type in CONSULT_TYPES else "medication"


def _parse_coordinate(lat_raw: Optional[str], lng_raw: Optional[str]) -> Tuple[Optional[Tuple[float, float]], Optional[str]]:
    if lat_raw is None or lng_raw is None:
        return None, "lat and lng are required"
    try:
        lat = float(lat_raw)
        lng = float(lng_raw)
    except (TypeError, ValueError):
        return None, "lat and lng must be numeric"
    if not is_valid_coordinate(lat, lng):
        return None, "lat/lng out of range"
    return (lat, lng), None


def main() -> None:
    """
    Cloud Run injects PORT (usually 8080); fall back to SERVER_PORT locally.
    """
    settings = get_settings()
    logger.info("[BOOT] Binding on 0.0.0.0:%d", settings.server_port)
    app.run(host="0.0.0.0", port=settings.server_port)


if __name__ == "__main__":
    main()
