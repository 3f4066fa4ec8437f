from flask import Blueprint, request, jsonify

from powsim.config import Settings
from powsim.kernel.mining import Miner
from powsim.kernel.preview import compute_digest_pair

bp = Blueprint("api", __name__, url_prefix="/")

settings = Settings.from_env()
miner = Miner(
    report_interval=settings.report_interval,
    yield_every=settings.yield_every,
    log_limit=settings.log_limit,
)

# ---------- health / version ----------
@bp.route("/health")
def health():
    return jsonify({"ok": True})

@bp.route("/version")
def version():
    return jsonify({"name": "powsim", "hash": "sha256d", "api": 1})

# ---------- preview hash ----------
@bp.route("/hash", methods=["POST"])
def preview_hash():
    data = request.get_json(force=True, silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    text = data.get("text", "")
    if not isinstance(text, str):
        return jsonify({"ok": False, "error": "text must be a string"}), 400
    return jsonify(compute_digest_pair(text).to_dict())

# ---------- mining ----------
@bp.route("/mine/start", methods=["POST"])
def mine_start():
    body = request.get_json(force=True, silent=True) or {}
    if not isinstance(body, dict):
        body = {}
    block_data = body.get("data", settings.default_data)
    difficulty = body.get("difficulty", settings.default_difficulty)
    if not isinstance(block_data, str):
        return jsonify({"ok": False, "error": "data must be a string"}), 400
    try:
        started = miner.start(block_data, difficulty)
    except (TypeError, ValueError, OverflowError) as e:
        return jsonify({"ok": False, "error": f"bad difficulty: {e}"}), 400
    return jsonify({"started": started, "status": miner.snapshot()})

@bp.route("/mine/stop", methods=["POST"])
def mine_stop():
    stopped = miner.stop()
    return jsonify({"stopped": stopped, "status": miner.snapshot()})

@bp.route("/mine/status", methods=["GET"])
def mine_status():
    return jsonify(miner.snapshot())
