from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..game.words import preview_words

bp = Blueprint("words", __name__)


@bp.get("/words")
def get_words():
    default = current_app.config["WORDS_PREVIEW_COUNT"]
    try:
        count = int(request.args.get("count", default))
    except ValueError:
        count = default
    return jsonify(preview_words(count))
