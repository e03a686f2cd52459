# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from userhub.shared.errors import register_error_handler
from userhub.shared.logging import logger


def configure_error_handling(app: Flask) -> None:
    register_error_handler(app)

    @app.errorhandler(RequestEntityTooLarge)
    def _handle_too_large(_exc: RequestEntityTooLarge):
        limit = app.config.get("MAX_CONTENT_LENGTH")
        logger.info(
            f"Rejected oversized upload on {request.method} {request.path} "
            f"(content_length={request.content_length}, limit={limit})"
        )
        message = "Uploaded file is too large"
        if limit:
            message = f"{message} (limit {limit} bytes)"
        payload = {
            "status": int(HTTPStatus.REQUEST_ENTITY_TOO_LARGE),
            "message": message,
            "success": False,
            "data": None,
        }
        return jsonify(payload), HTTPStatus.REQUEST_ENTITY_TOO_LARGE
