# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from time import perf_counter

from flask import Blueprint, Response, jsonify, request

from userhub.application.use_cases.likes.toggle_like import ToggleLikeUseCase
from userhub.auth import auth_required, authed_request
from userhub.domain.likes.entities import LikeState
from userhub.infrastructure.audit import AuditAction, audit_log
from userhub.interfaces.http.dto.likes import toggle_result_to_json
from userhub.interfaces.http.dto.users import ApiResponseDTO
from userhub.shared.logging import logger

_MESSAGES = {
    LikeState.LIKED: "Liked Successfully",
    LikeState.UNLIKED: "Removed Like Successfully",
}


class LikesController:
    def __init__(self, *, toggle_use_case: ToggleLikeUseCase) -> None:
        self._toggle_use_case = toggle_use_case

    @auth_required
    def toggle(self, user_id: str) -> tuple[Response, int]:
        t0 = perf_counter()
        acting_user_id = authed_request().user_id
        result = self._toggle_use_case.execute(user_id, acting_user_id)

        audit_log(
            AuditAction.LIKE_ADDED if result.state is LikeState.LIKED else AuditAction.LIKE_REMOVED,
            user_id=acting_user_id,
            ip_address=request.headers.get("X-Forwarded-For", request.remote_addr),
            details={"liked_user_id": user_id},
        )

        dt = (perf_counter() - t0) * 1000
        logger.debug(f"likes.toggle: done (user_id={acting_user_id}, dt_ms={dt:.0f})")
        payload = ApiResponseDTO.ok(toggle_result_to_json(result), _MESSAGES[result.state])
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("likes", __name__, url_prefix="/api/v1/likes")
        bp.add_url_rule("/toggle/v/<user_id>", view_func=self.toggle, methods=["POST"])
        return bp
