# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from flask import Flask, send_from_directory
from flask_cors import CORS

from userhub.auth import install_authenticator
from userhub.infrastructure.container import container
from userhub.infrastructure.db import init_db
from userhub.shared.config import load_config
from userhub.shared.logging import logger, setup_logging
from userhub.shared.middleware.error_handler import configure_error_handling
from userhub.shared.middleware.request_logger import configure_request_logging

_config = load_config()


def _register_avatar_route(app: Flask) -> None:
    base_url = _config.storage.avatar_base_url
    if not base_url.startswith("/"):
        # Served by an external host.
        return
    avatar_dir = _config.storage.avatar_dir.resolve()

    def serve_avatar(key: str):
        return send_from_directory(avatar_dir, key)

    app.add_url_rule(f"{base_url}/<path:key>", "avatars", serve_avatar, methods=["GET"])


def create_app() -> Flask:
    init_db()
    setup_logging(debug_mode=_config.debug_logging)

    app = Flask(__name__, static_folder=None)
    app.config.update(MAX_CONTENT_LENGTH=_config.storage.max_upload_bytes)

    configure_error_handling(app)
    configure_request_logging(app)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": _config.security.allowed_origins}}
    }
    if any(o != "*" for o in _config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    install_authenticator(app, container.authenticate_user_use_case)
    app.register_blueprint(container.users_controller.as_blueprint())
    app.register_blueprint(container.likes_controller.as_blueprint())
    _register_avatar_route(app)

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
        )

        if _config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000, debug=True)
