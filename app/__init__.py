"""Flask Application Factory für Aura Stylist."""

import logging
from typing import Optional

from flask import Flask, render_template
from flask_cors import CORS

from app.api import api_bp
from app.event_loop import BackgroundLoop
from backend.services.generation.base import GenerationClient
from backend.services.generation.gemini_client import GeminiClient
from backend.services.stylist_session import SessionRegistry
from config.settings import AppSettings, get_app_settings

EXTENSION_KEY = 'stylist'


def create_app(
    generation_client: Optional[GenerationClient] = None,
    settings: Optional[AppSettings] = None,
) -> Flask:
    """
    Erstelle und konfiguriere die Flask-Anwendung.

    Args:
        generation_client: Client for the remote model (defaults to Gemini)
        settings: Web process settings (defaults to environment)

    Returns:
        Konfigurierte Flask App
    """
    settings = settings or get_app_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    app = Flask(
        __name__,
        template_folder='../templates',
        static_folder='../templates/static',
        static_url_path='/static'
    )

    # Flask Configuration
    app.config['SECRET_KEY'] = settings.flask_secret_key
    app.config['MAX_CONTENT_LENGTH'] = settings.max_content_length
    app.config['ENV_NAME'] = settings.environment

    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    # Session state lives on the app, not in module globals
    client = generation_client or GeminiClient()
    app.extensions[EXTENSION_KEY] = {
        'sessions': SessionRegistry(client),
        'loop': BackgroundLoop(),
    }

    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/health')
    def health():
        return {
            'status': 'ok',
            'service': 'aura-stylist',
            'generation_client': getattr(client, 'name', 'unknown'),
        }

    @app.route('/')
    def index():
        return render_template('index.html')

    logging.getLogger(__name__).info(
        "[App] Created (env=%s, client=%s)", settings.environment, getattr(client, 'name', 'unknown')
    )
    return app
