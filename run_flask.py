#!/usr/bin/env python3
"""Flask Application Entry Point für Aura Stylist."""

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app import create_app
from config.settings import get_app_settings

settings = get_app_settings()
app = create_app(settings=settings)

if __name__ == '__main__':
    print("🚀 Aura Stylist Flask Server starting...")
    print(f"   Port: {settings.port}")
    print(f"   Debug: {settings.flask_debug}")
    print("   API Endpoints:")
    print("      - POST   /api/session")
    print("      - GET    /api/session/<id>")
    print("      - POST   /api/session/<id>/item")
    print("      - POST   /api/session/<id>/style")
    print("      - POST   /api/session/<id>/reset")
    print("      - POST   /api/session/<id>/outfits/<n>/edit")
    print("      - GET    /health")
    print()

    app.run(
        host='0.0.0.0',
        port=settings.port,
        debug=settings.flask_debug,
        threaded=True,
    )
