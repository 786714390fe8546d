"""Hugging Face Spaces entry point."""

from malware_sim.logging_config import setup_logging
from malware_sim.visualization.dash_app import app

server = app.server  # expose Flask server for gunicorn fallback

if __name__ == "__main__":
    import os
    setup_logging()
    port = int(os.environ.get("PORT", 7860))
    app.run(host="0.0.0.0", debug=False, port=port)
