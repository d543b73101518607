"""
WSGI entry point
Exposes both 'app' and 'application' for WSGI servers and the flask CLI.

    flask --app app run
    gunicorn app:application
"""
import os
import sys
import traceback

from config import Config, DevelopmentConfig

app = None
application = None

try:
    from weddinghub import create_app

    config_class = DevelopmentConfig if os.environ.get('ENV') == 'development' else Config
    app = create_app(config_class)
    application = app

except Exception as e:
    error_msg = f"Failed to create Flask application: {e}\n\n{traceback.format_exc()}"
    print(error_msg, file=sys.stderr)

    # Minimal WSGI app so the server reports the startup failure instead of crashing
    def error_application(environ, start_response):
        start_response('500 Internal Server Error', [('Content-Type', 'text/plain')])
        return [b'Application failed to start. See server logs.']

    application = error_application

if __name__ == "__main__":
    if app is not None:
        app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), debug=app.config.get('DEBUG', False))
    else:
        sys.exit(1)
