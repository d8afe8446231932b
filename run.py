#!/usr/bin/env python3
"""Entry point for the SportMeet API."""
import atexit
import os
from sportmeet.app import create_app, shutdown_store, socketio

config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)
atexit.register(shutdown_store, app)

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 8080))
    print(f"SportMeet API starting on http://localhost:{port}")
    socketio.run(
        app, host='0.0.0.0', port=port,
        debug=(config_name == 'development'),
        allow_unsafe_werkzeug=True,
    )
