"""Main application entry point using Flask application factory pattern."""

import os
from video_app import create_app

# Create Flask application using application factory
app = create_app()

if __name__ == '__main__':
    # Get port from environment variable or default to 8080
    port = int(os.environ.get('PORT', 8080))

    # Development server configuration
    app.run(
        host='0.0.0.0',
        port=port,
        debug=os.environ.get('FLASK_ENV') != 'production',
        use_reloader=False,
    )
