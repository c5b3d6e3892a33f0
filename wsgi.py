import os
from translation_service import create_app

config_name = os.getenv('FLASK_ENV', 'development')
app = create_app(config_name)

if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))

    # Never run debug mode in production
    debug_mode = os.getenv('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes')

    # threaded: export streams run concurrently with other requests
    app.run(host='0.0.0.0', port=port, debug=debug_mode, threaded=True)
