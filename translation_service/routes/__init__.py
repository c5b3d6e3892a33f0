"""Routes package for the translation service."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .translations import translations_bp
    from .tags import tags_bp
    from .export import create_export_blueprint

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(translations_bp, url_prefix='/api/translations')
    app.register_blueprint(tags_bp, url_prefix='/api/tags')
    app.register_blueprint(create_export_blueprint('export', protected=True), url_prefix='/api/export')
    # Same exports without a token, for frontends fetching their strings
    app.register_blueprint(create_export_blueprint('public_export', protected=False), url_prefix='/api/public/export')
