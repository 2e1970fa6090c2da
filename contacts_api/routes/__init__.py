"""Routes package for the contacts application."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .auth import auth_bp
    from .user import user_bp
    from .contacts import contacts_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api/user')
    app.register_blueprint(contacts_bp, url_prefix='/api/contacts')
