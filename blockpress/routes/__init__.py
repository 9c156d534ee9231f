from .home_routes import home_bp
from .article_routes import article_bp
from .image_routes import image_bp

def register_routes(app):
    app.register_blueprint(home_bp)
    app.register_blueprint(article_bp)
    app.register_blueprint(image_bp)
