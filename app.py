import os
from dotenv import load_dotenv
load_dotenv()
from flask import Flask, jsonify
from flask_cors import CORS
from flask_migrate import Migrate
from config import config_dict
from models import db
from routes.degrees import degree_bp
from routes.classrooms import classroom_bp
from routes.students import student_bp

migrate = Migrate()


def create_app(config_name=None):
    env = (config_name or os.environ.get("FLASK_ENV", "production")).lower()

    app = Flask(__name__)
    app.config.from_object(config_dict.get(env, config_dict["production"]))
    app.logger.setLevel(app.config["LOG_LEVEL"])
    app.logger.info("Loaded %s configuration", env)

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    db.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(degree_bp, url_prefix='/api/v1/degrees')
    app.register_blueprint(classroom_bp, url_prefix='/api/v1/classrooms')
    app.register_blueprint(student_bp, url_prefix='/api/v1/students')

    @app.route('/')
    def home():
        return jsonify({"message": "Academia API", "version": "v1"})

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config.get('DEBUG', False))
