# app.py
# Основной файл Flask-приложения с использованием паттерна Application Factory

import logging
import os

from flask import Flask
from config import Config
from extensions import db, migrate
from logic import RankingBoard
from scoring import format_score
from state import load_auth_state

# Важно импортировать модели здесь, чтобы Alembic (Migrate) мог их видеть
from models import Judge, Project, Criterion, Rating, Comment


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))
    # Папка для файла SQLite по умолчанию
    os.makedirs(app.instance_path, exist_ok=True)

    @app.context_processor
    def inject_auth_state():
        # Состояние входа и период обновления доступны во всех шаблонах
        return dict(
            auth=load_auth_state(),
            refresh_seconds=app.config['RANKING_REFRESH_SECONDS'],
        )

    app.add_template_filter(format_score, 'score')

    db.init_app(app)
    migrate.init_app(app, db)

    app.extensions['ranking_board'] = RankingBoard()

    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.admin import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)

    @app.cli.command('seed')
    def seed_command():
        """Загрузить демонстрационные данные."""
        from seed_data import seed_demo_data
        created = seed_demo_data()
        print(f'Добавлено записей: {created}')

    return app
