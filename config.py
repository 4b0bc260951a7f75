# config.py
# Конфигурация приложения Flask

import os


class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "instance", "challenge_hub.db")}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get('SECRET_KEY', 'your-secret-key-change-me')

    # Пароль администратора, имя при входе не проверяется
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', 'admin2025')
    # Период автообновления рейтинга, в секундах
    RANKING_REFRESH_SECONDS = int(os.environ.get('RANKING_REFRESH_SECONDS', 30))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret'
    ADMIN_PASSWORD = 'admin-test'
