import pytest

from app import create_app
from config import TestConfig
from extensions import db
from models import Judge, Project, Criterion


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_data(app):
    """Два судьи, два проекта, два критерия."""
    judge_a = Judge(name='Анна')
    judge_a.set_password('secret')
    judge_b = Judge(name='Борис')
    judge_b.set_password('secret')
    alpha = Project(name='Альфа')
    beta = Project(name='Бета')
    method = Criterion(name='Метод', order=1)
    design = Criterion(name='Дизайн', order=2)
    db.session.add_all([judge_a, judge_b, alpha, beta, method, design])
    db.session.commit()
    return {
        'judge_a': judge_a, 'judge_b': judge_b,
        'alpha': alpha, 'beta': beta,
        'method': method, 'design': design,
    }


def login_admin(client):
    return client.post('/login', data={'username': '', 'password': TestConfig.ADMIN_PASSWORD})


def login_judge(client, name='Анна', password='secret'):
    return client.post('/login', data={'username': name, 'password': password})
