# state.py
# Состояние авторизации: явное значение + функция перехода.
# В session хранится только результат reduce_auth.

from collections import namedtuple
from functools import wraps

from flask import session, flash, redirect, url_for

from models import Judge

AuthState = namedtuple('AuthState', ['judge_id', 'name', 'is_admin'])

ANONYMOUS = AuthState(judge_id=None, name=None, is_admin=False)

SESSION_KEY = 'auth'


def reduce_auth(state, action, **payload):
    """
    Возвращает новое состояние для действия:
      login_admin  - вход администратора
      login_judge  - вход судьи, нужен payload judge (id, name)
      logout       - выход
    """
    if action == 'login_admin':
        return AuthState(judge_id=None, name='Admin', is_admin=True)
    if action == 'login_judge':
        judge = payload['judge']
        return AuthState(judge_id=judge.id, name=judge.name, is_admin=False)
    if action == 'logout':
        return ANONYMOUS
    raise ValueError(f'Неизвестное действие: {action}')


def is_authenticated(state):
    return state.is_admin or state.judge_id is not None


def load_auth_state():
    data = session.get(SESSION_KEY)
    if not data:
        return ANONYMOUS
    return AuthState(
        judge_id=data.get('judge_id'),
        name=data.get('name'),
        is_admin=bool(data.get('is_admin')),
    )


def store_auth_state(state):
    if state == ANONYMOUS:
        session.pop(SESSION_KEY, None)
    else:
        session[SESSION_KEY] = state._asdict()


def dispatch_auth(action, **payload):
    state = reduce_auth(load_auth_state(), action, **payload)
    store_auth_state(state)
    return state


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated(load_auth_state()):
            flash('Для доступа к этой странице необходимо войти в систему.', 'error')
            return redirect(url_for('auth.login'))
        return f(*args, **kwargs)
    return decorated_function


def judge_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        state = load_auth_state()
        if state.judge_id is None:
            flash('Эта страница доступна только судьям.', 'error')
            return redirect(url_for('main.index'))
        # Судью могли удалить, пока его сессия была открыта
        if Judge.query.get(state.judge_id) is None:
            dispatch_auth('logout')
            flash('Учетная запись судьи не найдена. Пожалуйста, войдите снова.', 'error')
            return redirect(url_for('auth.login'))
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not load_auth_state().is_admin:
            flash('У вас нет прав для доступа к этой странице.', 'error')
            return redirect(url_for('main.index'))
        return f(*args, **kwargs)
    return decorated_function
