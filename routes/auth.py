# routes/auth.py
# Маршруты для авторизации

from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from sqlalchemy.exc import SQLAlchemyError
from logic import authenticate_judge
from state import dispatch_auth, load_auth_state, is_authenticated

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if is_authenticated(load_auth_state()):
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        username = request.form.get('username', '')
        password = request.form.get('password', '')
        if not password:
            flash('Пожалуйста, введите пароль.', 'error')
            return redirect(url_for('auth.login'))

        # Администратор определяется только по паролю
        if password == current_app.config['ADMIN_PASSWORD']:
            dispatch_auth('login_admin')
            current_app.logger.info('Вход администратора')
            flash('Вход выполнен успешно!', 'success')
            return redirect(url_for('admin.manage_judges'))

        try:
            judge = authenticate_judge(username, password)
        except SQLAlchemyError:
            current_app.logger.exception('Ошибка базы данных при входе судьи')
            flash('Ошибка соединения с базой данных.', 'error')
            return redirect(url_for('auth.login'))

        if judge:
            dispatch_auth('login_judge', judge=judge)
            current_app.logger.info('Вход судьи %s', judge.name)
            flash('Вход выполнен успешно!', 'success')
            return redirect(url_for('main.judge_panel'))

        current_app.logger.warning('Неудачная попытка входа: %s', username)
        flash('Неверное имя или пароль.', 'error')
        return redirect(url_for('auth.login'))

    return render_template('login.html')


@auth_bp.route('/logout')
def logout():
    dispatch_auth('logout')
    flash('Вы успешно вышли из системы.', 'success')
    return redirect(url_for('main.index'))
