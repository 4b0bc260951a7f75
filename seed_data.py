from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from models import Judge, Project, Criterion

DEMO_JUDGES = [
    ('Доктор Смирнов', '1234'),
    ('Профессор Иванова', '1234'),
]
DEMO_PROJECTS = [
    'Квантовая левитация лягушек',
    'ИИ для сортировки отходов',
    'Проект жилого модуля на Марсе',
]
DEMO_CRITERIA = [
    'Научный метод',
    'Креативность',
    'Презентация',
]


def seed_demo_data():
    """
    Добавляет демонстрационных судей, проекты и критерии.
    Записи с уже существующими именами пропускаются.
    Возвращает количество добавленных записей.
    """
    created = 0
    try:
        existing_judges = {j.name for j in Judge.query.all()}
        for name, password in DEMO_JUDGES:
            if name not in existing_judges:
                judge = Judge(name=name)
                judge.set_password(password)
                db.session.add(judge)
                created += 1

        existing_projects = {p.name for p in Project.query.all()}
        for name in DEMO_PROJECTS:
            if name not in existing_projects:
                db.session.add(Project(name=name))
                created += 1

        existing_criteria = {c.name for c in Criterion.query.all()}
        order = (db.session.query(func.max(Criterion.order)).scalar() or 0)
        for name in DEMO_CRITERIA:
            if name not in existing_criteria:
                order += 1
                db.session.add(Criterion(name=name, order=order))
                created += 1

        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Ошибка при добавлении демонстрационных данных')
        raise

    current_app.logger.info('Демонстрационные данные добавлены: %s записей', created)
    return created


if __name__ == '__main__':
    from app import create_app

    app = create_app()
    with app.app_context():
        db.create_all()
        print("Добавление тестовых данных...")
        print(f"Готово, добавлено записей: {seed_demo_data()}")
