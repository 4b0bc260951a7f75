# models/__init__.py
# Инициализация моделей

from .judge import Judge
from .project import Project
from .criterion import Criterion
from .rating import Rating
from .comment import Comment
