# Models package — import all models here so Alembic can discover them.

from app.models.lead import Lead  # noqa: F401
