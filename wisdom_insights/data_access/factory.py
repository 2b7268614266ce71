from wisdom_insights.config import settings
from wisdom_insights.data_access.dal import DataAccessLayer
from wisdom_insights.data_access.json_dal import JsonDal
from wisdom_insights.infra import log_utils


def build_dal() -> DataAccessLayer:
    """Postgres in production when configured, JSON files otherwise."""
    if settings.DATABASE_URL and settings.ENVIRONMENT == "production":
        try:
            from wisdom_insights.data_access.postgres_dal import PostgresDal

            return PostgresDal()
        except Exception as e:
            log_utils.log_message(
                f"Postgres DAL init failed: {e}. Falling back to JSON.", "WARN"
            )
    return JsonDal()
