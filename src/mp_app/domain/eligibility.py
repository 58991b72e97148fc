from src.mp_app.domain.models import AppConfig
from src.mp_common.errors import AppNotEligibleError


def check_app_eligible(config: AppConfig) -> None:
    """Raise AppNotEligibleError unless the platform enabled and the app activated itself."""
    if not config.is_eligible:
        raise AppNotEligibleError(config.application)
