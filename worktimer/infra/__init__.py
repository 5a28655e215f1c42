"""Infrastructure layer - Configuration and backend access"""

from .config import Settings, get_settings, reload_settings
from .gateway import TimerGateway

__all__ = ["Settings", "get_settings", "reload_settings", "TimerGateway"]
