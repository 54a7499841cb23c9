"""Main application object: wires configuration, logging and services"""

from pathlib import Path
from typing import List, Optional

from .api.identity_client import IdentityClient
from .apps import AppInstance, list_apps
from .auth.service import AuthService
from .services.session_store import SessionStore
from .utils.config import ConfigManager, Settings
from .utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class AuthGateApp:
    """Holds the services shared by every request handler"""

    def __init__(self, settings: Optional[Settings] = None, config_manager: Optional[ConfigManager] = None):
        self.settings = settings or (config_manager or ConfigManager()).load_settings()
        self.name = self.settings.app.name
        self.version = self.settings.app.version

        log_cfg = self.settings.logging
        setup_logger(
            log_level=log_cfg.level,
            log_format=log_cfg.format,
            file_path=log_cfg.file_path,
            max_bytes=log_cfg.max_bytes,
            backup_count=log_cfg.backup_count,
        )

        self.sessions = SessionStore(
            path=Path(self.settings.sessions.file_path),
            enforce_expiry=self.settings.sessions.enforce_expiry,
        )
        provider = self.settings.provider
        self.identity = IdentityClient(
            base_url=provider.url,
            anon_key=provider.anon_key,
            connection_timeout=provider.connect_timeout,
            read_timeout=provider.timeout,
            retry_attempts=provider.retry_attempts,
        )
        self.auth = AuthService(self.identity, self.sessions)
        self.apps: List[AppInstance] = list_apps()

        logger.info(
            "Application initialized",
            name=self.name,
            version=self.version,
            environment=self.settings.app.environment,
            sessions=self.sessions.count(),
            apps=[a.id for a in self.apps],
        )
