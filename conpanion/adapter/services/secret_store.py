import logging
import os
from typing import Dict, Optional

import yaml

from conpanion.app.services.secret_store import ISecretStore

logger = logging.getLogger(__name__)


class YamlSecretStore(ISecretStore):
    """Secrets from a YAML mapping file, loaded once on first access"""

    def __init__(self, path: str):
        self.path = path
        self._secrets: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._secrets is None:
            if os.path.exists(self.path):
                with open(self.path, "r") as r_file:
                    data = yaml.safe_load(r_file) or dict()
            else:
                logger.warning("Secrets file %s not found", self.path)
                data = dict()
            self._secrets = {str(k): str(v) for k, v in data.items() if v is not None}
        return self._secrets

    def get(self, name: str) -> Optional[str]:
        return self._load().get(name)
