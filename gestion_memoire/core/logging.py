"""
➡️ But : Configurer les logs de l'application (niveau, format) en un seul endroit.

configure_logging() est appelé une fois au chargement de gestion_memoire.main.
Chaque module utilise ensuite logging.getLogger(__name__).
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
    logging.getLogger("gestion_memoire").setLevel(level.upper())
