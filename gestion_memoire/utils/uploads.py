"""
Stockage des fichiers déposés (versions de mémoire, dépôt final) sur le disque local.

Tout type de fichier est accepté (seuls le vide et la taille sont contrôlés) ;
le type réel est détecté pour renseigner le Document.

Le fichier est écrit dans settings.UPLOAD_DIR sous un nom généré
`<nom_original>_<timestamp_ms><ext>` et servi en statique sous settings.UPLOAD_URL_PREFIX.
"""

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import filetype

from gestion_memoire.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    filename: str
    url: str
    mime: str
    size: int


def detect_mime_and_ext(file_bytes: bytes) -> Tuple[str, str]:
    """
    Détecte le type réel via 'filetype'.
    Retourne (real_mime, ext_with_dot).
    """
    kind = filetype.guess(file_bytes)
    real_mime = kind.mime if kind else "application/octet-stream"
    ext = "." + (kind.extension if kind else "bin")
    return real_mime, ext


def validate_bytes(file_bytes: bytes, *, max_mb: int) -> Tuple[str, str]:
    """
    Retourne (real_mime, ext_with_dot).
    Lève ValueError si invalide.
    """
    size = len(file_bytes)
    if size == 0:
        raise ValueError("Fichier vide")
    if size > max_mb * 1024 * 1024:
        raise ValueError(f"Taille invalide (max {max_mb} MB)")

    return detect_mime_and_ext(file_bytes)


def build_filename(original_name: Optional[str], detected_ext: str) -> str:
    """`Rapport final.pdf` -> `Rapport_final_1718000000000.pdf`"""
    path = Path(original_name or "document")
    stem = re.sub(r"\s+", "_", path.stem.strip()) or "document"
    stem = re.sub(r"[^\w.-]", "", stem) or "document"
    ext = path.suffix.lower() or detected_ext
    return f"{stem}_{int(time.time() * 1000)}{ext}"


def save_upload(
    file_bytes: bytes,
    *,
    original_name: Optional[str],
    upload_dir: Optional[str] = None,
    max_mb: Optional[int] = None,
) -> StoredFile:
    """Valide puis écrit le fichier sur disque. Lève ValueError si le contenu est refusé."""
    mime, ext = validate_bytes(file_bytes, max_mb=max_mb or settings.MAX_UPLOAD_MB)

    target_dir = Path(upload_dir or settings.UPLOAD_DIR)
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = build_filename(original_name, ext)
    (target_dir / filename).write_bytes(file_bytes)
    logger.info("Fichier enregistré %s (%s, %d octets)", filename, mime, len(file_bytes))

    return StoredFile(
        filename=filename,
        url=f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{filename}",
        mime=mime,
        size=len(file_bytes),
    )
