"""
Validateurs partagés par les schémas de mise à jour.

Dans un *UpdateIn, un champ absent n'est pas modifié ; un champ envoyé à null
n'est accepté que si la colonne est nullable.
"""

from typing import Any


def reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("Ce champ ne peut pas être null")
    return value
