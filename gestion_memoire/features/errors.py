"""
Exceptions métier levées par les services.

Les routers les traduisent en réponses HTTP :
- PermissionError        -> 403
- LookupError (builtin)  -> 404
- InvalidTransitionError -> 400 (transition de statut ou règle métier non respectée)
- ConflictError          -> 400 (doublon : email, mémoire, jury...)

Le message (en français) est renvoyé tel quel au client.
"""


class PermissionError(Exception):
    pass


class InvalidTransitionError(Exception):
    pass


class ConflictError(Exception):
    pass
