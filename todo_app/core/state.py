"""
➡️ But : Regrouper l'état partagé du process (engine DB + config + cache des todos).

Un seul objet, rangé dans `app.state.app_state`, protégé par un seul RWLock :
- lecture : obtenir l'engine / faire un appel DB / prendre une copie du cache
- écriture : uniquement la courte section qui modifie le cache

Le verrou de lecture est toujours relâché avant de prendre le verrou d'écriture.
Entre le commit DB et la mise à jour du cache, un lecteur concurrent voit donc
l'ancien cache : acceptable, la redirection qui suit relit le cache.
"""

from dataclasses import dataclass, field

from sqlalchemy.engine import Engine

from todo_app.core.config import Settings
from todo_app.core.locks import RWLock
from todo_app.features.todos.cache import TodoCache


@dataclass
class AppState:
    settings: Settings
    engine: Engine
    cache: TodoCache = field(default_factory=TodoCache)
    lock: RWLock = field(default_factory=RWLock)
