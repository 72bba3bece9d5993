"""
➡️ But : Fournir un verrou lecteurs/rédacteur asynchrone (plusieurs lecteurs OU un seul rédacteur).

Utilisé pour protéger l'état partagé de l'application (engine + config + cache des todos).

⚠️ Ne jamais tenir `read()` et `write()` en même temps dans la même tâche :
le rédacteur attend que tous les lecteurs soient partis → auto-interblocage.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class RWLock:
    """
    Verrou lecteurs/rédacteur basé sur asyncio.Condition.

    Priorité aux rédacteurs : dès qu'un rédacteur attend, les nouveaux
    lecteurs patientent (évite la famine des écritures).
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writing(self) -> bool:
        return self._writer

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._waiting_writers == 0)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._waiting_writers += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            finally:
                # rédacteur annulé : les lecteurs bloqués doivent réévaluer
                self._waiting_writers -= 1
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()
