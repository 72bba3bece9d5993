from typing import Optional

from pydantic import BaseModel

# ---------- Inputs (formulaires HTML) ----------
# Le titre n'est pas contraint ici : un titre vide doit produire la page 400,
# pas une réponse 422 JSON.

class TodoIn(BaseModel):
    title: str = ""
    description: str = ""

class TodoEditIn(TodoIn):
    status: Optional[str] = None  # case à cocher : absente si décochée
