from pydantic import BaseModel
from datetime import datetime

class BaseDocument(BaseModel):
    id: str
    created: datetime
