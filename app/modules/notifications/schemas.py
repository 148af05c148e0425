from pydantic import BaseModel, Field
from typing import Dict, List


class Notification(BaseModel):
    recipients: List[str]  # firebase uids
    title: str
    body: str
    data: Dict[str, str] = Field(default_factory=dict)
