from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel


class SendEmailRequest(BaseModel):
    # Presence checks live in compose_email so they return the API's own messages.
    to: Optional[Union[str, List[str]]] = None
    subject: Optional[str] = None
    body: Optional[str] = None


class SendEmailResponse(BaseModel):
    ok: bool = True
    messageId: str
