from typing import Optional

from pydantic import BaseModel


class HtmlPayload(BaseModel):
    html: Optional[str] = None
