"""
ReqUrl model: a distinct (method, url) route known to the repository.
"""

from pydantic import BaseModel


class ReqUrl(BaseModel):
    """
    A route key. URLs are exact strings, no template matching.

    Attributes:
        method: HTTP method token ("GET", "POST", ...)
        url: Exact request URL
    """

    method: str
    url: str

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "method": "POST",
                "url": "/api/v1/orders"
            }
        }
