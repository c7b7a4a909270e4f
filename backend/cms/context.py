from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, MutableMapping
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from .config import Settings


@dataclass
class RequestContext:
    """Everything one request needs, passed explicitly instead of globals."""

    method: str
    path: str
    db: Session
    config: Settings
    session: MutableMapping[str, Any]
    base_path: str = ""
    query: Mapping[str, str] = field(default_factory=dict)
    form: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_post(self) -> bool:
        return self.method.upper() == "POST"

    def url(self, path: str = "", **params: Any) -> str:
        url = f"{self.base_path.rstrip('/')}/{path.lstrip('/')}"
        if params:
            url += "?" + urlencode(params)
        return url


def form_to_dict(form: Mapping[str, Any]) -> Dict[str, str]:
    """Keep plain text fields only; uploads are not part of any CMS form."""
    return {key: value for key, value in form.items() if isinstance(value, str)}
