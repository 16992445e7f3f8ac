"""JSON encoding of command results."""

from __future__ import annotations

import datetime
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class JsonEncoder(json.JSONEncoder):
    """Serialize the values found in pipeline results and AWS responses.

    Pass as ``cls`` to :func:`json.dumps`.

    """

    def default(self, o: Any) -> Any:
        """Convert ``o`` to something the base encoder understands.

        Raises:
            TypeError: ``o`` has no JSON representation.

        """
        if isinstance(o, BaseModel):
            return o.model_dump(by_alias=True, exclude_none=True)
        if isinstance(o, (datetime.date, datetime.datetime)):
            return o.isoformat()
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, (set, frozenset, tuple)):
            return list(o)
        if isinstance(o, Path):
            return o.as_posix()
        return super().default(o)
