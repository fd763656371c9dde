"""Turn raw NocoDB records into validated domain entities.

Upstream records are schemaless: the same logical field may arrive under
different key casings, as a scalar where a list is expected, or not at all.
Each entity kind declares a schema of field rules; a record is resolved field by
field against its schema, coerced into canonical shapes and then handed to the
pydantic model for final validation. Rejected records are reported and yield
``None``.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple

from pydantic import BaseModel
from pydantic import ValidationError

from tool_directory.diagnostics import VALIDATION_ERROR
from tool_directory.diagnostics import Reporter
from tool_directory.diagnostics import default_reporter
from tool_directory.models import BlogPost
from tool_directory.models import EntityKind
from tool_directory.models import FAQItem
from tool_directory.models import Tool

_MISSING = object()

TEXT = "text"
IDENTIFIER = "identifier"
SEQUENCE = "sequence"
FAQ = "faq"
NUMBER = "number"
TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class FieldRule:
    candidates: Tuple[str, ...]
    shape: str = TEXT
    required: bool = False
    default: Any = ""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


TOOL_SCHEMA: Dict[str, FieldRule] = {
    "id": FieldRule(("Id", "id"), IDENTIFIER, required=True),
    "name": FieldRule(("Name", "name")),
    "description": FieldRule(("description",)),
    "banner_url": FieldRule(("banner_url",)),
    "categories": FieldRule(("categories",)),
    "date": FieldRule(("created_at", "CreatedAt"), TIMESTAMP, default=_now_iso),
    "features": FieldRule(("features",), SEQUENCE),
    "advantage": FieldRule(("advantage",), SEQUENCE),
    "inconvenient": FieldRule(("inconvenient",), SEQUENCE),
    "source_url": FieldRule(("source_url",), SEQUENCE),
    "youtube_url": FieldRule(("youtube_url",), SEQUENCE),
    "image": FieldRule(("image",), SEQUENCE),
    "logo": FieldRule(("logo",)),
    "tagline": FieldRule(("tagline",)),
    "pricing": FieldRule(("pricing",)),
    "website": FieldRule(("website",)),
    "rating": FieldRule(("rating",), NUMBER, default=None),
    "slug": FieldRule(("slug",)),
    "faq": FieldRule(("FAQ", "faq"), FAQ),
}

BLOG_POST_SCHEMA: Dict[str, FieldRule] = {
    "title": FieldRule(("Title", "title"), required=True),
    "content": FieldRule(("content",), required=True),
    "banner_url": FieldRule(("banner_url",), required=True),
    "category": FieldRule(("categorie", "category"), required=True),
    "slug": FieldRule(("slug",), required=True),
    "date": FieldRule(("created_at", "CreatedAt"), TIMESTAMP, default=_now_iso),
    "metadescription": FieldRule(("metadescription",)),
    "faq": FieldRule(("FAQ", "faq"), FAQ),
    "strucured_schema": FieldRule(("strucured_schema",), SEQUENCE),
    "created_at": FieldRule(("created_at", "CreatedAt"), TIMESTAMP, default=None),
    "updated_at": FieldRule(("updated_at", "UpdatedAt"), TIMESTAMP, default=None),
}

SCHEMAS: Dict[EntityKind, Tuple[Dict[str, FieldRule], type]] = {
    EntityKind.TOOL: (TOOL_SCHEMA, Tool),
    EntityKind.BLOG_POST: (BLOG_POST_SCHEMA, BlogPost),
}


class FieldError(Exception):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


def resolve_field(raw: Mapping[str, Any], candidates: Tuple[str, ...]) -> Any:
    """Return the first present value among ``candidates``.

    A value is present when it is neither ``None`` nor an empty string. If every
    candidate is absent but one of them holds ``""``, that empty string is
    returned so required text fields can still accept it.
    """
    empty = _MISSING
    for key in candidates:
        value = raw.get(key)
        if value is None:
            continue
        if value == "":
            if empty is _MISSING:
                empty = value
            continue
        return value
    return empty


def _default(rule: FieldRule) -> Any:
    return rule.default() if callable(rule.default) else rule.default


def _as_sequence(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _as_faq(value: Any) -> List[FAQItem]:
    if not isinstance(value, list):
        return []
    items = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        question, answer = entry.get("question"), entry.get("answer")
        if isinstance(question, str) and isinstance(answer, str):
            items.append(FAQItem(question=question, answer=answer))
    return items


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    # nan and inf parse as floats but are not ratings
    return number if math.isfinite(number) else None


def _coerce(name: str, rule: FieldRule, value: Any) -> Any:
    if rule.shape == SEQUENCE:
        return _as_sequence(value)
    if rule.shape == FAQ:
        return _as_faq(value)

    if value is _MISSING:
        if rule.required:
            raise FieldError(name, f"field required (looked for {', '.join(rule.candidates)})")
        return _default(rule)

    if rule.shape == NUMBER:
        number = _as_number(value)
        return number if number is not None else _default(rule)

    if rule.shape == IDENTIFIER:
        if value == "":
            raise FieldError(name, "identifier is empty")
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise FieldError(name, f"expected string or integer identifier, got {type(value).__name__}")
        return str(value)

    if isinstance(value, str):
        return value
    if rule.required:
        raise FieldError(name, f"expected string, got {type(value).__name__}")
    if rule.shape == TEXT and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return _default(rule)


def _record_label(raw: Mapping[str, Any]) -> Optional[str]:
    label = resolve_field(raw, ("slug", "Id", "id"))
    return None if label is _MISSING else str(label)


def _reject(reporter: Reporter, kind: EntityKind, record: Optional[str], errors: List[Tuple[str, str]]) -> None:
    for field_path, reason in errors:
        reporter.warning(
            VALIDATION_ERROR,
            f"Dropping {kind.value} record that failed validation",
            kind=kind.value,
            record=record,
            field=field_path,
            reason=reason,
        )


def normalize(kind: EntityKind, raw: Any, reporter: Optional[Reporter] = None) -> Optional[BaseModel]:
    """Normalize one raw record into the entity for ``kind``, or ``None`` if rejected."""
    reporter = reporter or default_reporter()
    schema, model = SCHEMAS[kind]

    if not isinstance(raw, Mapping):
        _reject(reporter, kind, None, [("<record>", f"expected an object, got {type(raw).__name__}")])
        return None

    label = _record_label(raw)
    values: Dict[str, Any] = {}
    errors: List[Tuple[str, str]] = []
    for name, rule in schema.items():
        try:
            values[name] = _coerce(name, rule, resolve_field(raw, rule.candidates))
        except FieldError as exc:
            errors.append((exc.field, exc.reason))

    if errors:
        _reject(reporter, kind, label, errors)
        return None

    try:
        return model(**values)
    except ValidationError as exc:
        _reject(
            reporter,
            kind,
            label,
            [(".".join(str(part) for part in err["loc"]), err["msg"]) for err in exc.errors()],
        )
        return None


def normalize_tool(raw: Any, reporter: Optional[Reporter] = None) -> Optional[Tool]:
    return normalize(EntityKind.TOOL, raw, reporter)


def normalize_blog_post(raw: Any, reporter: Optional[Reporter] = None) -> Optional[BlogPost]:
    return normalize(EntityKind.BLOG_POST, raw, reporter)
