"""
Question Catalog - versioned question sets for the risk questionnaire.

A catalog holds three ordered question sets (capacity, willingness, bias).
Only scoring-relevant fields live on Question; presentation text (title,
prompt, "why this matters" note) is kept in a separate QuestionText map that
the scoring code never reads.

Catalogs are loaded from config/questions.yaml:

    version: "2.0"
    questions:
      capacity:
        - id: q1_emergency_fund
          weight: 3
          title: Emergency fund
          prompt: How many months of expenses ...
          options:
            - {value: 1, label: "None"}
            ...
      willingness: [...]
      bias:
        - id: q21_decision_confidence
          bias_tag: overconfidence
          ...
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
import logging

import yaml

from .errors import CatalogError
from .utils import find_config_file, load_config

_log = logging.getLogger(__name__)

CAPACITY = "capacity"
WILLINGNESS = "willingness"
BIAS = "bias"
CATEGORIES: Tuple[str, ...] = (CAPACITY, WILLINGNESS, BIAS)

MIN_OPTION_VALUE = 1
MAX_OPTION_VALUE = 5
QUESTIONS_PER_CATEGORY = 10


@dataclass(frozen=True)
class AnswerOption:
    value: int
    label: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Question:
    """Scoring view of one questionnaire item."""
    id: str
    category: str
    options: Tuple[AnswerOption, ...]
    weight: float = 1
    bias_tag: Optional[str] = None

    @property
    def option_values(self) -> Tuple[int, ...]:
        return tuple(o.value for o in self.options)


@dataclass(frozen=True)
class QuestionText:
    """Presentation metadata, owned by the questionnaire UI."""
    title: str
    prompt: str
    why_important: Optional[str] = None


@dataclass(frozen=True)
class QuestionCatalog:
    version: str
    capacity: Tuple[Question, ...]
    willingness: Tuple[Question, ...]
    bias: Tuple[Question, ...]
    texts: Mapping[str, QuestionText] = field(default_factory=dict, compare=False, hash=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "texts", MappingProxyType(dict(self.texts)))

    def questions(self, category: str) -> Tuple[Question, ...]:
        if category not in CATEGORIES:
            raise KeyError(f"Unknown question category: {category}")
        return getattr(self, category)

    def all_questions(self) -> Tuple[Question, ...]:
        return self.capacity + self.willingness + self.bias

    def question(self, question_id: str) -> Question:
        for q in self.all_questions():
            if q.id == question_id:
                return q
        raise KeyError(question_id)

    def text(self, question_id: str) -> Optional[QuestionText]:
        return self.texts.get(question_id)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], version: str = "unversioned") -> "QuestionCatalog":
        """
        Build a catalog from {"capacity": [...], "willingness": [...], "bias": [...]}.

        Items may be Question instances or raw dicts in the YAML item format.
        A "version" key in `data` takes precedence over the `version` argument.
        """
        sets: Dict[str, Tuple[Question, ...]] = {}
        texts: Dict[str, QuestionText] = {}
        for category in CATEGORIES:
            items = []
            for raw in data.get(category) or ():
                if isinstance(raw, Question):
                    items.append(raw)
                    continue
                q, txt = _parse_question(raw, category, source="<mapping>")
                items.append(q)
                if txt is not None:
                    texts[q.id] = txt
            sets[category] = tuple(items)
        _check_unique_ids(sets, source="<mapping>")
        return cls(version=str(data.get("version", version)), texts=texts, **sets)


def _parse_option(raw: Any, qid: str, source: str) -> AnswerOption:
    if isinstance(raw, AnswerOption):
        return raw
    try:
        value = raw["value"]
    except (KeyError, TypeError) as e:
        raise CatalogError(f"{source}: option of {qid} has no 'value'") from e
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogError(f"{source}: option value of {qid} must be an integer, got {value!r}")
    if not MIN_OPTION_VALUE <= value <= MAX_OPTION_VALUE:
        raise CatalogError(
            f"{source}: option value {value} of {qid} outside {MIN_OPTION_VALUE}..{MAX_OPTION_VALUE}"
        )
    return AnswerOption(value=value, label=str(raw.get("label", value)), description=raw.get("description"))


def _parse_question(raw: Any, category: str, source: str) -> Tuple[Question, Optional[QuestionText]]:
    if not isinstance(raw, Mapping) or not raw.get("id"):
        raise CatalogError(f"{source}: every {category} question needs an 'id'")
    qid = str(raw["id"])

    weight = raw.get("weight", 1)
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
        raise CatalogError(f"{source}: weight of {qid} must be a non-negative number, got {weight!r}")

    options = tuple(_parse_option(o, qid, source) for o in raw.get("options") or ())
    if not options:
        raise CatalogError(f"{source}: question {qid} has no options")

    bias_tag = raw.get("bias_tag")
    if category == BIAS and not bias_tag:
        raise CatalogError(f"{source}: bias question {qid} needs a 'bias_tag'")

    text = None
    if raw.get("title") or raw.get("prompt"):
        text = QuestionText(
            title=str(raw.get("title", "")),
            prompt=str(raw.get("prompt", "")),
            why_important=raw.get("why_important"),
        )
    q = Question(
        id=qid,
        category=category,
        options=options,
        weight=weight,
        bias_tag=str(bias_tag) if bias_tag else None,
    )
    return q, text


def _check_unique_ids(sets: Mapping[str, Iterable[Question]], source: str) -> None:
    seen = set()
    for category in CATEGORIES:
        for q in sets.get(category, ()):
            if q.id in seen:
                raise CatalogError(f"{source}: duplicate question id {q.id}")
            seen.add(q.id)


def get_questions_path() -> Path:
    """Get path to the questions file named in config.yaml."""
    name = load_config()["catalog"]["questions_file"]
    p = find_config_file(name)
    if p is None:
        raise FileNotFoundError(f"{name} not found in any config directory")
    return p


def load_catalog(path: str | Path | None = None) -> QuestionCatalog:
    """
    Load and validate a question catalog from YAML.

    Raises:
        FileNotFoundError: catalog file missing
        CatalogError: file is structurally malformed
    """
    catalog_path = Path(path) if path else get_questions_path()
    source = str(catalog_path)

    try:
        with open(catalog_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"{source}: invalid YAML") from e

    if not isinstance(data, Mapping) or not isinstance(data.get("questions"), Mapping):
        raise CatalogError(f"{source}: missing 'questions' key")
    questions = data["questions"]
    unknown = set(questions) - set(CATEGORIES)
    if unknown:
        raise CatalogError(f"{source}: unknown question categories {sorted(unknown)}")

    sets: Dict[str, Tuple[Question, ...]] = {}
    texts: Dict[str, QuestionText] = {}
    for category in CATEGORIES:
        parsed = []
        for raw in questions.get(category) or ():
            q, txt = _parse_question(raw, category, source)
            parsed.append(q)
            if txt is not None:
                texts[q.id] = txt
        sets[category] = tuple(parsed)
        if len(parsed) != QUESTIONS_PER_CATEGORY:
            _log.warning(
                f"{source}: {category} has {len(parsed)} questions, expected {QUESTIONS_PER_CATEGORY}"
            )
    _check_unique_ids(sets, source)

    catalog = QuestionCatalog(version=str(data.get("version", "unversioned")), texts=texts, **sets)
    _log.info(f"Loaded question catalog v{catalog.version} from {source}")
    return catalog


@lru_cache(maxsize=1)
def get_default_catalog() -> QuestionCatalog:
    """Catalog shipped in config/, loaded once per process."""
    return load_catalog()


__all__ = [
    "CAPACITY",
    "WILLINGNESS",
    "BIAS",
    "CATEGORIES",
    "QUESTIONS_PER_CATEGORY",
    "AnswerOption",
    "Question",
    "QuestionText",
    "QuestionCatalog",
    "load_catalog",
    "get_default_catalog",
    "get_questions_path",
]
