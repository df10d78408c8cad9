"""
Base protocol and types for question handlers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Protocol

from pydantic import AliasChoices, Field
from rich import box
from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.text import Text

from formcraft.core.base_model import FormcraftModel

from . import QuestionType


class ValidationPolicy(str, Enum):
    """How strictly required questions are checked at submit time."""
    LEGACY = "legacy"  # only mapping-shaped types must be non-empty
    STRICT = "strict"  # every required question must be fully answered


@dataclass
class ValidationResult:
    """Result of checking one answer."""
    complete: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(complete=True)

    @classmethod
    def incomplete(cls, reason: str) -> "ValidationResult":
        return cls(complete=False, reason=reason)


@dataclass(frozen=True)
class FieldSpec:
    """One authorable field of a question type."""
    name: str
    kind: str
    required: bool = False
    description: str | None = None
    constraints: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QuestionShape:
    """Field contract of a question type, derived from its model."""
    type: QuestionType
    label: str
    fields: tuple[FieldSpec, ...]
    schema: dict[str, Any]

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


class QuestionBase(FormcraftModel):
    """Fields shared by every question type."""

    type: QuestionType
    prompt: str = Field(
        default="",
        validation_alias=AliasChoices("prompt", "question"),
        description="Question text shown to the respondent",
    )
    image_ref: str | None = Field(
        default=None,
        validation_alias=AliasChoices("imageRef", "image_ref", "image"),
        description="URI of an image shown with the prompt",
    )
    required: bool = Field(default=False, description="Must be answered before submit")
    points: float = Field(default=1, ge=0, description="Points awarded for this question")
    explanation: str = Field(default="", description="Shown after answering")


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty containers."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) == 0
    return False


def is_filled_mapping(value: Any) -> bool:
    return isinstance(value, Mapping) and len(value) > 0


class QuestionHandler(Protocol):
    """Protocol for question type handlers."""

    type: QuestionType
    label: str
    model: type[QuestionBase]

    def shape(self) -> QuestionShape:
        """Describe the authorable fields of this type."""
        ...

    def default(self) -> QuestionBase:
        """Minimally valid question of this type."""
        ...

    def lint(self, question: QuestionBase) -> list[str]:
        """Soft authoring problems. Never blocks saving."""
        ...

    def check(self, question: QuestionBase, answer: Any, policy: ValidationPolicy) -> ValidationResult:
        """Decide whether a required question is completely answered."""
        ...

    def render(self, question: QuestionBase, console: Console) -> None:
        """Display the question for preview."""
        ...


def _field_kind(prop: dict[str, Any]) -> str:
    if "type" in prop:
        kind = prop["type"]
        if kind == "array" and isinstance(prop.get("items"), dict):
            return f"array[{_field_kind(prop['items'])}]"
        return kind
    if "enum" in prop:
        return "enum"
    if "$ref" in prop:
        return "object"
    variants = [_field_kind(p) for p in prop.get("anyOf", []) if p.get("type") != "null"]
    return "|".join(variants) or "any"


_CONSTRAINT_KEYS = ("minimum", "maximum", "exclusiveMinimum", "minLength", "maxLength", "enum", "format")


def _constraints(prop: dict[str, Any]) -> dict[str, Any]:
    found = {k: prop[k] for k in _CONSTRAINT_KEYS if k in prop}
    for variant in prop.get("anyOf", []):
        found.update({k: variant[k] for k in _CONSTRAINT_KEYS if k in variant})
    if "default" in prop:
        found["default"] = prop["default"]
    return found


class BaseQuestionHandler:
    """Shared behaviour for handlers; subclasses set type, label and model."""

    type: ClassVar[QuestionType]
    label: ClassVar[str]
    model: ClassVar[type[QuestionBase]]
    title: ClassVar[str] = "QUESTION"

    def shape(self) -> QuestionShape:
        schema = self.model.model_json_schema(by_alias=True)
        required = set(schema.get("required", []))
        fields = tuple(
            FieldSpec(
                name=name,
                kind=_field_kind(prop),
                required=name in required,
                description=prop.get("description"),
                constraints=_constraints(prop),
            )
            for name, prop in schema.get("properties", {}).items()
            if name != "type"
        )
        return QuestionShape(type=self.type, label=self.label, fields=fields, schema=schema)

    def default(self) -> QuestionBase:
        return self.model(type=self.type)

    def lint(self, question: QuestionBase) -> list[str]:
        return [] if question.prompt.strip() else ["Prompt is empty"]

    def check(self, question: QuestionBase, answer: Any, policy: ValidationPolicy) -> ValidationResult:
        if policy is ValidationPolicy.LEGACY:
            return ValidationResult.ok()
        return self.check_strict(question, answer)

    def check_strict(self, question: QuestionBase, answer: Any) -> ValidationResult:
        if is_blank(answer):
            return ValidationResult.incomplete("Please answer this question")
        return ValidationResult.ok()

    def body(self, question: QuestionBase) -> RenderableType | None:
        return None

    def render(self, question: QuestionBase, console: Console) -> None:
        header = Text(question.prompt or "(no prompt)", style="bold")
        if question.required:
            header.append(" *", style="red")
        console.print(
            Panel(
                header,
                title=f"[bold cyan]{self.title}[/bold cyan]",
                border_style="cyan",
                box=box.HEAVY,
                padding=(0, 2),
            )
        )
        if question.image_ref:
            console.print(f"[dim]Image: {question.image_ref}[/dim]")
        body = self.body(question)
        if body is not None:
            console.print(body)
