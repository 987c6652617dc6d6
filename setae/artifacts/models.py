from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from setae.errors import PayloadValidationError


class ArtifactType(str, Enum):
    YES_NO = "yes_no"
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKLIST = "checklist"
    RANKING = "ranking"
    CATEGORIZE = "categorize"
    DOCUMENT_REVIEW = "document_review"


class ArtifactStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    RETURNED = "returned"
    DISMISSED = "dismissed"


TERMINAL_STATUSES = frozenset(
    {ArtifactStatus.SUBMITTED.value, ArtifactStatus.RETURNED.value, ArtifactStatus.DISMISSED.value}
)
VARIANT_TYPES = tuple(item.value for item in ArtifactType)

SUBMIT = "submit"
ALL_ANSWERED = "all_answered"


def enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def describe_validation_error(exc: PydanticValidationError, *, skip: int = 0) -> str:
    """Collapse a pydantic error into one line of ``loc: msg`` pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][skip:]) or 'payload'}: {error['msg']}"
        for error in exc.errors()
    )


def _bool_or_unset(value: Any) -> Any:
    # Only JSON true/false count as answered; anything else reads as unset.
    return value if isinstance(value, bool) else None


class WireModel(BaseModel):
    """Base for models exchanged with the backend in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ConversationLink(WireModel):
    category: str
    name: str


class CompletionCondition(WireModel):
    field: str = "items"
    condition: str = ALL_ANSWERED


CompletionRule = Union[CompletionCondition, str]


# Payload records


class ItemRecord(WireModel):
    id: str
    label: str = ""
    description: Optional[str] = None


class ChoiceOption(ItemRecord):
    selected: bool = False


class ChecklistItem(ItemRecord):
    decision: Optional[StrictBool] = None
    comment: Optional[str] = None

    @field_validator("decision", mode="before")
    @classmethod
    def _strict_decision(cls, value: Any) -> Any:
        return _bool_or_unset(value)


class Heading(WireModel):
    id: str
    label: str = ""


class Paragraph(WireModel):
    id: str
    markdown: Optional[str] = None
    text: Optional[str] = None

    @property
    def body(self) -> str:
        return self.markdown or self.text or ""


class Annotation(WireModel):
    paragraph_id: str = ""
    comment: Optional[str] = None


# Payload variants


class YesNoPayload(WireModel):
    type: Literal["yes_no"] = "yes_no"
    prompt: Optional[str] = None
    answer: Optional[StrictBool] = None

    @field_validator("answer", mode="before")
    @classmethod
    def _strict_answer(cls, value: Any) -> Any:
        return _bool_or_unset(value)


class MultipleChoicePayload(WireModel):
    type: Literal["multiple_choice"] = "multiple_choice"
    prompt: Optional[str] = None
    multi_select: bool = False
    options: list[ChoiceOption] = Field(default_factory=list)
    selected: Optional[list[str]] = None


class ChecklistPayload(WireModel):
    type: Literal["checklist"] = "checklist"
    prompt: Optional[str] = None
    items: list[ChecklistItem] = Field(default_factory=list)


class RankingPayload(WireModel):
    type: Literal["ranking"] = "ranking"
    prompt: Optional[str] = None
    items: list[ItemRecord] = Field(default_factory=list)
    ranking: Optional[list[str]] = None


class CategorizePayload(WireModel):
    type: Literal["categorize"] = "categorize"
    prompt: Optional[str] = None
    headings: list[Heading] = Field(default_factory=list)
    items: list[ItemRecord] = Field(default_factory=list)
    buckets: dict[str, list[str]] = Field(default_factory=dict)
    categorize: Optional[dict[str, list[str]]] = None

    @property
    def arrangement(self) -> dict[str, list[str]]:
        # Reviewers write their arrangement under ``categorize``; older artifacts only carry ``buckets``.
        if self.categorize is not None:
            return self.categorize
        return self.buckets


class DocumentReviewPayload(WireModel):
    type: Literal["document_review"] = "document_review"
    prompt: Optional[str] = None
    document: str = ""
    paragraphs: list[Paragraph] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)


Payload = Annotated[
    Union[
        YesNoPayload,
        MultipleChoicePayload,
        ChecklistPayload,
        RankingPayload,
        CategorizePayload,
        DocumentReviewPayload,
    ],
    Field(discriminator="type"),
]

_PAYLOAD_ADAPTER: TypeAdapter[Any] = TypeAdapter(Payload)


def parse_payload(artifact_type: Any, data: Optional[Mapping[str, Any]]) -> Any:
    """Validate a raw payload mapping against the variant named by ``artifact_type``.

    The variant tag always comes from the artifact, never from the payload
    itself, so payloads written without a ``type`` key still validate.
    """
    type_value = enum_value(artifact_type)
    if type_value not in VARIANT_TYPES:
        raise PayloadValidationError(
            f"Unknown artifact type {type_value!r}. Valid types: {', '.join(VARIANT_TYPES)}"
        )
    raw = dict(data or {})
    raw["type"] = type_value
    try:
        return _PAYLOAD_ADAPTER.validate_python(raw)
    except PydanticValidationError as exc:
        details = describe_validation_error(exc, skip=1)
        raise PayloadValidationError(f"Invalid {type_value} payload: {details}") from exc


class Artifact(WireModel):
    id: str
    type: str
    status: str = ArtifactStatus.PENDING.value
    title: str = ""
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    conversation_link: Optional[ConversationLink] = None
    completion: CompletionRule = SUBMIT
    payload: dict[str, Any] = Field(default_factory=dict)

    @field_validator("completion", mode="before")
    @classmethod
    def _default_completion(cls, value: Any) -> Any:
        return SUBMIT if value is None else value

    @property
    def category(self) -> str:
        return _split_id(self.id)[0]

    @property
    def name(self) -> str:
        return _split_id(self.id)[1]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def artifact_type(self) -> Optional[ArtifactType]:
        try:
            return ArtifactType(self.type)
        except ValueError:
            return None

    def typed_payload(self) -> Any:
        return parse_payload(self.type, self.payload)

    def to_wire(self) -> dict[str, Any]:
        # Top-level None fields are dropped; payload values pass through untouched.
        data = self.model_dump(by_alias=True, mode="json")
        return {key: value for key, value in data.items() if value is not None}


def _split_id(artifact_id: str) -> tuple[str, str]:
    for separator in (":", "/"):
        if separator in artifact_id:
            category, name = artifact_id.split(separator, 1)
            return category, name
    return artifact_id, ""
