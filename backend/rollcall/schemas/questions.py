"""Question definitions as a discriminated union on ``type``.

Each variant carries its own ``config`` schema and knows how to check an
answer submitted against it, so response validation never branches on the
type string.
"""

from datetime import date, datetime, time
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)

_url_adapter = TypeAdapter(AnyHttpUrl)


def is_blank(value: Any) -> bool:
    """True for values that count as "no answer"."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


# ---------------------------------------------------------------------------
# Config schemas
# ---------------------------------------------------------------------------


class TextConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    min_length: int | None = Field(None, ge=0)
    max_length: int | None = Field(None, ge=1)
    placeholder: str | None = None

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ValueError("min_length cannot exceed max_length")
        return self


class ChoiceOption(BaseModel):
    label: str = Field(..., min_length=1, max_length=255)
    value: str = Field(..., min_length=1, max_length=255)


class ChoiceConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    options: list[ChoiceOption] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_unique_values(self):
        values = [opt.value for opt in self.options]
        if len(set(values)) != len(values):
            raise ValueError("option values must be unique")
        return self

    def option_values(self) -> list[str]:
        return [opt.value for opt in self.options]


class CheckboxConfig(ChoiceConfig):
    min_selected: int | None = Field(None, ge=0)
    max_selected: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def _check_selection_bounds(self):
        if (
            self.min_selected is not None
            and self.max_selected is not None
            and self.min_selected > self.max_selected
        ):
            raise ValueError("min_selected cannot exceed max_selected")
        if self.max_selected is not None and self.max_selected > len(self.options):
            raise ValueError("max_selected cannot exceed the number of options")
        return self


class ScaleConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    min: int = 1
    max: int = 5
    step: int = Field(1, ge=1)
    min_label: str | None = None
    max_label: str | None = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.min >= self.max:
            raise ValueError("min must be less than max")
        return self


class InputConfig(BaseModel):
    """Config for inputs with no type-specific options (date, time, URL)."""

    model_config = ConfigDict(extra="allow")

    placeholder: str | None = None


class ContentBlockConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    body: str | None = None


# ---------------------------------------------------------------------------
# Question variants
# ---------------------------------------------------------------------------


class _QuestionBase(BaseModel):
    answerable: ClassVar[bool] = True

    question_text: str = Field(..., min_length=1, max_length=255)
    question_description: str | None = None
    required: bool = False

    def answer_errors(self, value: Any) -> list[str]:
        """Return problems with ``value`` as an answer to this question."""
        if is_blank(value):
            if self.required:
                return [f"Question '{self.question_text}' is required"]
            return []
        return [f"Question '{self.question_text}': {msg}" for msg in self._check(value)]

    def _check(self, value: Any) -> list[str]:
        return []


class _TextQuestion(_QuestionBase):
    default_max_length: ClassVar[int | None] = None

    config: TextConfig = Field(default_factory=TextConfig)

    def _check(self, value: Any) -> list[str]:
        if not isinstance(value, str):
            return ["answer must be text"]
        errors = []
        max_length = self.config.max_length or self.default_max_length
        if self.config.min_length is not None and len(value) < self.config.min_length:
            errors.append(f"answer must be at least {self.config.min_length} characters")
        if max_length is not None and len(value) > max_length:
            errors.append(f"answer must be at most {max_length} characters")
        return errors


class ShortTextQuestion(_TextQuestion):
    default_max_length: ClassVar[int | None] = 255

    type: Literal["SHORT_TEXT"]


class LongTextQuestion(_TextQuestion):
    type: Literal["LONG_TEXT"]


class SingleChoiceQuestion(_QuestionBase):
    """Pick exactly one option: radio buttons, multiple choice or a dropdown."""

    type: Literal["MULTIPLE_CHOICE", "RADIO", "DROPDOWN"]
    config: ChoiceConfig

    def _check(self, value: Any) -> list[str]:
        if value not in self.config.option_values():
            return [f"'{value}' is not a valid option"]
        return []


class CheckboxesQuestion(_QuestionBase):
    type: Literal["CHECKBOXES"]
    config: CheckboxConfig

    def _check(self, value: Any) -> list[str]:
        if not isinstance(value, list):
            return ["answer must be a list of options"]
        errors = []
        valid = self.config.option_values()
        invalid = [v for v in value if v not in valid]
        if invalid:
            errors.append(f"invalid options: {', '.join(str(v) for v in invalid)}")
        if len(set(map(str, value))) != len(value):
            errors.append("options must not repeat")
        if self.config.min_selected is not None and len(value) < self.config.min_selected:
            errors.append(f"select at least {self.config.min_selected} options")
        if self.config.max_selected is not None and len(value) > self.config.max_selected:
            errors.append(f"select at most {self.config.max_selected} options")
        return errors


class LinearScaleQuestion(_QuestionBase):
    type: Literal["LINEAR_SCALE"]
    config: ScaleConfig = Field(default_factory=ScaleConfig)

    def _check(self, value: Any) -> list[str]:
        if isinstance(value, bool):
            return ["scale answer must be an integer"]
        try:
            rating = int(value)
        except (ValueError, TypeError, OverflowError):
            return ["scale answer must be an integer"]
        if isinstance(value, float) and value != rating:
            return ["scale answer must be an integer"]
        cfg = self.config
        if rating < cfg.min or rating > cfg.max:
            return [f"scale answer must be between {cfg.min} and {cfg.max}"]
        if (rating - cfg.min) % cfg.step:
            return [f"scale answer must be in steps of {cfg.step} from {cfg.min}"]
        return []


class DateQuestion(_QuestionBase):
    type: Literal["DATE"]
    config: InputConfig = Field(default_factory=InputConfig)

    def _check(self, value: Any) -> list[str]:
        try:
            date.fromisoformat(value)
        except (ValueError, TypeError):
            return ["answer must be an ISO date (YYYY-MM-DD)"]
        return []


class TimeQuestion(_QuestionBase):
    type: Literal["TIME"]
    config: InputConfig = Field(default_factory=InputConfig)

    def _check(self, value: Any) -> list[str]:
        try:
            time.fromisoformat(value)
        except (ValueError, TypeError):
            return ["answer must be an ISO time (HH:MM)"]
        return []


class DateTimeQuestion(_QuestionBase):
    type: Literal["DATE_TIME"]
    config: InputConfig = Field(default_factory=InputConfig)

    def _check(self, value: Any) -> list[str]:
        try:
            datetime.fromisoformat(value)
        except (ValueError, TypeError):
            return ["answer must be an ISO date-time"]
        return []


class UrlQuestion(_QuestionBase):
    type: Literal["URL"]
    config: InputConfig = Field(default_factory=InputConfig)

    def _check(self, value: Any) -> list[str]:
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            return ["answer must be a valid http(s) URL"]
        return []


class ContentBlockQuestion(_QuestionBase):
    """Display-only text between questions."""

    answerable: ClassVar[bool] = False

    type: Literal["CONTENT_BLOCK"]
    required: Literal[False] = False
    config: ContentBlockConfig = Field(default_factory=ContentBlockConfig)

    def answer_errors(self, value: Any) -> list[str]:
        if value is not None:
            return [f"Question '{self.question_text}' does not accept an answer"]
        return []


QuestionDefinition = Annotated[
    Union[
        ShortTextQuestion,
        LongTextQuestion,
        SingleChoiceQuestion,
        CheckboxesQuestion,
        LinearScaleQuestion,
        DateQuestion,
        TimeQuestion,
        DateTimeQuestion,
        UrlQuestion,
        ContentBlockQuestion,
    ],
    Field(discriminator="type"),
]

question_adapter: TypeAdapter[QuestionDefinition] = TypeAdapter(QuestionDefinition)
