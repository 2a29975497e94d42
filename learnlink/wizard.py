"""
Linear multi-step forms.

A wizard moves forward one step at a time. Moving past a step is refused
while any of that step's required fields is empty or its extra check
fails. Values entered on earlier steps are kept when going back.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from learnlink.exceptions import ValidationError

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


@dataclass
class WizardStep:
    title: str
    fields: Sequence[str] = ()
    required: Sequence[str] = ()
    message: str = REQUIRED_FIELDS_MESSAGE
    # Returns an error message, or None when the step is fine
    check: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None


@dataclass
class Wizard:
    steps: List[WizardStep]
    values: Dict[str, Any] = field(default_factory=dict)
    index: int = 0

    @property
    def step(self) -> WizardStep:
        return self.steps[self.index]

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def is_last(self) -> bool:
        return self.index == len(self.steps) - 1

    def set(self, name: str, value: Any) -> None:
        self.values[name] = value

    def get(self, name: str, default: Any = "") -> Any:
        return self.values.get(name, default)

    def missing(self, step: Optional[WizardStep] = None) -> List[str]:
        step = step or self.step
        return [name for name in step.required if is_blank(self.values.get(name))]

    def validate(self, step: Optional[WizardStep] = None) -> None:
        step = step or self.step
        missing = self.missing(step)
        if missing:
            raise ValidationError(step.message, field=missing[0])
        if step.check:
            problem = step.check(self.values)
            if problem:
                raise ValidationError(problem)

    def next(self) -> None:
        if self.is_last:
            return
        self.validate()
        self.index += 1

    def back(self) -> None:
        if self.index > 0:
            self.index -= 1

    def validate_all(self) -> None:
        """Run every step's gate, used right before submitting"""
        for step in self.steps:
            self.validate(step)

    def collected(self) -> Dict[str, Any]:
        """Every field any step declares, with what the user entered so far"""
        names = [name for step in self.steps for name in step.fields]
        return {name: self.values.get(name, "") for name in names}
