from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StringConstraints


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# Closed vocabulary, in the order the prompts list it
ALLOWED_COMPONENTS = [
    "Button",
    "Card",
    "Input",
    "Sidebar",
    "Navbar",
    "Modal",
    "Chart",
]

# Prop shapes as shown to the model. Must stay in sync with the models below.
COMPONENT_PROPS: dict[str, dict] = {
    "Button": {"label": "string"},
    "Card": {"title": "string", "content": "string", "description": "string"},
    "Input": {"label": "string", "placeholder": "string"},
    "Sidebar": {"header": "string", "items": [{"label": "string"}]},
    "Navbar": {"title": "string", "links": [{"label": "string"}]},
    "Modal": {"title": "string", "content": "string"},
    "Chart": {"title": "string", "data": [{"label": "string", "value": "number"}]},
}


class StrictProps(BaseModel):
    """Props may not carry anything the dictionary doesn't list."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class LabelItem(StrictProps):
    label: NonEmptyStr


class ChartPoint(StrictProps):
    label: NonEmptyStr
    value: Union[StrictInt, StrictFloat]


class ButtonProps(StrictProps):
    label: NonEmptyStr


class CardProps(StrictProps):
    title: NonEmptyStr
    content: NonEmptyStr
    description: NonEmptyStr


class InputProps(StrictProps):
    label: NonEmptyStr
    placeholder: NonEmptyStr


class SidebarProps(StrictProps):
    header: NonEmptyStr
    items: list[LabelItem] = Field(min_length=1)


class NavbarProps(StrictProps):
    title: NonEmptyStr
    links: list[LabelItem] = Field(min_length=1)


class ModalProps(StrictProps):
    title: NonEmptyStr
    content: NonEmptyStr


class ChartProps(StrictProps):
    title: NonEmptyStr
    data: list[ChartPoint] = Field(min_length=1)


class _Spec(BaseModel):
    model_config = ConfigDict(frozen=True)


class ButtonSpec(_Spec):
    name: Literal["Button"]
    props: ButtonProps


class CardSpec(_Spec):
    name: Literal["Card"]
    props: CardProps


class InputSpec(_Spec):
    name: Literal["Input"]
    props: InputProps


class SidebarSpec(_Spec):
    name: Literal["Sidebar"]
    props: SidebarProps


class NavbarSpec(_Spec):
    name: Literal["Navbar"]
    props: NavbarProps


class ModalSpec(_Spec):
    name: Literal["Modal"]
    props: ModalProps


class ChartSpec(_Spec):
    name: Literal["Chart"]
    props: ChartProps


# The component name picks which prop model applies
ComponentSpec = Annotated[
    Union[ButtonSpec, CardSpec, InputSpec, SidebarSpec, NavbarSpec, ModalSpec, ChartSpec],
    Field(discriminator="name"),
]


class Plan(BaseModel):
    """Planner output. Validated once, then shared read-only by later stages."""

    model_config = ConfigDict(frozen=True)

    type: Literal["create", "modify"]
    components: list[ComponentSpec] = Field(min_length=1)

    def component_names(self) -> list[str]:
        return [c.name for c in self.components]
