from fastapi import APIRouter, HTTPException

from genui.models.components import ALLOWED_COMPONENTS, COMPONENT_PROPS

router = APIRouter()


@router.get("/components")
async def list_components():
    """Component vocabulary with the props each one requires."""
    return {"components": [{"name": name, "props": COMPONENT_PROPS[name]} for name in ALLOWED_COMPONENTS]}


@router.get("/components/{name}")
async def get_component(name: str):
    props = COMPONENT_PROPS.get(name)
    if props is None:
        raise HTTPException(status_code=404, detail="Component not found")
    return {"name": name, "props": props}
